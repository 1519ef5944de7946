"""
FastAPI routers for the task and goal collections.

Both collections expose the same four endpoints, so one factory builds a
router per resource kind. Every route sits behind the API-key gate.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from auth import dependencies as auth_dependencies

from . import repository, schemas, service


def build_router(kind: repository.ResourceKind) -> APIRouter:
    plural = kind.label + "s"

    def get_repository(request: Request) -> repository.ResourceRepository:
        return request.app.state.repositories[kind.collection]

    router = APIRouter(
        prefix=f"/{kind.collection}",
        tags=[plural],
        dependencies=[Depends(auth_dependencies.require_api_key)],
    )

    @router.get(
        "",
        response_model=list[schemas.ResourceResponse],
        summary=f"List all {plural.lower()}",
    )
    async def list_resources(
        repo: repository.ResourceRepository = Depends(get_repository),
    ) -> list[schemas.ResourceResponse]:
        return await service.list_resources(repo)

    @router.get(
        "/{resource_id}",
        response_model=schemas.ResourceResponse,
        summary=f"Get one {kind.label.lower()} by id",
    )
    async def get_resource(
        resource_id: str,
        repo: repository.ResourceRepository = Depends(get_repository),
    ) -> schemas.ResourceResponse:
        return await service.get_resource(repo, resource_id)

    @router.post(
        "",
        response_model=schemas.ResourceResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {kind.label.lower()}",
    )
    async def create_resource(
        payload: schemas.ResourceCreate,
        repo: repository.ResourceRepository = Depends(get_repository),
    ) -> schemas.ResourceResponse:
        return await service.create_resource(repo, payload)

    @router.delete(
        "/{resource_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        summary=f"Delete a {kind.label.lower()} by id",
    )
    async def delete_resource(
        resource_id: str,
        repo: repository.ResourceRepository = Depends(get_repository),
    ) -> Response:
        await service.delete_resource(repo, resource_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


tasks_router = build_router(repository.TASKS)
goals_router = build_router(repository.GOALS)
