"""
Resource business logic: id parsing, repository calls, error translation.

Repository errors become HTTPExceptions here; the routers stay thin.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from . import repository, schemas

# BIGINT identity columns top out at 2**63 - 1.
MAX_RESOURCE_ID = 2**63 - 1


def parse_resource_id(raw_id: str, *, kind: repository.ResourceKind) -> int:
    raw = (raw_id or "").strip()
    if not raw.isascii() or not raw.isdigit():
        raise repository.InvalidIdentifierError(f"Invalid {kind.label.lower()} id: {raw_id!r}")
    value = int(raw)
    if value < 1 or value > MAX_RESOURCE_ID:
        raise repository.InvalidIdentifierError(f"Invalid {kind.label.lower()} id: {raw_id!r}")
    return value


def _to_resource_response(row: dict) -> schemas.ResourceResponse:
    return schemas.ResourceResponse(
        id=int(row["id"]),
        name=str(row["name"]),
        description=str(row["description"]),
        due_date=str(row["due_date"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _store_failure(kind: repository.ResourceKind, exc: repository.StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{kind.label} store operation failed: {exc}",
    )


def _not_found(kind: repository.ResourceKind) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{kind.label} not found.",
    )


def _resolve_id(raw_id: str, kind: repository.ResourceKind) -> int:
    try:
        return parse_resource_id(raw_id, kind=kind)
    except repository.InvalidIdentifierError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {kind.label.lower()} id.",
        ) from exc


async def list_resources(repo: repository.ResourceRepository) -> list[schemas.ResourceResponse]:
    try:
        rows = await repo.list_all()
    except repository.StoreError as exc:
        raise _store_failure(repo.kind, exc) from exc
    return [_to_resource_response(row) for row in rows]


async def get_resource(repo: repository.ResourceRepository, raw_id: str) -> schemas.ResourceResponse:
    resource_id = _resolve_id(raw_id, repo.kind)
    try:
        row = await repo.get(resource_id)
    except repository.ResourceNotFoundError as exc:
        raise _not_found(repo.kind) from exc
    except repository.StoreError as exc:
        raise _store_failure(repo.kind, exc) from exc
    return _to_resource_response(row)


async def create_resource(
    repo: repository.ResourceRepository,
    payload: schemas.ResourceCreate,
) -> schemas.ResourceResponse:
    try:
        row = await repo.create(
            name=payload.name,
            description=payload.description,
            due_date=payload.due_date,
        )
    except repository.StoreError as exc:
        raise _store_failure(repo.kind, exc) from exc
    return _to_resource_response(row)


async def delete_resource(repo: repository.ResourceRepository, raw_id: str) -> None:
    resource_id = _resolve_id(raw_id, repo.kind)
    try:
        await repo.delete(resource_id)
    except repository.ResourceNotFoundError as exc:
        raise _not_found(repo.kind) from exc
    except repository.StoreError as exc:
        raise _store_failure(repo.kind, exc) from exc
