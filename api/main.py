import logging
import os
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from auth import dependencies as auth_dependencies
from core import db, errors, log, settings
from resources import repository as resource_repository
from resources import router as resources_router

API_DESCRIPTION = (
    "Task and goal planner API.\n\n"
    "**Authentication:** endpoints under `/tasks` and `/goals` require the shared API key "
    "in the `Authorization` header. Send the key itself, without a `Bearer ` prefix.\n\n"
    "Use the **Authorize** button to set the key for the requests sent from this page."
)

PROTECTED_ROUTERS = (resources_router.tasks_router, resources_router.goals_router)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The store must answer before we serve; any failure here stops the process.
    backend = settings.store_backend()
    try:
        if backend == "postgres":
            await db.init_pool()
        repositories = resource_repository.build_repositories(backend)
        for repo in repositories.values():
            await repo.ensure_schema()
    except Exception:
        logger.exception("store_startup_failed backend=%s", backend)
        await db.close_pool()
        raise

    app.state.repositories = repositories
    logger.info("store_ready backend=%s", backend)
    try:
        yield
    finally:
        await db.close_pool()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Nawal Planner API",
        version="1.0.0",
        description=API_DESCRIPTION,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    protected_prefixes = tuple(router.prefix for router in PROTECTED_ROUTERS)

    # Middleware added later wraps middleware added earlier: CORS is outermost,
    # then the access log, then the API-key gate.
    @app.middleware("http")
    async def gate_protected_groups(request: Request, call_next):
        # Runs before routing and body parsing.
        if auth_dependencies.is_protected_path(request.url.path, protected_prefixes):
            try:
                auth_dependencies.check_api_key(request.headers.get("authorization"), settings.api_key())
            except HTTPException as exc:
                return JSONResponse(
                    status_code=exc.status_code,
                    content=errors.error_body(str(exc.detail), status_code=exc.status_code, error_type="http"),
                )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request method=%s path=%s status=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000,
            )

    origins = settings.cors_allow_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    errors.install_error_handlers(app)

    static_dir = settings.static_dir()
    if static_dir and os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", tags=["public"])
    def root() -> dict:
        return {"message": "Welcome to Nawal Planner API"}

    @app.get("/users", tags=["public"])
    def users() -> dict:
        return {"message": "Users API endpoint"}

    @app.get("/health", tags=["public"])
    def health() -> dict:
        return {"status": "ok"}

    for router in PROTECTED_ROUTERS:
        app.include_router(router)
    return app


log.setup_logging(settings.log_level())
app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.host(), port=settings.port(), log_config=None)
