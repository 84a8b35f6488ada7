# graide/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from graide.core.config import Settings, settings as default_settings
from graide.core.errors import (
    AuthExpiredError, BackendError, GraideError, InvalidInputError, InvalidTransitionError,
    NotAuthenticatedError, NotFoundError, RowDecodeError, WorkspaceNotConfiguredError,
)
from graide.database.google_api import StaticTokenProvider
from graide.database.sheets_table_store import SheetsTableStore
from graide.database.spreadsheet_backend import GoogleSheetsBackend
from graide.routers.v1 import classes, config, health, rubrics, submissions, tests, workspace
from graide.schemas.workspace import WorkspaceStateStore
from graide.services.schema_reconciler import SchemaReconciler

logger = logging.getLogger("graide")

ERROR_STATUS = {
    NotAuthenticatedError: 401,
    AuthExpiredError: 401,
    NotFoundError: 404,
    InvalidInputError: 422,
    WorkspaceNotConfiguredError: 409,
    InvalidTransitionError: 409,
    BackendError: 502,
    RowDecodeError: 500,
}


async def graide_error_handler(_request: Request, exc: GraideError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), 500)
    if status_code >= 500:
        logger.error("Request failed: %s", exc, extra={"code": exc.code})
    else:
        logger.info("Request rejected: %s", exc, extra={"code": exc.code})
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": exc.code})


async def reconcile_at_startup(cfg: Settings, http: httpx.AsyncClient, state: WorkspaceStateStore) -> None:
    context = state.load()
    if not (cfg.reconcile_on_startup and cfg.service_token and context.spreadsheet_id):
        logger.info("Skipping startup reconciliation")
        return
    backend = GoogleSheetsBackend(http, StaticTokenProvider(cfg.service_token), cfg.sheets_api_base)
    try:
        result = await SchemaReconciler(SheetsTableStore(backend, context)).reconcile()
    except GraideError:
        # retried on the next start or through POST /workspace/reconcile
        logger.exception("Startup reconciliation failed")
        return
    logger.info("Startup reconciliation done", extra={"version": result.current_version, "created_tables": result.created_tables})


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or default_settings
    logging.basicConfig(level=cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http = httpx.AsyncClient(timeout=cfg.http_timeout)
        state = WorkspaceStateStore(cfg.workspace_state_path)

        app.state.settings = cfg
        app.state.http_client = http
        app.state.workspace_state = state

        try:
            await reconcile_at_startup(cfg, http, state)
            yield
        finally:
            await http.aclose()

    app = FastAPI(
        title="grAIde",
        description="Classes, students and assessments stored in a Google Sheet",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cfg.cors_origins.split(",")], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )
    app.add_exception_handler(GraideError, graide_error_handler)

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(workspace.router, prefix="/api/v1", tags=["workspace"])
    app.include_router(classes.router, prefix="/api/v1", tags=["classes"])
    app.include_router(tests.router, prefix="/api/v1", tags=["tests"])
    app.include_router(submissions.router, prefix="/api/v1", tags=["submissions"])
    app.include_router(rubrics.router, prefix="/api/v1", tags=["rubrics"])
    app.include_router(config.router, prefix="/api/v1", tags=["config"])
    return app


app = create_app()
