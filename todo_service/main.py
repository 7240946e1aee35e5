"""FastAPI entrypoint for the todo list service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from todo_service.config import AppConfig, load_config
from todo_service.errors import ErrorResponse, McpError, error_response
from todo_service.list_store import ListStore
from todo_service.mcp import register_mcp_handlers
from todo_service.webhooks import WebhookNotifier
from todo_service.workspace import AUTH_EXEMPT_PATHS, SERVICE_TOKEN_HEADER

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_config = config or load_config()
        app_config.workspace_path.mkdir(parents=True, exist_ok=True)
        app.state.config = app_config
        app.state.workspace_path = app_config.workspace_path
        app.state.store = ListStore(
            app_config.workspace_path, git_history=app_config.git_history
        )
        app.state.notifier = (
            WebhookNotifier(app_config.webhook_url, timeout=app_config.webhook_timeout)
            if app_config.webhook_url
            else None
        )
        logger.info("workspace: %s", app_config.workspace_path)
        try:
            yield
        finally:
            if app.state.notifier is not None:
                app.state.notifier.close()

    app = FastAPI(lifespan=lifespan)

    @app.middleware("http")
    async def enforce_service_token(request: Request, call_next):
        if request.url.path in AUTH_EXEMPT_PATHS:
            return await call_next(request)

        app_config = getattr(request.app.state, "config", None)
        service_token = getattr(app_config, "service_token", None)
        if service_token:
            supplied_token = request.headers.get(SERVICE_TOKEN_HEADER)
            if supplied_token != service_token:
                error = ErrorResponse(
                    code="AUTH_FORBIDDEN",
                    message="Invalid service token.",
                    details={"header": SERVICE_TOKEN_HEADER},
                )
                return JSONResponse(status_code=403, content=error_response(error))

        return await call_next(request)

    @app.exception_handler(McpError)
    def handle_mcp_error(request: Request, exc: McpError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code, content=error_response(exc.error)
        )

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    register_mcp_handlers(app)
    return app


app = create_app()
