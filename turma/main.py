"""
Turma FastAPI application entry point.

Teams own projects, tasks and channels; every team-scoped route goes through
the authorization core in turma.services.authorization.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from turma import __version__
from turma.config import get_settings
from turma.db.session import check_db_connection, engine
from turma.services.authorization import AuthorizationError, DenyReason

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# One status per denial reason, identical for every resource
STATUS_BY_REASON: dict[DenyReason, int] = {
    DenyReason.NOT_AUTHENTICATED: 401,
    DenyReason.NOT_FOUND: 404,
    DenyReason.FORBIDDEN: 403,
    DenyReason.LAST_ADMIN: 400,
    DenyReason.INVALID_ROLE: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Turma starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        yield
    finally:
        logger.info("Turma shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    """Translate an authorization denial into its HTTP status."""
    return JSONResponse(
        status_code=STATUS_BY_REASON[exc.reason],
        content={"detail": exc.detail, "reason": exc.reason.value},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(AuthorizationError, authorization_error_handler)

    # Mount API routes
    from turma.api import (
        auth_router,
        channels_router,
        internal_router,
        messages_router,
        notifications_router,
        projects_router,
        quotations_router,
        tasks_router,
        teams_router,
    )

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(teams_router, prefix="/api/teams", tags=["teams"])
    app.include_router(projects_router, prefix="/api/projects", tags=["projects"])
    app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(channels_router, prefix="/api/channels", tags=["channels"])
    app.include_router(messages_router, prefix="/api/messages", tags=["messages"])
    app.include_router(
        notifications_router, prefix="/api/notifications", tags=["notifications"]
    )
    app.include_router(quotations_router, prefix="/api/quotations", tags=["quotations"])

    # Internal job endpoints (cron/scripts, token-authenticated)
    app.include_router(internal_router, tags=["internal"])

    @app.get("/health")
    def health() -> JSONResponse:
        """Report the service name, version and whether the database answers."""
        body = {"app": settings.app_name, "version": __version__}
        try:
            check_db_connection()
        except Exception:
            logger.warning("Health check failed: database unreachable", exc_info=True)
            return JSONResponse(
                status_code=503,
                content={**body, "status": "unhealthy", "database": "disconnected"},
            )
        return JSONResponse(content={**body, "status": "ok", "database": "connected"})

    return app


app = create_app()
