"""Support Desk — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from support_desk.adapters.persistence.database import engine
from support_desk.config import settings
from support_desk.domain.exceptions import AccessDeniedError, BackendError, TriggerAuthError
from support_desk.infrastructure.api.routes_auto_assign import router as auto_assign_router
from support_desk.infrastructure.api.routes_health import router as health_router
from support_desk.infrastructure.api.routes_tickets import router as tickets_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Notification database connection established")
    except Exception as e:
        logger.warning("Notification database not available on startup: %s", e)
    yield
    await engine.dispose()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccessDeniedError)
    async def _access_denied(request: Request, exc: AccessDeniedError):
        return JSONResponse(status_code=403, content={"detail": exc.reason})

    @app.exception_handler(TriggerAuthError)
    async def _trigger_auth(request: Request, exc: TriggerAuthError):
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.exception_handler(BackendError)
    async def _backend_error(request: Request, exc: BackendError):
        logger.error("Backend error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Support Desk",
        description="Role- and region-aware ticket access control and auto-assignment",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # auto-assign first: its static path must win over /tickets/{ticket_id}
    app.include_router(health_router, prefix="/api")
    app.include_router(auto_assign_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")

    return app


app = create_app()
