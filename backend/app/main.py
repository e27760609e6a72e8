"""Points Ledger - user accounts with a point balance."""
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import accounts
from app.config import Settings, get_settings
from app.database import create_db_engine, create_session_factory, init_db
from app.services.accounts import AccountServiceError, AuthenticationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = app.state.settings
    engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(engine)

    # Startup: create the users table if it does not exist yet
    init_db(engine)
    logger.info(f"{settings.app_name} started")

    yield

    engine.dispose()
    logger.info(f"{settings.app_name} stopped")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Register, authenticate and track user point balances",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AccountServiceError)
    async def account_error_handler(request: Request, exc: AccountServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed", exc_info=exc)
        else:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning(f"{request.method} {request.url.path} rejected: {message}")

        # Login failures all look the same, malformed bodies included
        if request.url.path == request.app.url_path_for("login"):
            return JSONResponse(
                status_code=AuthenticationError.status_code,
                content={"success": False, "message": AuthenticationError.message},
            )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"{request.method} {request.url.path} raised {type(exc).__name__}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": AccountServiceError.message},
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    app.include_router(accounts.router, prefix="/api")

    # Static files last so they never shadow the API
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.info(f"Static directory not found, skipping: {settings.static_dir}")

    return app


app = create_app()


def main():
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
