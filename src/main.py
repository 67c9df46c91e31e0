"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import auth, categories
from src.config import Settings, get_settings
from src.database import Database
from src.exceptions import MediaUploadError
from src.services.media import CloudinaryMediaStore, MediaStore

logger = logging.getLogger(__name__)


def validation_message(errors) -> str:
    """Summarize the first validation error as a single message."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, Exception):
        return str(cause)
    field = ".".join(
        str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")
    )
    return f"{field}: {error['msg']}" if field else error["msg"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the database on startup and close it on shutdown."""
    await app.state.database.connect()
    yield
    await app.state.database.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as a JSON body with a ``message`` field."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": validation_message(exc.errors())},
        )

    @app.exception_handler(MediaUploadError)
    @app.exception_handler(PyMongoError)
    async def upstream_exception_handler(request: Request, exc: Exception):
        logger.error(f"Upstream failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error", "error": str(exc)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error", "error": str(exc)},
        )


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    media_store: MediaStore | None = None,
) -> FastAPI:
    """Build the application around an explicit configuration.

    The settings, database and media store are created once here and treated
    as read-only for the life of the process.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Fastcart Category API",
        description="User accounts and image-backed categories",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.media_store = media_store or CloudinaryMediaStore(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(categories.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)  # noqa: S104
