"""FastAPI application entrypoint. No business logic; only wiring, startup and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Scope

from app.api import router as api_router
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.schemas.error import ErrorResponse
from app.services.auth import AuthService
from app.services.content_store import ContentStore
from app.services.credential_store import CredentialStore
from app.services.default_content import default_content
from app.services.upload_store import UploadStore

logger = logging.getLogger(__name__)


class SPAStaticFiles(StaticFiles):
    """Static files that fall back to index.html so client-side routes resolve."""

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != status.HTTP_404_NOT_FOUND:
                raise
            return await super().get_response("index.html", scope)


def initialize_storage(app: FastAPI) -> None:
    """Create data/upload directories, the default content document and the default admin."""
    settings: Settings = app.state.settings
    Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.state.content_store.initialize(default_content())
    app.state.credential_store.initialize(
        username=settings.DEFAULT_ADMIN_USERNAME,
        password=settings.DEFAULT_ADMIN_PASSWORD.get_secret_value(),
        email=settings.DEFAULT_ADMIN_EMAIL,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    initialize_storage(app)
    insecure = settings.insecure_defaults()
    if insecure and settings.APP_ENV == "prod":
        logger.warning("Running in prod with default values for: %s", ", ".join(insecure))
    logger.info(
        "Portfolio CMS started",
        extra={"data_dir": str(settings.DATA_DIR), "upload_dir": str(settings.UPLOAD_DIR)},
    )
    yield


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.detail).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="Invalid request body", details=jsonable_encoder(exc.errors())
        ).model_dump(exclude_none=True),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; every store gets its directory from settings explicitly."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Portfolio CMS API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    credential_store = CredentialStore(settings.DATA_DIR)
    app.state.settings = settings
    app.state.credential_store = credential_store
    app.state.content_store = ContentStore(settings.DATA_DIR)
    app.state.upload_store = UploadStore(
        settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )
    app.state.auth_service = AuthService(credential_store, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )
    if settings.ADMIN_BUILD_DIR is not None and Path(settings.ADMIN_BUILD_DIR).is_dir():
        app.mount("/admin", SPAStaticFiles(directory=settings.ADMIN_BUILD_DIR, html=True), name="admin")
    if settings.SITE_DIR is not None and Path(settings.SITE_DIR).is_dir():
        app.mount("/", StaticFiles(directory=settings.SITE_DIR, html=True), name="site")
    else:
        app.add_api_route("/", root, methods=["GET"])
    return app


def root() -> dict[str, str]:
    """Root route when no public site is configured; minimal payload for discovery."""
    return {"message": "Portfolio CMS API"}


app = create_app()
