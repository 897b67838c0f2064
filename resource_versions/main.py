"""Resource Versions - counts the stored versions of a resource in an S3 bucket.

Startup is split in two phases. After logging is set up, ``bootstrap`` runs
synchronously: it loads (or interactively completes) the configuration and
builds the shared store client. Only then is the ASGI app created and handed
to uvicorn, so nothing ever prompts from inside a request.
"""

from pathlib import Path
from typing import Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from resource_versions.api.middleware import (
    INTERNAL_ERROR_BODY,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from resource_versions.api.routes import router
from resource_versions.config import Settings, get_settings
from resource_versions.errors import ConfigError, CountError, StoreInitError, ValidationError
from resource_versions.models.configuration import Configuration, Profile
from resource_versions.services.config_loader import load_config
from resource_versions.services.storage_service import ObjectStore, build_client
from resource_versions.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def cors_origins_for(config: Configuration, profile: Profile) -> Optional[list]:
    """Origins to allow, or None when no cross-origin access is granted."""
    if config.cors_origins:
        return list(config.cors_origins)
    if profile is Profile.DEVELOPMENT:
        return ["*"]
    return None


def create_app(config: Configuration, store: ObjectStore, profile: Profile, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    production = profile is Profile.PRODUCTION

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Counts the stored versions of a resource",
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.config = config
    app.state.store = store

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    origins = cors_origins_for(config, profile)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )
    elif production:
        logger.warning("No cors-origins configured, cross-origin requests will be refused")

    app.include_router(router)

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        return PlainTextResponse(f"Bad Request: {exc}", status_code=400)

    @app.exception_handler(CountError)
    async def count_exception_handler(request: Request, exc: CountError):
        logger.error(
            f"Error while listing resource amount: {exc}",
            extra={"path": request.url.path, "resource_name": exc.resource_name},
            exc_info=exc,
        )
        return PlainTextResponse(INTERNAL_ERROR_BODY, status_code=500)

    return app


def bootstrap(settings: Settings, prompter=None) -> Tuple[Configuration, ObjectStore]:
    """Load the configuration and build the store client. Blocking; run before serving."""
    profile = settings.profile
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    logger.info(f"Profile: {profile.value}")

    config = load_config(profile, settings.CONFIG_DIR, prompter=prompter)
    logger.info(f"Loaded configuration: {config!r}")

    store = build_client(config.bucket_info)
    return config, store


def main(settings: Optional[Settings] = None) -> int:
    import uvicorn

    settings = settings or get_settings()
    try:
        profile = settings.profile
    except ValueError as e:
        print(f"Invalid ENVIRONMENT: {e}")
        return 1

    level = settings.LOG_LEVEL or profile.default_log_level
    try:
        log_file = setup_logging(level, Path(settings.LOG_DIR), settings.LOG_BACKUP_COUNT)
    except OSError as e:
        print(f"Could not initialize logger: {e}")
        return 1
    logger.info(f"Logging to {log_file}")

    try:
        config, store = bootstrap(settings)
    except ConfigError as e:
        logger.error(f"Could not load configuration: {e}")
        return 1
    except StoreInitError as e:
        logger.error(f"Could not connect to the bucket: {e}")
        return 1

    app = create_app(config, store, profile, settings)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    logger.info("The server returned without an error.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
