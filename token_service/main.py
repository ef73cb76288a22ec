from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI
from token_service import logger
from token_service.api.routers import public_routers
from token_service.common.custom_exceptions import register_all_exceptions
from token_service.common.logging_setup import setup_logging, shutdown_logging
from token_service.config.settings import Settings, config_settings
from token_service.middlewares.request_id_middleware import RequestIdMiddleware
from token_service.tokens.exceptions import StartupError
from token_service.tokens.generator import TokenGenerator
from token_service.tokens.store import TokenStore

__version__ = "1.0.0"


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.ENV)

    try:
        app.state.token_store = TokenStore.from_file(settings.TOKEN_FILE_PATH, atomic=settings.ATOMIC_WRITES)
    except StartupError as e:
        # no degraded mode: refuse to serve without a readable store
        logger.critical("startup.store_load_failed", extra={"path": settings.TOKEN_FILE_PATH, "error": str(e)})
        shutdown_logging()
        raise

    app.state.token_generator = TokenGenerator()
    logger.info("startup.ready", extra={"tokens": len(app.state.token_store), "port": settings.PORT})

    try:
        yield
    finally:
        logger.info("shutdown")
        shutdown_logging()


def create_app(settings: Optional[Settings] = None):
    app=FastAPI(
        title="Livenet Tokens",
        version=__version__,
        lifespan=app_lifespan)

    app.state.settings = settings or config_settings

    app.include_router(public_routers)

    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    return app

app=create_app()


def run():
    uvicorn.run(
        "token_service.main:app",
        host=config_settings.HOST,
        port=config_settings.PORT,
        log_config=None,
    )
