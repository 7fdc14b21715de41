from contextlib import asynccontextmanager
from textwrap import dedent
import logging

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from files_manager import __version__
from files_manager.core import Core, build_core
from files_manager.errors import (
    FilesManagerError,
    handle_broad_exceptions,
    handle_files_manager_error,
    handle_pydantic_validation_errors,
)
from files_manager.routers.auth import router as auth_router
from files_manager.routers.files import router as files_router
from files_manager.routers.health import router as health_router
from files_manager.routers.users import router as users_router
from files_manager.settings import Settings, get_settings

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, core: Core | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or (core.settings if core else get_settings())
    core = core or build_core(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting task queue")
        await core.start()
        try:
            yield
        finally:
            await core.stop()
            logger.info("Task queue stopped")

    app = FastAPI(
        title=settings.app_name,
        summary="Upload, organise and share personal files",
        version=__version__,
        description=dedent(
            """\
        Sign up with `POST /users`, exchange Basic credentials for a token at
        `GET /connect`, then send it as `X-Token` on every other call.
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.core = core

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, tags=["auth"])
    app.include_router(users_router, tags=["users"])
    app.include_router(files_router, tags=["files"])

    app.add_exception_handler(
        exc_class_or_status_code=FilesManagerError,
        handler=handle_files_manager_error,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"
