import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import health, tasks
from app.core.config import settings
from app.core.errors import StoreError, TaskAPIError, ValidationError, format_validation_errors
from app.core.logging import configure_logging
from app.db.session import Database


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application. A prepared `Database` may be injected; otherwise
    one is constructed from settings when the app starts.
    """
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = getattr(app.state, "database", None) or Database.from_settings(settings)
        await db.connect()
        app.state.database = db
        logger.info("%s started (env=%s)", settings.APP_NAME, settings.APP_ENV)
        try:
            yield
        finally:
            await db.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    if database is not None:
        app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TaskAPIError)
    async def task_api_error_handler(request: Request, exc: TaskAPIError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        err = ValidationError(format_validation_errors(exc.errors()))
        return JSONResponse(status_code=err.status_code, content=err.to_content())

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        err = StoreError()
        return JSONResponse(status_code=err.status_code, content=err.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # routes
    app.include_router(health.router)
    app.include_router(tasks.router)
    return app


app = create_app()
