"""
LearnHub API
Course catalog, enrollment, progress, certificates and admin
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from learnhub import config
from learnhub.admin.router import router as admin_router
from learnhub.courses.certificate_router import router as certificate_router
from learnhub.courses.course_router import router as course_router
from learnhub.courses.enrollment_router import router as enrollment_router
from learnhub.courses.errors import LearnHubError
from learnhub.courses.responses import error
from learnhub.database import create_indexes, db_manager
from learnhub.observability.logger import configure_logging
from learnhub.system.health_router import router as health_router

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return "; ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(LearnHubError)
    async def learnhub_error_handler(request: Request, exc: LearnHubError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error(exc.message))

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content=error(str(exc.detail)), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error(_validation_message(exc)))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error("Server error"))


def create_app(connect_db: bool = True) -> FastAPI:
    """
    Build the API application.

    ``connect_db=False`` skips the Mongo startup hooks; tests override
    ``get_db`` instead.
    """
    configure_logging()

    app = FastAPI(title="LearnHub API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    if connect_db:
        @app.on_event("startup")
        async def startup_event():
            db_manager.connect()
            await create_indexes(db_manager.get_database())

        @app.on_event("shutdown")
        async def shutdown_event():
            db_manager.disconnect()

    app.include_router(health_router, prefix="/api")
    app.include_router(course_router, prefix="/api/courses")
    app.include_router(enrollment_router, prefix="/api/enroll")
    app.include_router(certificate_router, prefix="/api/certificates")
    app.include_router(admin_router, prefix="/api/admin")

    return app


app = create_app()
