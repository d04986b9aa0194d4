import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.cors import setup_cors
from .core.logging_config import configure_logging
from .core.redis_manager import close_redis
from .domain.errors import (
    AliasConflict,
    ClassroomError,
    ConcurrentUpdateError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .api.v1.routers import courses as courses_router
from .api.v1.routers import forms as forms_router
from .api.v1.routers import live as live_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    AliasConflict: status.HTTP_409_CONFLICT,
    ConcurrentUpdateError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_redis()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
setup_cors(app)


@app.exception_handler(ClassroomError)
async def classroom_error_handler(request: Request, exc: ClassroomError) -> JSONResponse:
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    body = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, ValidationError):
        body["field"] = exc.field
    return JSONResponse(status_code=code, content=body)


app.include_router(courses_router.router, prefix=settings.API_V1_PREFIX)
app.include_router(forms_router.router, prefix=settings.API_V1_PREFIX)
app.include_router(live_router.router, prefix=settings.API_V1_PREFIX)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
