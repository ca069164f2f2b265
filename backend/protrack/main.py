"""
ProTrack FastAPI application.

One ``AppsScriptGateway`` is opened at startup and shared by every request;
domain exceptions raised in services are rendered by the handlers below.
"""
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from protrack.config import settings
from protrack.core.exceptions import GatewayException, ProTrackException, to_http_exception
from protrack.database import create_tables
from protrack.routers import API_ROUTERS, health
from protrack.sheets.gateway import AppsScriptGateway
from protrack.utils.logging import bind_request_context, configure_logging

API_PREFIX = "/api/v1"

configure_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": {"code": code, "message": message}})


async def protrack_exception_handler(request: Request, exc: ProTrackException) -> JSONResponse:
    http_exc = to_http_exception(exc)
    if isinstance(exc, GatewayException):
        logger.error("store_unavailable path=%s code=%s message=%s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=http_exc.status_code, content={"success": False, "error": http_exc.detail})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return _error_response(400, "VALIDATION_ERROR", str(exc))


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Production tracking from demand through crushing, backed by a spreadsheet store",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        bind_request_context(request_id, token.strip() if scheme.lower() == "bearer" else None)

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        if settings.ENABLE_REQUEST_ID:
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        if settings.ENABLE_REQUEST_LOGGING:
            logger.info(
                "request_completed method=%s path=%s status=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
        return response

    application.add_exception_handler(ProTrackException, protrack_exception_handler)
    application.add_exception_handler(ValueError, value_error_handler)

    application.include_router(health.router)
    for router in API_ROUTERS:
        application.include_router(router, prefix=API_PREFIX)

    @application.on_event("startup")
    def open_gateway():
        if settings.AUTO_CREATE_TABLES:
            create_tables()
        application.state.gateway = AppsScriptGateway(settings.GATEWAY_URL, timeout=settings.GATEWAY_TIMEOUT_SECONDS)
        logger.info("startup app=%s version=%s gateway=%s", settings.APP_NAME, settings.APP_VERSION, settings.GATEWAY_URL)

    @application.on_event("shutdown")
    async def close_gateway():
        gateway = getattr(application.state, "gateway", None)
        if gateway is not None:
            await gateway.aclose()
        logger.info("shutdown app=%s", settings.APP_NAME)

    return application


app = create_app()
