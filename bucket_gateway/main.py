import logging

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bucket_gateway import __version__
from bucket_gateway.api.deps import get_services
from bucket_gateway.api.routers.documents import router as documents_router
from bucket_gateway.api.routers.uploads import router as uploads_router
from bucket_gateway.common.config import Settings, get_settings
from bucket_gateway.common.logging import setup_logging
from bucket_gateway.infra.observability.metrics import metrics_app
from bucket_gateway.infra.observability.middleware import MetricsMiddleware
from bucket_gateway.infra.storage.client import StorageClient, StorageError
from bucket_gateway.services.base import StorageBackendNotConfiguredError
from bucket_gateway.services.bundle import ServiceBundle

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    500: "storage_error",
    503: "storage_not_configured",
}


def _resolve_error_code(status_code: int) -> str:
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def _format_validation_errors(errors: list[dict]) -> str:
    parts: list[str] = []
    for error in errors:
        loc = [str(item) for item in error.get("loc", ()) if item != "body"]
        field = ".".join(loc)
        message = error.get("msg", "invalid value")
        parts.append(f"{field}: {message}" if field else message)
    return "Invalid request payload: " + "; ".join(parts)


def _error_response(
    request: Request,
    status_code: int,
    detail: str,
    headers: dict[str, str] | None = None,
) -> PlainTextResponse:
    logger = logging.getLogger("http")
    logger.log(
        logging.WARNING if status_code < 500 else logging.ERROR,
        "http_error status=%s detail=%s method=%s path=%s request_id=%s",
        status_code,
        detail,
        request.method,
        request.url.path,
        request.headers.get("X-Request-Id"),
        extra={
            "extra": {
                "status": status_code,
                "detail": detail,
                "method": request.method,
                "route": request.url.path,
                "request_id": request.headers.get("X-Request-Id"),
            }
        },
    )
    response_headers = dict(headers or {})
    response_headers["X-Error-Code"] = _resolve_error_code(status_code)
    return PlainTextResponse(detail, status_code=status_code, headers=response_headers)


def create_app(
    settings: Settings | None = None,
    *,
    storage_client: StorageClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(
        title="Bucket Gateway",
        version=__version__,
        description=(
            "Multipart upload coordination and object operations on a single "
            "bucket, without handing storage credentials to clients."
        ),
    )
    app.state.settings = settings
    app.state.services = ServiceBundle(settings=settings, storage_client=storage_client)

    startup_logger = logging.getLogger("bucket_gateway.startup")
    missing = settings.missing_storage_settings()
    if missing and storage_client is None:
        startup_logger.warning(
            "Some required S3 settings are missing; storage calls will fail. (%s)",
            ", ".join(missing),
        )

    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS or ["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(uploads_router, tags=["uploads"])
    app.include_router(documents_router, tags=["documents"])

    if settings.ENABLE_METRICS:
        app.add_middleware(MetricsMiddleware, trace_http=settings.TRACE_HTTP)
        app.mount("/metrics", metrics_app)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(request, exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return _error_response(request, 400, _format_validation_errors(exc.errors()))

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        return _error_response(request, 500, str(exc))

    @app.exception_handler(StorageBackendNotConfiguredError)
    async def storage_not_configured_handler(
        request: Request, exc: StorageBackendNotConfiguredError
    ):
        return _error_response(request, 503, str(exc))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/ready")
    def ready(services: ServiceBundle = Depends(get_services)):
        try:
            services.storage().check_bucket(bucket=settings.S3_BUCKET_NAME)
        except (StorageBackendNotConfiguredError, StorageError) as exc:
            return {"status": "not_ready", "detail": {"storage": str(exc)}}
        return {"status": "ready"}

    startup_logger.info(
        "Bucket gateway configured. (bucket=%s, region=%s, endpoint=%s, env=%s)",
        settings.S3_BUCKET_NAME or "<unset>",
        settings.S3_REGION,
        settings.S3_ENDPOINT or "<aws>",
        settings.ENVIRONMENT,
    )
    return app


app = create_app()

if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "bucket_gateway.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.is_dev,
    )
