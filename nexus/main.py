import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nexus.api.v1.router import v1_router
from nexus.core.config import get_settings
from nexus.core.errors import GENERIC_FAILURE_MESSAGE, NexusError
from nexus.core.logging import configure_logging
from nexus.core.middleware import RequestIdMiddleware, SecurityHeadersMiddleware
from nexus.core.middleware_rate_limit import ClientRateLimitMiddleware
from nexus.core.rate_limit import InMemoryRateLimiter

logger = logging.getLogger(__name__)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def nexus_error_handler(request: Request, exc: NexusError):
    if exc.status_code >= 500:
        # integrity/unexpected: full detail to the log, nothing to the client
        logger.error(
            exc.message,
            extra={"code": exc.code, "details": exc.details, "request_id": _request_id(request)},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": GENERIC_FAILURE_MESSAGE, "code": exc.code},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "; ".join(problems) or "Invalid request",
            "code": "validation-error",
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled error", exc_info=exc, extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": GENERIC_FAILURE_MESSAGE, "code": "unexpected-error"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        redirect_slashes=False,
    )

    app.add_exception_handler(NexusError, nexus_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Middleware (last added runs first)
    if settings.rate_limit_enabled:
        app.add_middleware(
            ClientRateLimitMiddleware,
            limiter=InMemoryRateLimiter.per_window(
                settings.rate_limit_requests, settings.rate_limit_window_seconds
            ),
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, frontend_url=settings.frontend_url)
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
