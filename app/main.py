import logging
from time import monotonic

from fastapi import FastAPI, Request
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.analytics import router as analytics_router
from app.api.error_notes import router as error_notes_router
from app.api.fix_steps import router as fix_steps_router
from app.api.logs import router as logs_router
from app.api.wizard import router as wizard_router
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.telemetry import setup_otel

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(title="Appliance Support API")
setup_otel(app)
register_error_handlers(app)


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    # Keep health/metrics probes out of the request log.
    if request.url.path in ("/health", "/metrics"):
        return await call_next(request)
    started = monotonic()
    response = await call_next(request)
    logger.info(
        "request_completed method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        (monotonic() - started) * 1000,
    )
    return response


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(error_notes_router)
_include_api_router(wizard_router)
_include_api_router(analytics_router)
_include_api_router(logs_router)
_include_api_router(fix_steps_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
