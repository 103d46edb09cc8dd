"""
5 Day Challenge - Homework & RSVP API
FastAPI service behind the challenge landing page and homework forms.

Run server:
uvicorn challenge_api.main:app --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, Dict
import contextvars
import logging
import os
import time
import uuid

from challenge_api import __version__
from challenge_api.core.rate_limit import EXEMPT_PATHS, RateLimiter
from challenge_api.settings import get_settings
from challenge_api.state import get_state

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)
request_start_time_var = contextvars.ContextVar('request_start_time', default=None)

# ========== Metrics Storage ==========
request_metrics: Dict[str, Any] = {
    "total_requests": defaultdict(int),  # by endpoint
    "total_latency": defaultdict(float),  # by endpoint
    "status_codes": defaultdict(int),  # by status code
}

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

startup_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    global startup_time
    startup_time = time.time()
    state = get_state()
    logger.info("5 Day Challenge API starting up...")
    logger.info(f"Counter backend: {settings.counter_backend.upper()}")
    logger.info(f"Submission sink: {state.sink.name}")
    logger.info(f"Allowed origins: {ALLOWED_ORIGINS}")
    yield
    logger.info("5 Day Challenge API shutting down...")
    dispose = getattr(state.counter, "dispose", None)
    if dispose:
        dispose()


app = FastAPI(
    title="5 Day Challenge API",
    description="Homework submissions, RSVP counter and countdown for the 5 Day Challenge",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ========== Rate Limiting ==========

rate_limiter = RateLimiter(
    read_per_minute=settings.rate_limit_read_per_minute,
    write_per_minute=settings.rate_limit_write_per_minute,
)


@app.middleware("http")
async def rate_limiting_middleware(request: Request, call_next):
    """Rate limiting middleware - keeps form spam off the spreadsheet."""
    if request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    allowed, retry_after = rate_limiter.check(client_ip, request.method, request.url.path)

    if not allowed:
        logger.warning(f"Rate limit exceeded for {client_ip} on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "success": False,
                "message": "Too many requests. Please wait a moment and try again.",
                "retry_after_seconds": retry_after,
            },
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(rate_limiter.limit_for(request.method)),
                "X-RateLimit-Remaining": "0",
            },
        )

    return await call_next(request)

# ========== End of Rate Limiting ==========

# ========== Request Tracing Middleware ==========
# Must stay registered after rate limiting: it wraps it, so 429s carry X-Request-ID
@app.middleware("http")
async def request_tracing_middleware(request: Request, call_next):
    """Add request_id and timing to all requests."""
    request_id = str(uuid.uuid4())[:8]
    request_id_var.set(request_id)
    request_start_time_var.set(time.time())

    response = await call_next(request)

    latency = time.time() - request_start_time_var.get()

    logger.info(
        f"[{request_id}] {request.method} {request.url.path} -> "
        f"{response.status_code} ({round(latency * 1000, 2)} ms)"
    )

    endpoint = f"{request.method} {request.url.path}"
    request_metrics["total_requests"][endpoint] += 1
    request_metrics["total_latency"][endpoint] += latency
    request_metrics["status_codes"][response.status_code] += 1

    response.headers["X-Request-ID"] = request_id
    return response


ALLOWED_ORIGINS = settings.get_origins_list()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_field(loc) -> str:
    # ("body", "email") -> "email"; ("body", "worksheetData", 0, "reframed") -> "worksheetData"
    parts = [p for p in loc if p != "body"]
    if parts and isinstance(parts[0], str):
        return parts[0]
    return "body"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or wrongly typed fields use the same 400 shape as field validation."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_error_field(err.get("loc", ())), err.get("msg", "Invalid value"))

    logger.info(f"❌ Request validation errors on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )

# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "5 Day Challenge API",
        "version": __version__,
        "counter_backend": settings.counter_backend,
        "submission_sink": get_state().sink.name,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/healthz")
async def healthz():
    """
    Liveness probe.
    Returns 200 if the application is running.
    """
    return {
        "status": "ok",
        "timestamp": time.time(),
        "version": __version__,
    }


@app.get("/readyz")
async def readyz():
    """
    Readiness probe.
    Checks that the RSVP counter backend can serve traffic.
    Returns 200 if ready, 503 if not ready.
    """
    try:
        state = get_state()
        state.counter.ping()
        return {
            "status": "ready",
            "counter_backend": settings.counter_backend,
            "submission_sink": state.sink.name,
            "timestamp": time.time(),
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "counter_backend": settings.counter_backend,
                "error": str(e),
                "timestamp": time.time(),
            },
        )


@app.get("/metrics")
async def get_metrics():
    """
    Request counts and latencies since startup.
    """
    avg_latencies = {}
    for endpoint, total_latency in request_metrics["total_latency"].items():
        count = request_metrics["total_requests"][endpoint]
        avg_latencies[endpoint] = round((total_latency / count) * 1000, 2) if count > 0 else 0

    total = sum(request_metrics["total_requests"].values())
    return {
        "timestamp": time.time(),
        "uptime_seconds": round(time.time() - startup_time, 2),
        "requests": {
            "by_endpoint": dict(request_metrics["total_requests"]),
            "by_status": dict(request_metrics["status_codes"]),
            "total": total,
        },
        "latency": {
            "by_endpoint_ms": avg_latencies,
            "average_ms": round(
                sum(request_metrics["total_latency"].values()) / total * 1000, 2
            ) if total > 0 else 0,
        },
        "rsvp_count": get_state().read_count(),
    }


from challenge_api.routers import homework as homework_router
app.include_router(homework_router.router)

from challenge_api.routers import rsvp as rsvp_router
app.include_router(rsvp_router.router)

from challenge_api.routers import checkout as checkout_router
app.include_router(checkout_router.router)

from challenge_api.routers import challenge as challenge_router
app.include_router(challenge_router.router)


def run() -> None:
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("challenge_api.main:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
