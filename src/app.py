"""Storefront FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from notifications.domain import notifications
from payments.domain import payments
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers
from reviews.domain import reviews
from shared.logging import add_context, clear_context, configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

reviews.init()
payments.init()
notifications.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/reviews": reviews,
    "/payments": payments,
    "/notifications": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


def _allowed_origins() -> list[str]:
    origins = os.environ.get("CORS_ORIGINS") or os.environ.get("CLIENT_URL")
    if not origins:
        return ["*"]
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Product reviews with usefulness voting, hosted checkout, order emails and shipping",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    clear_context()
    add_context(method=request.method, path=request.url.path)
    if domain is not None:
        add_context(domain=domain.name)
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, shipping)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
register_exception_handlers(app)


@app.exception_handler(ExpectedVersionError)
async def version_conflict_handler(request: Request, exc: ExpectedVersionError):
    logger.warning("Concurrent update conflict", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": "The resource was modified concurrently, please retry"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from notifications.api import router as notification_router  # noqa: E402
from payments.api import payment_router  # noqa: E402
from reviews.api import review_router  # noqa: E402
from shipping.api import carrier_error_handler, shipping_router, tracking_router  # noqa: E402
from shipping.carrier.port import CarrierError  # noqa: E402

app.include_router(review_router)
app.include_router(payment_router)
app.include_router(notification_router)
app.include_router(tracking_router)
app.include_router(shipping_router)
app.add_exception_handler(CarrierError, carrier_error_handler)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "reviews": {"name": reviews.name},
                "payments": {"name": payments.name},
                "notifications": {"name": notifications.name},
            },
        }
    )
