"""Checkout service FastAPI application.

Serves the ordering domain over HTTP. Every request runs inside the
ordering domain context, with the request id bound to the log context.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.api.errors import register_exception_handlers
from ordering.api.routes import order_router, webhook_router
from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context, configure_logging
from payments.gateway import build_gateway
from payments.gateway.port import PaymentGateway
from payments.settings import GatewaySettings

# Initialized once at module level so every app instance and uvicorn worker
# shares the same domain and providers.
configure_logging()
ordering.init()

API_PREFIX = "/api/v1"


def create_app(gateway: PaymentGateway | None = None, settings: GatewaySettings | None = None) -> FastAPI:
    """Build the application.

    The payment gateway is constructed once here and shared by all requests;
    tests pass their own.
    """
    settings = settings or GatewaySettings.from_env()

    app = FastAPI(
        title="Checkout API",
        description="Orders, payment reconciliation and seller payouts",
    )
    app.state.gateway_settings = settings
    app.state.gateway = gateway or build_gateway(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request."""
        add_context(request_id=request.headers.get("X-Request-Id") or uuid4().hex, path=request.url.path)
        try:
            with ordering.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)

    # The webhook router goes first so its raw body is not consumed elsewhere
    app.include_router(webhook_router, prefix=API_PREFIX)
    app.include_router(order_router, prefix=API_PREFIX)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": ordering.name,
                "gateway": type(app.state.gateway).__name__,
            }
        )

    return app


app = create_app()
