"""Maps domain and gateway exceptions to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from payments.gateway.port import GatewayError, WebhookSignatureError
from protean.exceptions import InvalidStateError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from ordering.errors import AlreadyProcessed

_STATUS_CODES = {
    ObjectNotFoundError: 404,
    ValidationError: 400,
    InvalidStateError: 409,
    AlreadyProcessed: 409,
    WebhookSignatureError: 400,
    GatewayError: 502,
}


def _error_body(exc: Exception):
    messages = getattr(exc, "messages", None)
    return messages if messages else str(exc)


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)

    def make_handler(status_code: int):
        async def handler(request: Request, exc: Exception) -> JSONResponse:
            return JSONResponse(status_code=status_code, content={"error": _error_body(exc)})

        return handler

    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, make_handler(status_code))
