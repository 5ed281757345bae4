"""FastAPI dependencies for caller identity, role guards and checkout services.

Authentication happens upstream; requests arrive with the authenticated
user's id in the ``X-User-Id`` header and are resolved against the users
known to checkout.
"""

from fastapi import Depends, Header, HTTPException, Request
from payments.gateway import build_gateway
from payments.gateway.port import PaymentGateway
from payments.settings import GatewaySettings
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.checkout.service import OrderService
from ordering.checkout.status_manager import OrderStatusManager
from ordering.checkout.webhook import PaymentWebhookProcessor
from ordering.users.user import Role, User


async def current_user(x_user_id: str = Header(default="")) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        return current_domain.repository_for(User).get(x_user_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user") from None


def require_roles(*roles: Role):
    """Dependency that admits only users holding one of ``roles``."""
    allowed = {role.value for role in roles}

    async def guard(user: User = Depends(current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="You are not allowed to access this route")
        return user

    return guard


async def get_gateway_settings(request: Request) -> GatewaySettings:
    settings = getattr(request.app.state, "gateway_settings", None)
    if settings is None:
        settings = GatewaySettings.from_env()
        request.app.state.gateway_settings = settings
    return settings


async def get_gateway(
    request: Request,
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> PaymentGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        gateway = build_gateway(settings)
        request.app.state.gateway = gateway
    return gateway


async def get_order_service(
    gateway: PaymentGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> OrderService:
    return OrderService(gateway, settings)


async def get_webhook_processor(gateway: PaymentGateway = Depends(get_gateway)) -> PaymentWebhookProcessor:
    return PaymentWebhookProcessor(gateway)


async def get_status_manager() -> OrderStatusManager:
    return OrderStatusManager()
