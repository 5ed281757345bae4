"""FastAPI routes for the Ordering domain — orders and the payment webhook."""

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.concurrency import run_in_threadpool
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.dependencies import (
    current_user,
    get_order_service,
    get_status_manager,
    get_webhook_processor,
    require_roles,
)
from ordering.api.schemas import (
    CheckoutRequest,
    DeliveredOrderResponse,
    DistributionFailureSchema,
    OrderListResponse,
    OrderResponse,
    PaymentSheetResponse,
    StoreCreditSchema,
    WebhookAckResponse,
)
from ordering.checkout.service import OrderService
from ordering.checkout.status_manager import OrderStatusManager
from ordering.checkout.webhook import PaymentWebhookProcessor
from ordering.order.order import Order
from ordering.users.user import Role, User

# ---------------------------------------------------------------------------
# Webhook Router
# ---------------------------------------------------------------------------
# Mounted ahead of every other router: the signature covers the raw request
# bytes, so the body must reach the processor untouched.
webhook_router = APIRouter(prefix="/order", tags=["payments"])


@webhook_router.post("/payment-webhook", response_model=WebhookAckResponse)
async def payment_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
    processor: PaymentWebhookProcessor = Depends(get_webhook_processor),
) -> WebhookAckResponse:
    """Receive a payment gateway notification."""
    payload = await request.body()
    processor.handle(payload, stripe_signature)
    return WebhookAckResponse(received=True)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/order", tags=["orders"])


def _visible_to(order: Order, user: User) -> bool:
    return user.role != Role.USER.value or str(order.user_id) == str(user.id)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
) -> OrderListResponse:
    """List orders. Customers only see their own."""
    query = current_domain.repository_for(Order)._dao.query
    if user.role == Role.USER.value:
        query = query.filter(user_id=str(user.id))
    results = query.order_by("-created_at").offset(offset).limit(limit).all()
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in results.items],
        total=results.total,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: User = Depends(current_user)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if not _visible_to(order, user):
        raise ObjectNotFoundError({"order": [f"There is no order with id {order_id}"]})
    return OrderResponse.from_order(order)


@order_router.post("/payment-sheet/{cart_id}", response_model=PaymentSheetResponse)
async def create_payment_sheet(
    cart_id: str,
    body: CheckoutRequest | None = None,
    user: User = Depends(current_user),
    service: OrderService = Depends(get_order_service),
) -> PaymentSheetResponse:
    """Prepare a card payment; the order is created once the gateway confirms it."""
    # Gateway calls are blocking HTTP requests and must stay off the event loop
    sheet = await run_in_threadpool(
        service.create_payment_intent,
        user_id=str(user.id),
        cart_id=cart_id,
        shipping_address=body.address() if body else {},
    )
    return PaymentSheetResponse(
        paymentIntent=sheet.client_secret,
        ephemeralKey=sheet.ephemeral_key_secret,
        customer=sheet.customer_id,
        publishableKey=sheet.publishable_key,
    )


@order_router.post("/cash/{cart_id}", status_code=201, response_model=OrderResponse)
async def create_cash_order(
    cart_id: str,
    body: CheckoutRequest | None = None,
    user: User = Depends(current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """Convert a cart into a cash-on-delivery order."""
    order = service.create_cash_order(
        user_id=str(user.id),
        cart_id=cart_id,
        shipping_address=body.address() if body else {},
    )
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/paid", response_model=OrderResponse)
async def mark_order_paid(
    order_id: str,
    _: User = Depends(require_roles(Role.ADMIN)),
    manager: OrderStatusManager = Depends(get_status_manager),
) -> OrderResponse:
    order = manager.mark_paid(order_id)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/delivered", response_model=DeliveredOrderResponse)
async def mark_order_delivered(
    order_id: str,
    _: User = Depends(require_roles(Role.SELLER)),
    manager: OrderStatusManager = Depends(get_status_manager),
) -> DeliveredOrderResponse:
    """Confirm delivery and credit each store its share of the order."""
    order, result = manager.mark_delivered(order_id)
    return DeliveredOrderResponse(
        order=OrderResponse.from_order(order),
        credits=[
            StoreCreditSchema(store_id=c.store_id, gross_revenue=c.gross_revenue, amount=c.amount)
            for c in result.credits
        ],
        failures=[
            DistributionFailureSchema(reason=f.reason, store_id=f.store_id, product_id=f.product_id)
            for f in result.failures
        ],
    )
