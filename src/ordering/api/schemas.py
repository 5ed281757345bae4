"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    details: str | None = None
    phone: str | None = None
    city: str | None = None
    postal_code: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddressSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "details": "12 Tahrir St, apt 4",
                        "phone": "01000000000",
                        "city": "Cairo",
                        "postal_code": "11511",
                    }
                }
            ]
        }
    }

    def address(self) -> dict:
        return self.shipping_address.model_dump(exclude_none=True) if self.shipping_address else {}


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    id: str
    user_id: str
    cart_id: str
    items: list[OrderItemSchema]
    shipping_address: ShippingAddressSchema | None = None
    tax_price: float
    shipping_price: float
    total_order_price: float
    payment_method: str
    payment_intent_id: str | None = None
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    inventory_status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        address = order.shipping_address
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            cart_id=str(order.cart_id),
            items=[OrderItemSchema(**line) for line in order.line_items()],
            shipping_address=(
                ShippingAddressSchema(
                    details=address.details,
                    phone=address.phone,
                    city=address.city,
                    postal_code=address.postal_code,
                )
                if address
                else None
            ),
            tax_price=order.tax_price,
            shipping_price=order.shipping_price,
            total_order_price=order.total_order_price,
            payment_method=order.payment_method,
            payment_intent_id=order.payment_intent_id,
            is_paid=order.is_paid,
            paid_at=order.paid_at,
            is_delivered=order.is_delivered,
            delivered_at=order.delivered_at,
            inventory_status=order.inventory_status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int


class PaymentSheetResponse(BaseModel):
    """Field names follow the mobile payment sheet's parameter names."""

    paymentIntent: str  # noqa: N815
    ephemeralKey: str  # noqa: N815
    customer: str
    publishableKey: str  # noqa: N815


class StoreCreditSchema(BaseModel):
    store_id: str
    gross_revenue: float
    amount: float


class DistributionFailureSchema(BaseModel):
    reason: str
    store_id: str | None = None
    product_id: str | None = None


class DeliveredOrderResponse(BaseModel):
    order: OrderResponse
    credits: list[StoreCreditSchema]
    failures: list[DistributionFailureSchema]


class WebhookAckResponse(BaseModel):
    received: bool = True
