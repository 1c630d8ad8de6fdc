# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Wspolna konfiguracja: camelCase z API, snake_case w Pythonie."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# ENUMS
# =====================================================
class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    MIDTRANS_SNAP = "MIDTRANS_SNAP"
    PAYPAL = "PAYPAL"


class ShippingType(str, Enum):
    DOMESTIC = "DOMESTIC"
    INTERNATIONAL = "INTERNATIONAL"


class Currency(str, Enum):
    IDR = "IDR"
    USD = "USD"


# =====================================================
# CART
# =====================================================
class GuestCartItem(ApiModel):
    """Pozycja koszyka goscia trzymana lokalnie (klucz: variant_id)."""

    variant_id: str
    quantity: int = Field(..., ge=1)
    added_at: datetime


class Promotion(ApiModel):
    id: str | None = None
    name: str | None = None
    discount: Decimal = Field(..., ge=0, lt=1, description="Ulamek, 0.2 = 20%")
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True


class ProductSnapshot(ApiModel):
    id: str
    name: str
    slug: str | None = None
    id_price: Decimal = Decimal("0")
    en_price: Decimal = Decimal("0")
    image_url: str | None = None
    is_active: bool = True
    is_deleted: bool = False
    promotion: Promotion | None = None


class VariantSnapshot(ApiModel):
    id: str
    variant_name: str | None = None
    sku: str | None = None
    stock: int = 0
    is_active: bool = True
    is_deleted: bool = False
    image_url: str | None = None


class CartItem(ApiModel):
    id: str
    product_id: str
    variant_id: str
    quantity: int = Field(..., ge=1)
    product: ProductSnapshot | None = None
    variant: VariantSnapshot | None = None
    subtotal: Decimal = Decimal("0")
    is_available: bool = True


class CartSummary(ApiModel):
    total_items: int = 0
    total_quantity: int = 0
    subtotal: Decimal = Decimal("0")
    unavailable_items: int = 0
    has_unavailable_items: bool = False


class Cart(ApiModel):
    id: str
    user_id: str
    items: List[CartItem] = Field(default_factory=list)
    summary: CartSummary = Field(default_factory=CartSummary)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_by_variant(self, variant_id: str) -> CartItem | None:
        return next((i for i in self.items if i.variant_id == variant_id), None)


class AddToCartIn(ApiModel):
    variant_id: str
    quantity: int = Field(..., gt=0)


class UpdateQuantityIn(ApiModel):
    quantity: int = Field(..., gt=0)


# =====================================================
# ORDERS
# =====================================================
class OrderItem(ApiModel):
    product_id: str | None = None
    variant_id: str | None = None
    product_name: str
    variant_name: str | None = None
    sku: str | None = None
    quantity: int
    price_per_item: Decimal
    discount: Decimal = Decimal("0")
    subtotal: Decimal


class Order(ApiModel):
    id: str | None = None
    order_number: str
    status: OrderStatus
    currency: Currency = Currency.IDR
    shipping_type: ShippingType | None = None
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    items: List[OrderItem] = Field(default_factory=list)
    payment_status: PaymentStatus | None = None
    payment_method: str | None = None
    tracking_number: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    paid_at: datetime | None = None


class OrderListParams(ApiModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    status: OrderStatus | None = None
    search: str | None = None

    def to_query(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class PaginationMeta(ApiModel):
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0


class OrderList(ApiModel):
    items: List[Order] = Field(default_factory=list)
    meta: PaginationMeta = Field(default_factory=PaginationMeta)


class ShippingAddress(ApiModel):
    recipient_name: str
    recipient_phone: str
    shipping_address: str
    shipping_city: str
    shipping_province: str | None = None
    shipping_country: str
    shipping_postal_code: str
    shipping_notes: str | None = None


class CreateOrderIn(ApiModel):
    shipping_type: ShippingType
    shipping_method: str
    courier_code: str | None = None
    courier_service: str | None = None
    shipping_cost: Decimal = Field(..., ge=0)
    shipping_address: ShippingAddress


class ShippingItemIn(ApiModel):
    product_id: str
    variant_id: str
    quantity: int = Field(..., gt=0)
    weight: int = 1000


class CalculateShippingIn(ApiModel):
    destination_type: ShippingType
    items: List[ShippingItemIn]
    destination_postal_code: str | None = None
    destination_country: str | None = None


class ShippingOption(ApiModel):
    courier_name: str
    courier_code: str
    courier_service: str
    description: str | None = None
    price: Decimal
    estimated_days: str | None = None


class MarkAsShippedIn(ApiModel):
    tracking_number: str
    courier: str | None = None


class ShippingLabelUrl(ApiModel):
    type: Literal["url"]
    url: str
    message: str | None = None


# =====================================================
# PAYMENTS
# =====================================================
class CreatePaymentIn(ApiModel):
    order_number: str
    payment_method: PaymentMethod


class PaymentOut(ApiModel):
    order_number: str
    payment_method: PaymentMethod | None = None
    payment_provider: str | None = None
    payment_url: str | None = None
    token: str | None = None
    payment_id: str | None = None
    currency: Currency | None = None
    amount: Decimal | None = None
    expires_at: datetime | None = None


class PaymentStatusData(ApiModel):
    order_number: str
    payment_status: PaymentStatus
    payment_method: str | None = None
    paid_at: datetime | None = None
    amount: Decimal | None = None
    currency: str | None = None
