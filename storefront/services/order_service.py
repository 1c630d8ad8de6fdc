# storefront/services/order_service.py
from typing import Any, List

from storefront.domain.errors import PreconditionError
from storefront.domain.order_rules import is_valid_transition
from storefront.domain.schemas import (
    CalculateShippingIn,
    CreateOrderIn,
    MarkAsShippedIn,
    Order,
    OrderList,
    OrderListParams,
    OrderStatus,
    PaginationMeta,
    ShippingOption,
)
from storefront.services.api_client import ApiClient, unwrap_data
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _order_list(body: Any) -> OrderList:
    items = unwrap_data(body) or []
    meta = body.get("meta") if isinstance(body, dict) else None
    return OrderList(
        items=[Order.model_validate(o) for o in items],
        meta=PaginationMeta.model_validate(meta or {}),
    )


def _label_url(body: Any) -> str:
    data = unwrap_data(body) or {}
    url = data.get("labelUrl") or data.get("label_url") or data.get("url")
    if not url:
        raise ValueError("Shipping label URL missing in response")
    return url


class OrderService:
    """
    Wywolania API zamowien (uzytkownik + admin).
    Bez stanu, bledy leca dalej jako ApiError.
    """

    def __init__(self, api_client: ApiClient):
        self.api = api_client

    # =====================================================
    # USER
    # =====================================================
    def calculate_shipping(self, payload: CalculateShippingIn) -> List[ShippingOption]:
        body = self.api.post(
            "/orders/calculate-shipping",
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        data = unwrap_data(body) or {}
        return [ShippingOption.model_validate(o) for o in data.get("shippingOptions", [])]

    def create_order(self, payload: CreateOrderIn) -> Order:
        body = self.api.post("/orders", json=payload.model_dump(mode="json", by_alias=True, exclude_none=True))
        order = Order.model_validate(unwrap_data(body))
        logger.info(f"Order {order.order_number} created")
        return order

    def list_orders(self, params: OrderListParams | None = None) -> OrderList:
        params = params or OrderListParams()
        return _order_list(self.api.get("/orders", params=params.to_query()))

    def get_order(self, order_number: str) -> Order:
        return Order.model_validate(unwrap_data(self.api.get(f"/orders/{order_number}")))

    def cancel_order(self, order_number: str) -> Any:
        logger.info(f"Cancelling order {order_number}")
        return self.api.post(f"/orders/{order_number}/cancel")

    def get_shipping_label(self, order_number: str) -> str:
        return _label_url(self.api.get(f"/orders/{order_number}/shipping-label"))

    # =====================================================
    # ADMIN
    # =====================================================
    def list_all_orders(self, params: OrderListParams | None = None) -> OrderList:
        params = params or OrderListParams()
        return _order_list(self.api.get("/admin/orders", params=params.to_query()))

    def get_order_stats(self) -> dict:
        return unwrap_data(self.api.get("/admin/orders/stats")) or {}

    def get_admin_order(self, order_number: str) -> Order:
        return Order.model_validate(unwrap_data(self.api.get(f"/admin/orders/{order_number}")))

    def update_order_status(self, order: Order, status: OrderStatus) -> Order:
        if not is_valid_transition(order.status, status):
            raise PreconditionError(
                f"Cannot change order {order.order_number} from {order.status.value} to {OrderStatus(status).value}"
            )
        body = self.api.patch(
            f"/admin/orders/{order.order_number}/status",
            json={"status": OrderStatus(status).value},
        )
        return Order.model_validate(unwrap_data(body))

    def mark_as_shipped(self, order_number: str, payload: MarkAsShippedIn) -> Order:
        body = self.api.post(
            f"/admin/orders/{order_number}/ship",
            json=payload.model_dump(by_alias=True, exclude_none=True),
        )
        return Order.model_validate(unwrap_data(body))

    def get_tracking(self, order_number: str) -> dict:
        return unwrap_data(self.api.get(f"/admin/orders/{order_number}/tracking")) or {}

    def get_admin_shipping_label(self, order_number: str) -> str:
        return _label_url(self.api.get(f"/admin/orders/{order_number}/shipping-label"))
