# storefront/mock_backend/routers/orders.py
from decimal import Decimal

from fastapi import APIRouter, Body, Depends, Query

from storefront.domain.schemas import (
    CalculateShippingIn,
    CreateOrderIn,
    MarkAsShippedIn,
    OrderStatus,
    ShippingType,
)
from storefront.mock_backend.deps import get_store, ok, to_http
from storefront.mock_backend.store import Conflict, MockStore, NotFound

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["admin-orders"])

#stale stawki kuriera dla dev
_DOMESTIC_RATES = [
    ("JNE", "jne", "REG", Decimal("15000"), "2-3"),
    ("JNE", "jne", "YES", Decimal("30000"), "1"),
]
_INTERNATIONAL_RATES = [
    ("DHL Express", "dhl", "EXPRESS", Decimal("45"), "5-7"),
]


def _list(store: MockStore, page: int, limit: int, status: OrderStatus | None, search: str | None):
    items, meta = store.list_orders(page, limit, status.value if status else None, search)
    return ok(items, meta=meta)


def _label(order_number: str, store: MockStore, prefix: str = ""):
    try:
        store.require_label(order_number)
    except (NotFound, Conflict) as e:
        raise to_http(e)
    return ok({"labelUrl": f"https://labels.example.com/{prefix}{order_number}.pdf"})


# =====================================================
# USER
# =====================================================
@router.post("/calculate-shipping")
def calculate_shipping(payload: CalculateShippingIn):
    rates = _DOMESTIC_RATES if payload.destination_type == ShippingType.DOMESTIC else _INTERNATIONAL_RATES
    options = [
        {
            "courierName": name,
            "courierCode": code,
            "courierService": service,
            "price": str(price),
            "estimatedDays": days,
        }
        for name, code, service, price, days in rates
    ]
    return ok({"shippingOptions": options})


@router.post("", status_code=201)
def create_order(payload: CreateOrderIn, store: MockStore = Depends(get_store)):
    try:
        order = store.create_order(
            payload.shipping_type,
            payload.shipping_cost,
            payload.shipping_address.shipping_country,
        )
    except Conflict as e:
        raise to_http(e)
    return ok(order, message="Order created")


@router.get("")
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: OrderStatus | None = None,
    search: str | None = None,
    store: MockStore = Depends(get_store),
):
    return _list(store, page, limit, status, search)


@router.get("/{order_number}")
def get_order(order_number: str, store: MockStore = Depends(get_store)):
    try:
        return ok(store.get_order(order_number))
    except NotFound as e:
        raise to_http(e)


@router.post("/{order_number}/cancel")
def cancel_order(order_number: str, store: MockStore = Depends(get_store)):
    try:
        return ok(store.cancel_order(order_number), message="Order cancelled")
    except (NotFound, Conflict) as e:
        raise to_http(e)


@router.get("/{order_number}/shipping-label")
def get_shipping_label(order_number: str, store: MockStore = Depends(get_store)):
    return _label(order_number, store)


# =====================================================
# ADMIN
# =====================================================
@admin_router.get("")
def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: OrderStatus | None = None,
    search: str | None = None,
    store: MockStore = Depends(get_store),
):
    return _list(store, page, limit, status, search)


#musi byc przed /{order_number}
@admin_router.get("/stats")
def get_order_stats(store: MockStore = Depends(get_store)):
    return ok(store.stats())


@admin_router.get("/{order_number}")
def get_admin_order(order_number: str, store: MockStore = Depends(get_store)):
    try:
        return ok(store.get_order(order_number))
    except NotFound as e:
        raise to_http(e)


@admin_router.patch("/{order_number}/status")
def update_order_status(
    order_number: str,
    status: OrderStatus = Body(..., embed=True),
    store: MockStore = Depends(get_store),
):
    try:
        return ok(store.set_order_status(order_number, status.value), message="Order status updated")
    except (NotFound, Conflict) as e:
        raise to_http(e)


@admin_router.post("/{order_number}/ship")
def mark_as_shipped(order_number: str, payload: MarkAsShippedIn, store: MockStore = Depends(get_store)):
    try:
        return ok(store.mark_shipped(order_number, payload.tracking_number), message="Order shipped")
    except (NotFound, Conflict) as e:
        raise to_http(e)


@admin_router.get("/{order_number}/tracking")
def get_tracking(order_number: str, store: MockStore = Depends(get_store)):
    try:
        order = store.get_order(order_number)
    except NotFound as e:
        raise to_http(e)
    return ok({
        "orderNumber": order_number,
        "trackingNumber": order.get("tracking_number"),
        "status": order["status"],
    })


@admin_router.get("/{order_number}/shipping-label")
def get_admin_shipping_label(order_number: str, store: MockStore = Depends(get_store)):
    return _label(order_number, store, prefix="admin/")
