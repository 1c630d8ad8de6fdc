# storefront/mock_backend/store.py
"""
Stan mock backendu w pamieci (dev only, jeden uzytkownik).
"""
import math
import threading
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List

from storefront.domain.order_rules import can_cancel, has_label, is_valid_transition
from storefront.domain.pricing import (
    currency_for_shipping,
    final_unit_price,
    line_subtotal,
    order_total,
    tax,
)
from storefront.domain.schemas import Currency, OrderStatus, PaymentStatus, ShippingType

MOCK_USER_ID = "user-1"

PRODUCTS = {
    "prod-1": {"id": "prod-1", "name": "Road Bike Frame", "slug": "road-bike-frame", "idPrice": 4500000, "enPrice": 300},
    "prod-2": {"id": "prod-2", "name": "Cycling Gloves", "slug": "cycling-gloves", "idPrice": 150000, "enPrice": 10},
}

VARIANTS = {
    "var-1": {"id": "var-1", "productId": "prod-1", "variantName": "54cm", "sku": "RBF-54", "stock": 5},
    "var-2": {"id": "var-2", "productId": "prod-1", "variantName": "56cm", "sku": "RBF-56", "stock": 3},
    "var-3": {"id": "var-3", "productId": "prod-2", "variantName": "M", "sku": "CG-M", "stock": 20},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class NotFound(Exception):
    pass


class Conflict(Exception):
    pass


class MockStore:
    def __init__(self):
        self.lock = threading.Lock()
        self.cart_id = str(uuid.uuid4())
        self.cart_items: Dict[str, dict] = {}
        self.orders: Dict[str, dict] = {}
        self.payments: Dict[str, PaymentStatus] = {}
        self._order_seq = 0

    # =====================================================
    # CART
    # =====================================================
    def _item_payload(self, item: dict) -> dict:
        variant = VARIANTS[item["variantId"]]
        product = PRODUCTS[variant["productId"]]
        price = final_unit_price(product["idPrice"])
        return {
            "id": item["id"],
            "productId": product["id"],
            "variantId": variant["id"],
            "quantity": item["quantity"],
            "product": product,
            "variant": variant,
            "subtotal": str(line_subtotal(price, item["quantity"])),
            "isAvailable": True,
            "createdAt": item["createdAt"],
        }

    def cart_payload(self) -> dict:
        items = [self._item_payload(i) for i in self.cart_items.values()]
        subtotal = sum((Decimal(i["subtotal"]) for i in items), Decimal("0"))
        return {
            "id": self.cart_id,
            "userId": MOCK_USER_ID,
            "items": items,
            "summary": {
                "totalItems": len(items),
                "totalQuantity": sum(i["quantity"] for i in items),
                "subtotal": str(subtotal),
                "unavailableItems": 0,
                "hasUnavailableItems": False,
            },
            "createdAt": _now(),
            "updatedAt": _now(),
        }

    def add_item(self, variant_id: str, quantity: int) -> None:
        if variant_id not in VARIANTS:
            raise NotFound(f"Variant {variant_id} not found")

        with self.lock:
            #jedna pozycja na wariant
            existing = next((i for i in self.cart_items.values() if i["variantId"] == variant_id), None)
            if existing:
                existing["quantity"] += quantity
                return
            item_id = str(uuid.uuid4())
            self.cart_items[item_id] = {
                "id": item_id,
                "variantId": variant_id,
                "quantity": quantity,
                "createdAt": _now(),
            }

    def update_item(self, item_id: str, quantity: int) -> None:
        with self.lock:
            if item_id not in self.cart_items:
                raise NotFound("Cart item not found")
            self.cart_items[item_id]["quantity"] = quantity

    def remove_item(self, item_id: str) -> None:
        with self.lock:
            if self.cart_items.pop(item_id, None) is None:
                raise NotFound("Cart item not found")

    def clear_cart(self) -> None:
        with self.lock:
            self.cart_items.clear()

    # =====================================================
    # ORDERS
    # =====================================================
    def create_order(self, shipping_type: str, shipping_cost, country: str | None = None) -> dict:
        with self.lock:
            if not self.cart_items:
                raise Conflict("Cart is empty")

            currency = currency_for_shipping(shipping_type, country)
            items = []
            for cart_item in self.cart_items.values():
                variant = VARIANTS[cart_item["variantId"]]
                product = PRODUCTS[variant["productId"]]
                base = product["idPrice"] if currency == Currency.IDR else product["enPrice"]
                price = final_unit_price(base)
                items.append({
                    "product_id": product["id"],
                    "variant_id": variant["id"],
                    "product_name": product["name"],
                    "variant_name": variant["variantName"],
                    "sku": variant["sku"],
                    "quantity": cart_item["quantity"],
                    "price_per_item": str(price),
                    "discount": "0",
                    "subtotal": str(line_subtotal(price, cart_item["quantity"])),
                })

            subtotal = sum((Decimal(i["subtotal"]) for i in items), Decimal("0"))
            self._order_seq += 1
            order_number = f"ORD-{datetime.now(timezone.utc):%Y%m%d}-{self._order_seq:04d}"
            order = {
                "id": str(uuid.uuid4()),
                "order_number": order_number,
                "status": OrderStatus.PENDING.value,
                "currency": currency.value,
                "shipping_type": ShippingType(shipping_type).value,
                "subtotal": str(subtotal),
                "discount": "0",
                "tax": str(tax(subtotal, currency)),
                "shipping_cost": str(shipping_cost),
                "total": str(order_total(subtotal, shipping_cost, 0, currency)),
                "items": items,
                "payment_status": PaymentStatus.UNPAID.value,
                "created_at": _now(),
            }
            self.orders[order_number] = order
            self.payments[order_number] = PaymentStatus.UNPAID
            self.cart_items.clear()
            return order

    def get_order(self, order_number: str) -> dict:
        order = self.orders.get(order_number)
        if order is None:
            raise NotFound(f"Order {order_number} not found")
        return order

    def list_orders(self, page: int, limit: int, status: str | None = None, search: str | None = None):
        orders: List[dict] = list(self.orders.values())
        if status:
            orders = [o for o in orders if o["status"] == status]
        if search:
            orders = [o for o in orders if search.lower() in o["order_number"].lower()]

        total = len(orders)
        start = (page - 1) * limit
        meta = {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
        }
        return orders[start:start + limit], meta

    def cancel_order(self, order_number: str) -> dict:
        with self.lock:
            order = self.get_order(order_number)
            if not can_cancel(order["status"]):
                raise Conflict(f"Order with status {order['status']} cannot be cancelled")
            order["status"] = OrderStatus.CANCELLED.value
            return order

    def set_order_status(self, order_number: str, status: str) -> dict:
        with self.lock:
            order = self.get_order(order_number)
            if not is_valid_transition(order["status"], status):
                raise Conflict(f"Invalid status transition {order['status']} -> {status}")
            order["status"] = OrderStatus(status).value
            return order

    def require_label(self, order_number: str) -> dict:
        order = self.get_order(order_number)
        if not has_label(order["status"]):
            raise Conflict("Shipping label is not available yet")
        return order

    # =====================================================
    # PAYMENTS
    # =====================================================
    def payment_status(self, order_number: str) -> dict:
        order = self.get_order(order_number)
        status = self.payments[order_number]
        return {
            "orderNumber": order_number,
            "paymentStatus": status.value,
            "paymentMethod": order.get("payment_method"),
            "paidAt": order.get("paid_at"),
        }

    def resolve_payment(self, order_number: str, status: PaymentStatus) -> None:
        with self.lock:
            order = self.get_order(order_number)
            self.payments[order_number] = status
            order["payment_status"] = status.value
            if status == PaymentStatus.PAID:
                order["status"] = OrderStatus.PAID.value
                order["paid_at"] = _now()
            elif status == PaymentStatus.FAILED:
                order["status"] = OrderStatus.FAILED.value

    # =====================================================
    # ADMIN
    # =====================================================
    def mark_shipped(self, order_number: str, tracking_number: str) -> dict:
        order = self.set_order_status(order_number, OrderStatus.SHIPPED.value)
        order["tracking_number"] = tracking_number
        return order

    def stats(self) -> dict:
        counts = {s.value: 0 for s in OrderStatus}
        for order in self.orders.values():
            counts[order["status"]] += 1
        return {"totalOrders": len(self.orders), "byStatus": counts}
