"""
Klient przeciwko mock backendowi (FastAPI TestClient), bez sieci.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from storefront.domain.errors import ApiError, PreconditionError
from storefront.domain.schemas import (
    CalculateShippingIn,
    CreateOrderIn,
    OrderListParams,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ShippingAddress,
    ShippingItemIn,
    ShippingLabelUrl,
    ShippingType,
)
from storefront.services.cart_service import CartService, ShoppingCart
from storefront.services.invoice_service import InvoiceService
from storefront.services.order_facade import OrderDetailFacade, OrderListFacade
from storefront.services.order_service import OrderService
from storefront.services.payment_poller import PaymentStatusPoller, PollerState
from storefront.services.payment_service import PaymentService


def _address(country="ID"):
    return ShippingAddress(
        recipient_name="Budi",
        recipient_phone="+628123456789",
        shipping_address="Jl. Sudirman 1",
        shipping_city="Jakarta",
        shipping_country=country,
        shipping_postal_code="10220",
    )


def _place_order(api, shipping_type=ShippingType.DOMESTIC, cost="15000", country="ID"):
    CartService(api).add_item("var-1", 2)
    return OrderService(api).create_order(CreateOrderIn(
        shipping_type=shipping_type,
        shipping_method="REG",
        shipping_cost=Decimal(cost),
        shipping_address=_address(country),
    ))


class TestCartFlow:
    def test_add_and_read_cart(self, api):
        service = CartService(api)
        service.add_item("var-1", 2)
        service.add_item("var-1", 1)

        cart = service.get_cart()

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.summary.subtotal == Decimal("13500000")

    def test_update_remove_clear(self, api):
        service = CartService(api)
        service.add_item("var-1", 1)
        service.add_item("var-3", 1)
        item_id = service.get_cart().find_by_variant("var-3").id

        service.update_item_quantity(item_id, 4)
        assert service.get_cart().find_by_variant("var-3").quantity == 4

        service.remove_item(item_id)
        assert service.get_cart().find_by_variant("var-3") is None

        service.clear_cart()
        assert service.get_cart().items == []

    def test_unknown_variant_is_api_error(self, api):
        with pytest.raises(ApiError) as exc:
            CartService(api).add_item("var-404", 1)

        assert exc.value.status_code == 404
        assert exc.value.code == "NOT_FOUND"
        assert exc.value.message == "Variant var-404 not found"

    def test_validation_error_has_field_errors(self, api):
        with pytest.raises(ApiError) as exc:
            api.post("/cart/items", json={"variantId": "var-1", "quantity": 0})

        assert exc.value.status_code == 422
        assert "quantity" in exc.value.field_errors

    def test_login_merge_keeps_server_quantity(self, api, guest_store, notifier):
        service = CartService(api)
        service.add_item("var-1", 2)
        guest_store.add("var-1", 5)
        guest_store.add("var-3", 1)
        cart = ShoppingCart(service, guest_store, notifier)

        result = cart.login()

        assert result.added == ["var-3"]
        assert result.skipped == ["var-1"]
        assert cart.cart.find_by_variant("var-1").quantity == 2
        assert cart.cart.find_by_variant("var-3").quantity == 1
        assert guest_store.get() == []

    def test_shopping_cart_reports_server_error(self, api, guest_store, notifier):
        cart = ShoppingCart(CartService(api), guest_store, notifier, is_authenticated=True)

        cart.add_to_cart("var-404", 1)

        assert notifier.errors == ["Variant var-404 not found"]


class TestOrderFlow:
    def test_create_domestic_order(self, api):
        order = _place_order(api)

        assert order.status == OrderStatus.PENDING
        assert order.currency.value == "IDR"
        assert order.subtotal == Decimal("9000000")
        assert order.tax == Decimal("990000")
        assert order.total == Decimal("10005000")
        assert order.order_number.startswith("ORD-")
        assert CartService(api).get_cart().items == []

    def test_international_order_in_usd(self, api):
        order = _place_order(api, ShippingType.INTERNATIONAL, cost="45", country="US")

        assert order.currency.value == "USD"
        assert order.tax == Decimal("0")
        assert order.total == Decimal("645")

    def test_empty_cart_cannot_be_ordered(self, api):
        with pytest.raises(ApiError) as exc:
            OrderService(api).create_order(CreateOrderIn(
                shipping_type=ShippingType.DOMESTIC,
                shipping_method="REG",
                shipping_cost=Decimal("0"),
                shipping_address=_address(),
            ))
        assert exc.value.message == "Cart is empty"
        assert exc.value.status_code == 400
        assert exc.value.code == "BAD_REQUEST"

    def test_calculate_shipping(self, api):
        options = OrderService(api).calculate_shipping(CalculateShippingIn(
            destination_type=ShippingType.DOMESTIC,
            destination_postal_code="10220",
            items=[ShippingItemIn(product_id="prod-1", variant_id="var-1", quantity=1)],
        ))

        assert [o.courier_service for o in options] == ["REG", "YES"]

    def test_list_facade_filters_and_pages(self, api, notifier):
        first = _place_order(api)
        _place_order(api)
        OrderService(api).cancel_order(first.order_number)

        facade = OrderListFacade(OrderService(api), notifier, initial_params=OrderListParams(limit=1))
        facade.fetch()
        assert facade.meta.total == 2
        assert facade.meta.total_pages == 2

        facade.go_to_page(2)
        facade.set_status_filter(OrderStatus.CANCELLED)

        assert facade.params.page == 1
        assert [o.order_number for o in facade.orders] == [first.order_number]

    def test_detail_cancel_and_label(self, api, notifier):
        order = _place_order(api)
        facade = OrderDetailFacade(order.order_number, OrderService(api), notifier)
        facade.load()

        assert facade.fetch_shipping_label() is None
        assert notifier.errors == ["Shipping label is not available yet"]

        facade.cancel()
        assert facade.order.status == OrderStatus.CANCELLED

        with pytest.raises(PreconditionError):
            facade.cancel()

    def test_missing_order(self, api, notifier):
        facade = OrderDetailFacade("ORD-NOPE", OrderService(api), notifier)
        facade.load()
        assert facade.error == "Order ORD-NOPE not found"


class TestAdminFlow:
    def test_status_progression_and_label(self, api, mock_store):
        order = _place_order(api)
        service = OrderService(api)

        order = service.update_order_status(order, OrderStatus.PAID)
        order = service.update_order_status(order, OrderStatus.PROCESSING)
        assert order.status == OrderStatus.PROCESSING

        with pytest.raises(PreconditionError):
            service.update_order_status(order, OrderStatus.COMPLETED)

        mock_store.mark_shipped(order.order_number, "JNE123")
        assert service.get_admin_shipping_label(order.order_number).endswith(f"{order.order_number}.pdf")
        assert service.get_tracking(order.order_number)["trackingNumber"] == "JNE123"

    def test_stats(self, api):
        _place_order(api)
        stats = OrderService(api).get_order_stats()
        assert stats["totalOrders"] == 1
        assert stats["byStatus"]["PENDING"] == 1


class TestPaymentFlow:
    def test_create_payment(self, api):
        order = _place_order(api)

        payment = PaymentService(api).create_payment(order.order_number, PaymentMethod.MIDTRANS_SNAP)

        assert payment.payment_url.endswith(order.order_number)
        assert payment.amount == order.total

    def test_poller_resolves_when_gateway_confirms(self, api, mock_store, scheduler, notifier):
        order = _place_order(api)
        navigator = MagicMock()
        poller = PaymentStatusPoller(
            order.order_number,
            PaymentService(api),
            navigator,
            notifier=notifier,
            scheduler=scheduler,
            check_interval=5,
            initial_delay=2,
        )
        poller.start()

        scheduler.advance(5)
        assert poller.check_count == 2

        mock_store.resolve_payment(order.order_number, PaymentStatus.PAID)
        scheduler.advance(5)

        assert poller.state == PollerState.RESOLVED_PAID
        navigator.to_success.assert_called_once_with(order.order_number)
        assert OrderService(api).get_order(order.order_number).status == OrderStatus.PAID


class TestInvoices:
    def test_invoice_pdf(self, api):
        order = _place_order(api)
        assert InvoiceService(api).download_invoice(order.order_number).startswith(b"%PDF")

    def test_domestic_label_is_url(self, api, mock_store):
        order = _place_order(api)
        for status in ("PAID", "PROCESSING", "SHIPPED"):
            mock_store.set_order_status(order.order_number, status)

        label = InvoiceService(api).download_shipping_label(order.order_number)

        assert isinstance(label, ShippingLabelUrl)

    def test_international_label_is_pdf(self, api, mock_store):
        order = _place_order(api, ShippingType.INTERNATIONAL, cost="45", country="US")
        for status in ("PAID", "PROCESSING", "SHIPPED"):
            mock_store.set_order_status(order.order_number, status)

        label = InvoiceService(api).download_shipping_label(order.order_number)

        assert label.startswith(b"%PDF")
