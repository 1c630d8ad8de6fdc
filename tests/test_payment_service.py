from unittest.mock import MagicMock

import pytest

from storefront.domain.schemas import Currency, PaymentMethod, PaymentStatus
from storefront.services.payment_service import (
    PaymentService,
    available_payment_methods,
    is_payment_method_available,
)


class TestPaymentMethods:
    def test_idr_uses_midtrans(self):
        assert available_payment_methods(Currency.IDR) == [PaymentMethod.MIDTRANS_SNAP]

    def test_usd_uses_paypal(self):
        assert available_payment_methods("USD") == [PaymentMethod.PAYPAL]

    def test_availability(self):
        assert is_payment_method_available("PAYPAL", Currency.USD)
        assert not is_payment_method_available(PaymentMethod.PAYPAL, Currency.IDR)

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            is_payment_method_available("BITCOIN", Currency.USD)


class TestPaymentService:
    def setup_method(self):
        self.api = MagicMock()
        self.service = PaymentService(self.api)

    def test_create_payment_sends_snake_case(self):
        self.api.post.return_value = {"data": {"orderNumber": "ORD-1", "paymentUrl": "https://pay/1"}}

        payment = self.service.create_payment("ORD-1", "MIDTRANS_SNAP")

        self.api.post.assert_called_once_with(
            "/payments", json={"order_number": "ORD-1", "payment_method": "MIDTRANS_SNAP"},
        )
        assert payment.payment_url == "https://pay/1"

    def test_get_payment_status(self):
        self.api.get.return_value = {"status": "success", "data": {"orderNumber": "ORD-1", "paymentStatus": "PAID"}}

        status = self.service.get_payment_status("ORD-1")

        self.api.get.assert_called_once_with("/payments/ORD-1/status")
        assert status.payment_status == PaymentStatus.PAID
