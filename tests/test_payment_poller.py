from unittest.mock import MagicMock

import pytest

from storefront.domain.errors import TransportError
from storefront.domain.schemas import PaymentStatus, PaymentStatusData
from storefront.services.payment_poller import PaymentStatusPoller, PollerState

ORDER = "ORD-20240601-0001"


def _status(value: PaymentStatus) -> PaymentStatusData:
    return PaymentStatusData(order_number=ORDER, payment_status=value)


@pytest.fixture
def payment_service():
    service = MagicMock()
    service.get_payment_status.return_value = _status(PaymentStatus.UNPAID)
    return service


@pytest.fixture
def navigator():
    return MagicMock()


@pytest.fixture
def poller(payment_service, navigator, notifier, scheduler):
    return PaymentStatusPoller(
        ORDER,
        payment_service,
        navigator,
        notifier=notifier,
        scheduler=scheduler,
        check_interval=5,
        initial_delay=2,
    )


class TestSchedule:
    def test_checks_at_initial_delay_then_every_interval(self, poller, payment_service, scheduler):
        poller.start()

        scheduler.advance(1.9)
        assert payment_service.get_payment_status.call_count == 0

        scheduler.advance(0.1)  # t=2
        assert payment_service.get_payment_status.call_count == 1

        scheduler.advance(3)  # t=5
        assert payment_service.get_payment_status.call_count == 2

        scheduler.advance(5)  # t=10
        assert payment_service.get_payment_status.call_count == 3
        assert poller.check_count == 3

    def test_no_checks_after_stop(self, poller, payment_service, scheduler):
        poller.start()
        scheduler.advance(10)
        poller.stop()

        scheduler.advance(5)

        assert payment_service.get_payment_status.call_count == 3
        assert scheduler.pending == 0
        assert not poller.is_active

    def test_start_twice_schedules_once(self, poller, scheduler):
        poller.start()
        poller.start()
        assert scheduler.pending == 2

    def test_auto_check_disabled_schedules_nothing(self, payment_service, navigator, notifier, scheduler):
        poller = PaymentStatusPoller(
            ORDER, payment_service, navigator, notifier=notifier, scheduler=scheduler, auto_check=False,
        )
        poller.start()

        scheduler.advance(60)

        payment_service.get_payment_status.assert_not_called()

    def test_toggle_auto_check(self, poller, payment_service, scheduler):
        poller.start()
        poller.set_auto_check(False)
        scheduler.advance(20)
        assert payment_service.get_payment_status.call_count == 0

        poller.set_auto_check(True)
        scheduler.advance(2)
        assert payment_service.get_payment_status.call_count == 1

    def test_unpaid_updates_last_checked(self, poller, scheduler):
        poller.start()
        scheduler.advance(2)

        assert poller.last_checked is not None
        assert poller.state == PollerState.IDLE


class TestResolution:
    def test_unpaid_unpaid_paid_then_no_more_calls(self, poller, payment_service, navigator, scheduler):
        payment_service.get_payment_status.side_effect = [
            _status(PaymentStatus.UNPAID),
            _status(PaymentStatus.UNPAID),
            _status(PaymentStatus.PAID),
        ]
        poller.start()

        scheduler.advance(2)
        scheduler.advance(3)
        scheduler.advance(5)
        assert payment_service.get_payment_status.call_count == 3
        navigator.to_success.assert_called_once_with(ORDER)

        scheduler.advance(5)
        assert payment_service.get_payment_status.call_count == 3
        assert scheduler.pending == 0

    def test_paid_navigates_to_success_once(self, poller, payment_service, navigator, notifier, scheduler):
        payment_service.get_payment_status.return_value = _status(PaymentStatus.PAID)
        poller.start()

        scheduler.advance(30)

        assert payment_service.get_payment_status.call_count == 1
        navigator.to_success.assert_called_once_with(ORDER)
        navigator.to_failure.assert_not_called()
        assert notifier.successes == ["Payment successful!"]
        assert poller.state == PollerState.RESOLVED_PAID
        assert scheduler.pending == 0

    def test_failed_navigates_to_failure(self, poller, payment_service, navigator, notifier, scheduler):
        payment_service.get_payment_status.return_value = _status(PaymentStatus.FAILED)
        poller.start()

        scheduler.advance(2)

        navigator.to_failure.assert_called_once_with(ORDER)
        assert notifier.errors == ["Payment failed"]
        assert poller.is_resolved

    @pytest.mark.parametrize("value", [PaymentStatus.PENDING, PaymentStatus.EXPIRED, PaymentStatus.CANCELLED])
    def test_other_statuses_keep_polling(self, poller, payment_service, navigator, scheduler, value):
        payment_service.get_payment_status.return_value = _status(value)
        poller.start()

        scheduler.advance(10)

        assert payment_service.get_payment_status.call_count == 3
        navigator.to_success.assert_not_called()
        navigator.to_failure.assert_not_called()

    def test_errors_are_not_terminal(self, poller, payment_service, navigator, scheduler):
        payment_service.get_payment_status.side_effect = [
            TransportError("offline"),
            _status(PaymentStatus.UNPAID),
            _status(PaymentStatus.PAID),
        ]
        poller.start()

        scheduler.advance(2)
        assert poller.state == PollerState.IDLE
        assert poller.check_count == 0

        scheduler.advance(8)
        navigator.to_success.assert_called_once_with(ORDER)
        assert poller.check_count == 1


class TestManualCheck:
    def test_check_now_outside_schedule(self, payment_service, navigator, notifier, scheduler):
        payment_service.get_payment_status.return_value = _status(PaymentStatus.PAID)
        poller = PaymentStatusPoller(
            ORDER, payment_service, navigator, notifier=notifier, scheduler=scheduler, auto_check=False,
        )
        poller.start()

        poller.check_now()

        navigator.to_success.assert_called_once_with(ORDER)

    def test_check_now_after_stop_is_ignored(self, poller, payment_service):
        poller.start()
        poller.stop()

        poller.check_now()

        payment_service.get_payment_status.assert_not_called()

    def test_concurrent_terminal_results_first_wins(self, poller, payment_service, navigator, notifier):
        def slow_then_manual(order_number):
            # drugi check konczy sie PAID zanim wroci pierwszy
            payment_service.get_payment_status.side_effect = lambda n: _status(PaymentStatus.PAID)
            poller.check_now()
            return _status(PaymentStatus.FAILED)

        payment_service.get_payment_status.side_effect = slow_then_manual
        poller.start()

        poller.check_now()

        navigator.to_success.assert_called_once_with(ORDER)
        navigator.to_failure.assert_not_called()
        assert notifier.messages == [("success", "Payment successful!")]
        assert poller.state == PollerState.RESOLVED_PAID
        assert not poller.is_checking


class TestTeardown:
    def test_result_in_flight_during_stop_is_discarded(self, poller, payment_service, navigator, notifier, scheduler):
        def stop_then_paid(order_number):
            poller.stop()
            return _status(PaymentStatus.PAID)

        payment_service.get_payment_status.side_effect = stop_then_paid
        poller.start()

        scheduler.advance(2)

        navigator.to_success.assert_not_called()
        assert notifier.messages == []
        assert poller.state == PollerState.IDLE
        assert not poller.is_checking

    def test_result_in_flight_when_auto_check_disabled_is_discarded(
        self, poller, payment_service, navigator, notifier, scheduler
    ):
        def disable_then_paid(order_number):
            poller.set_auto_check(False)
            return _status(PaymentStatus.PAID)

        payment_service.get_payment_status.side_effect = disable_then_paid
        poller.start()

        scheduler.advance(2)

        navigator.to_success.assert_not_called()
        assert notifier.messages == []
        assert poller.state == PollerState.IDLE
        assert not poller.is_checking
        assert scheduler.pending == 0

    def test_check_now_works_after_auto_check_disabled(self, poller, payment_service, navigator):
        poller.start()
        poller.set_auto_check(False)
        payment_service.get_payment_status.return_value = _status(PaymentStatus.PAID)

        poller.check_now()

        navigator.to_success.assert_called_once_with(ORDER)

    def test_restart_after_stop(self, poller, payment_service, scheduler):
        poller.start()
        poller.stop()
        poller.start()

        scheduler.advance(2)

        assert payment_service.get_payment_status.call_count == 1
