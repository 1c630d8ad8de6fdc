# storefront/services/payment_poller.py
"""
Polling statusu platnosci dla zamowienia PENDING.

IDLE -> CHECKING -> IDLE | RESOLVED_PAID | RESOLVED_FAILED

- start(): pierwszy check po initial_delay, potem co check_interval
- check_now(): reczny check poza harmonogramem, timery bez zmian
- stop() i set_auto_check(False): anuluja timery, wynik checku ktory byl w locie jest odrzucany
- blad sieci w checku nie konczy pollingu, terminalny jest tylko PAID/FAILED
- dwa checki moga byc w locie naraz, wygrywa pierwszy terminalny wynik
"""
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Protocol

from storefront.domain.schemas import PaymentStatus, PaymentStatusData
from storefront.services.notification_service import LoggingNotifier, Notifier
from storefront.services.payment_service import PaymentService
from storefront.services.scheduler import Scheduler, ThreadingScheduler, TimerHandle
from storefront.utils.logging import get_logger
from storefront.utils.settings import (
    PAYMENT_CHECK_INTERVAL_SECONDS,
    PAYMENT_INITIAL_DELAY_SECONDS,
)

logger = get_logger(__name__)


class PollerState(str, Enum):
    IDLE = "IDLE"
    CHECKING = "CHECKING"
    RESOLVED_PAID = "RESOLVED_PAID"
    RESOLVED_FAILED = "RESOLVED_FAILED"


TERMINAL_STATES = frozenset({PollerState.RESOLVED_PAID, PollerState.RESOLVED_FAILED})


class Navigator(Protocol):
    def to_success(self, order_number: str) -> None: ...

    def to_failure(self, order_number: str) -> None: ...


class PaymentStatusPoller:
    def __init__(
        self,
        order_number: str,
        payment_service: PaymentService,
        navigator: Navigator,
        notifier: Notifier | None = None,
        scheduler: Scheduler | None = None,
        check_interval: float | None = None,
        initial_delay: float | None = None,
        auto_check: bool = True,
        clock: Callable[[], datetime] | None = None,
    ):
        self.order_number = order_number
        self.payment_service = payment_service
        self.navigator = navigator
        self.notifier = notifier or LoggingNotifier()
        self.scheduler = scheduler or ThreadingScheduler()
        self.check_interval = check_interval or PAYMENT_CHECK_INTERVAL_SECONDS
        self.initial_delay = initial_delay if initial_delay is not None else PAYMENT_INITIAL_DELAY_SECONDS
        self.auto_check = auto_check
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.state = PollerState.IDLE
        self.check_count = 0
        self.last_checked: datetime | None = None

        self._lock = threading.RLock()
        self._timers: List[TimerHandle] = []
        self._mounted = False
        #podbijany przy stop(), checki ze starej generacji sa ignorowane
        self._generation = 0
        self._in_flight = 0

    @property
    def is_checking(self) -> bool:
        return self._in_flight > 0

    @property
    def is_resolved(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def is_active(self) -> bool:
        return self._mounted and bool(self._timers)

    # =====================================================
    # LIFECYCLE
    # =====================================================
    def start(self) -> None:
        with self._lock:
            if self._mounted:
                return
            self._mounted = True
            if self.auto_check:
                self._schedule()

    def stop(self) -> None:
        with self._lock:
            self._mounted = False
            self._deactivate()

    def set_auto_check(self, enabled: bool) -> None:
        with self._lock:
            self.auto_check = enabled
            if not self._mounted:
                return
            if enabled:
                self._schedule()
            else:
                self._deactivate()

    def check_now(self) -> None:
        with self._lock:
            generation = self._generation
        self._run_check(generation)

    def _schedule(self) -> None:
        if self._timers or self.is_resolved:
            return
        generation = self._generation
        logger.info(
            f"Polling payment status for {self.order_number} "
            f"(first in {self.initial_delay}s, then every {self.check_interval}s)"
        )
        self._timers = [
            self.scheduler.call_later(self.initial_delay, lambda: self._run_check(generation)),
            self.scheduler.call_every(self.check_interval, lambda: self._run_check(generation)),
        ]

    def _deactivate(self) -> None:
        #wynik checku ktory jest teraz w locie zostanie odrzucony
        self._generation += 1
        self._in_flight = 0
        self._cancel_timers()
        if not self.is_resolved:
            self.state = PollerState.IDLE

    def _cancel_timers(self) -> None:
        timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    # =====================================================
    # CHECK
    # =====================================================
    def _run_check(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._mounted or self.is_resolved:
                return
            self._in_flight += 1
            self.state = PollerState.CHECKING

        try:
            status = self.payment_service.get_payment_status(self.order_number)
        except Exception as e:
            logger.error(f"Failed to check payment status for {self.order_number}: {e}")
            status = None

        resolved = self._apply(generation, status)

        if resolved == PollerState.RESOLVED_PAID:
            self.notifier.success("Payment successful!")
            self.navigator.to_success(self.order_number)
        elif resolved == PollerState.RESOLVED_FAILED:
            self.notifier.error("Payment failed")
            self.navigator.to_failure(self.order_number)

    def _apply(self, generation: int, status: PaymentStatusData | None) -> PollerState | None:
        """Zwraca stan terminalny tylko dla checku ktory go ustawil."""
        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding payment status for {self.order_number} after teardown")
                return None

            self._in_flight = max(self._in_flight - 1, 0)

            if self.is_resolved:
                return None

            if status is not None and status.payment_status == PaymentStatus.PAID:
                self.state = PollerState.RESOLVED_PAID
            elif status is not None and status.payment_status == PaymentStatus.FAILED:
                self.state = PollerState.RESOLVED_FAILED
            else:
                if status is not None:
                    self.last_checked = self.clock()
                    self.check_count += 1
                self.state = PollerState.CHECKING if self._in_flight else PollerState.IDLE
                return None

            self._cancel_timers()
            logger.info(f"Payment for {self.order_number} resolved: {self.state.value}")
            return self.state
