# storefront/services/order_facade.py
from typing import List

from storefront.domain.errors import PreconditionError, extract_error_message
from storefront.domain.order_rules import can_cancel
from storefront.domain.schemas import Order, OrderListParams, OrderStatus, PaginationMeta
from storefront.services.notification_service import LoggingNotifier, Notifier
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderListFacade:
    """
    Lista zamowien z paginacja po stronie serwera.
    Kazda zmiana filtra wraca na strone 1.
    """

    def __init__(
        self,
        order_service: OrderService,
        notifier: Notifier | None = None,
        initial_params: OrderListParams | None = None,
        admin: bool = False,
    ):
        self.order_service = order_service
        self.notifier = notifier or LoggingNotifier()
        self.admin = admin

        self.params = initial_params or OrderListParams()
        self.orders: List[Order] = []
        self.meta = PaginationMeta(page=self.params.page, limit=self.params.limit)
        self.is_loading = False
        self.error: str | None = None

    def fetch(self) -> None:
        self.is_loading = True
        self.error = None
        try:
            if self.admin:
                result = self.order_service.list_all_orders(self.params)
            else:
                result = self.order_service.list_orders(self.params)
            self.orders = result.items
            self.meta = result.meta
        except Exception as e:
            self.error = extract_error_message(e, "Failed to load orders")
            logger.error(f"Failed to load orders: {e}")
            self.notifier.error(self.error)
        finally:
            self.is_loading = False

    def set_filters(self, **changes) -> None:
        self.params = OrderListParams.model_validate(
            {**self.params.model_dump(), **changes, "page": 1}
        )
        self.fetch()

    def go_to_page(self, page: int) -> None:
        self.params = OrderListParams.model_validate({**self.params.model_dump(), "page": page})
        self.fetch()

    def set_status_filter(self, status: OrderStatus | None = None) -> None:
        self.set_filters(status=status)

    def set_search(self, search: str) -> None:
        self.set_filters(search=search or None)

    def refresh(self) -> None:
        self.fetch()


class OrderDetailFacade:
    """
    Szczegoly jednego zamowienia.

    load() nigdy nie rzuca, blad laduje w self.error.
    cancel() raportuje blad i rzuca go dalej, zeby wolajacy mogl przerwac
    kolejne kroki. fetch_shipping_label() przy bledzie zwraca None.
    """

    def __init__(
        self,
        order_number: str,
        order_service: OrderService,
        notifier: Notifier | None = None,
        admin: bool = False,
    ):
        self.order_number = order_number
        self.order_service = order_service
        self.notifier = notifier or LoggingNotifier()
        self.admin = admin

        self.order: Order | None = None
        self.is_loading = False
        self.is_refreshing = False
        self.error: str | None = None

    def load(self, refresh: bool = False) -> None:
        if refresh:
            self.is_refreshing = True
        else:
            self.is_loading = True
        self.error = None

        try:
            if self.admin:
                self.order = self.order_service.get_admin_order(self.order_number)
            else:
                self.order = self.order_service.get_order(self.order_number)
        except Exception as e:
            self.error = extract_error_message(e, "Failed to load order")
            logger.error(f"Failed to load order {self.order_number}: {e}")
            self.notifier.error(self.error)
        finally:
            self.is_loading = False
            self.is_refreshing = False

    def refresh(self) -> None:
        self.load(refresh=True)

    def cancel(self) -> None:
        if self.order is None:
            return

        if not can_cancel(self.order.status):
            error = PreconditionError(f"Order with status {self.order.status.value} cannot be cancelled")
            self.notifier.error(error.message)
            raise error

        try:
            self.order_service.cancel_order(self.order_number)
        except Exception as e:
            logger.error(f"Failed to cancel order {self.order_number}: {e}")
            self.notifier.error(extract_error_message(e, "Failed to cancel order"))
            raise

        self.notifier.success("Order cancelled successfully")
        self.refresh()

    def fetch_shipping_label(self) -> str | None:
        try:
            if self.admin:
                url = self.order_service.get_admin_shipping_label(self.order_number)
            else:
                url = self.order_service.get_shipping_label(self.order_number)
        except Exception as e:
            logger.error(f"Failed to get shipping label for {self.order_number}: {e}")
            self.notifier.error(extract_error_message(e, "Failed to get shipping label"))
            return None

        self.notifier.success("Shipping label opened")
        return url
