# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, List

from storefront.domain.errors import extract_error_message
from storefront.domain.schemas import AddToCartIn, Cart, GuestCartItem, UpdateQuantityIn
from storefront.repos.guest_cart_store import GuestCartStore
from storefront.services.api_client import ApiClient, unwrap_data
from storefront.services.cart_reconciliation import CartReconciliation, MergeResult
from storefront.services.notification_service import LoggingNotifier, Notifier
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """Koszyk po stronie serwera (uzytkownik zalogowany)."""

    def __init__(self, api_client: ApiClient):
        self.api = api_client

    def get_cart(self) -> Cart:
        body = self.api.get("/cart")
        return Cart.model_validate(unwrap_data(body))

    def add_item(self, variant_id: str, quantity: int) -> Any:
        payload = AddToCartIn(variant_id=variant_id, quantity=quantity)
        return self.api.post("/cart/items", json=payload.model_dump(by_alias=True))

    def update_item_quantity(self, item_id: str, quantity: int) -> Any:
        payload = UpdateQuantityIn(quantity=quantity)
        return self.api.patch(f"/cart/items/{item_id}", json=payload.model_dump(by_alias=True))

    def remove_item(self, item_id: str) -> Any:
        return self.api.delete(f"/cart/items/{item_id}")

    def clear_cart(self) -> Any:
        return self.api.delete("/cart")


class ShoppingCart:
    """
    Koszyk sesji: zalogowany -> CartService, gosc -> GuestCartStore.

    Bledy nie sa rzucane dalej, trafiaja do notifiera (toast).
    """

    def __init__(
        self,
        cart_service: CartService,
        guest_store: GuestCartStore,
        notifier: Notifier | None = None,
        is_authenticated: bool = False,
    ):
        self.cart_service = cart_service
        self.guest_store = guest_store
        self.notifier = notifier or LoggingNotifier()
        self.is_authenticated = is_authenticated

        self.cart: Cart | None = None
        self.guest_items: List[GuestCartItem] = []
        self.is_loading = False

    @property
    def items_count(self) -> int:
        if self.is_authenticated:
            return self.cart.summary.total_quantity if self.cart else 0
        return sum(i.quantity for i in self.guest_items)

    @property
    def subtotal(self) -> Decimal:
        #koszyk goscia nie ma jeszcze cen
        if self.is_authenticated and self.cart:
            return self.cart.summary.subtotal
        return Decimal("0")

    def load(self) -> None:
        if not self.is_authenticated:
            self.guest_items = self.guest_store.get()
            return

        try:
            self.cart = self.cart_service.get_cart()
        except Exception as e:
            logger.error(f"Failed to load cart: {e}")

    def login(self) -> MergeResult:
        """Wywolywac raz po zalogowaniu: merge koszyka goscia i przeladowanie."""
        self.is_authenticated = True
        result = CartReconciliation(self.cart_service, self.guest_store).merge()
        self.guest_items = []
        self.load()
        return result

    def logout(self) -> None:
        self.is_authenticated = False
        self.cart = None
        self.load()

    def add_to_cart(self, variant_id: str, quantity: int) -> None:
        self.is_loading = True
        try:
            if self.is_authenticated:
                response = self.cart_service.add_item(variant_id, quantity)
                message = response.get("message") if isinstance(response, dict) else None
                self.notifier.success(message or "Item added to cart")
                self.load()
            else:
                self.guest_store.add(variant_id, quantity)
                self.guest_items = self.guest_store.get()
                self.notifier.success("Item added to cart")
        except Exception as e:
            self.notifier.error(extract_error_message(e, "Failed to add item to cart"))
        finally:
            self.is_loading = False

    def update_quantity(self, item_id: str | None, variant_id: str, quantity: int) -> None:
        self.is_loading = True
        try:
            if self.is_authenticated:
                self.cart_service.update_item_quantity(item_id, quantity)
                self.load()
            else:
                self.guest_store.update(variant_id, quantity)
                self.guest_items = self.guest_store.get()
        except Exception as e:
            self.notifier.error(extract_error_message(e, "Failed to update quantity"))
        finally:
            self.is_loading = False

    def remove_from_cart(self, item_id: str | None, variant_id: str) -> None:
        self.is_loading = True
        try:
            if self.is_authenticated:
                self.cart_service.remove_item(item_id)
                self.load()
            else:
                self.guest_store.remove(variant_id)
                self.guest_items = self.guest_store.get()
            self.notifier.success("Item removed from cart")
        except Exception as e:
            self.notifier.error(extract_error_message(e, "Failed to remove item"))
        finally:
            self.is_loading = False

    def clear(self) -> None:
        self.is_loading = True
        try:
            if self.is_authenticated:
                self.cart_service.clear_cart()
                self.load()
            else:
                self.guest_store.clear()
                self.guest_items = []
            self.notifier.success("Cart cleared successfully")
        except Exception as e:
            self.notifier.error(extract_error_message(e, "Failed to clear cart"))
        finally:
            self.is_loading = False
