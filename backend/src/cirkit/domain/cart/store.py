"""Shopping cart store.

The cart is an explicit store object: views subscribe to it and receive the
item list after every change instead of reading shared global state.
"""

import json
from collections.abc import Callable, Iterable

from cirkit.domain.cart.models import CartItem, CartProduct, merge_items
from cirkit.infrastructure.storage.local import KeyValueStorage
from cirkit.shared.exceptions import ValidationError
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

GUEST_CART_KEY = "cirkit_cart"

CartListener = Callable[[tuple[CartItem, ...]], None]


class ShoppingCart:
    """In-memory cart with change notifications."""

    def __init__(self, items: Iterable[CartItem] = ()) -> None:
        self._items: list[CartItem] = list(items)
        self._listeners: list[CartListener] = []
        self.is_open = False

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def total_price(self) -> float:
        return sum(item.subtotal for item in self._items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        items = self.items
        for listener in list(self._listeners):
            listener(items)

    def add_item(
        self,
        product: CartProduct,
        quantity: int = 1,
        project_title: str | None = None,
    ) -> None:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", {"quantity": quantity})
        self._items = merge_items(
            self._items, [CartItem(product=product, quantity=quantity, project_title=project_title)]
        )
        self._notify()

    def add_project_items(
        self,
        items: Iterable[tuple[CartProduct, int]],
        project_title: str,
    ) -> None:
        """Add every part of a project and open the cart drawer."""
        extra = [
            CartItem(product=product, quantity=quantity, project_title=project_title)
            for product, quantity in items
        ]
        self._items = merge_items(self._items, extra)
        self.is_open = True
        self._notify()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Change a quantity; zero or less removes the item."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        self._items = [
            CartItem(product=item.product, quantity=quantity, project_title=item.project_title)
            if item.product.id == product_id
            else item
            for item in self._items
        ]
        self._notify()

    def remove_item(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.product.id != product_id]
        self._notify()

    def replace(self, items: Iterable[CartItem]) -> None:
        self._items = list(items)
        self._notify()

    def clear(self) -> None:
        self._items = []
        self._notify()


class GuestCartStorage:
    """Persists a signed-out visitor's cart in local storage."""

    def __init__(self, storage: KeyValueStorage, key: str = GUEST_CART_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[CartItem]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            return [CartItem.from_dict(entry) for entry in json.loads(raw)]
        except (ValueError, KeyError, TypeError, AttributeError):
            logger.warning("guest_cart_corrupt", key=self.key)
            return []

    def save(self, items: Iterable[CartItem]) -> None:
        self.storage[self.key] = json.dumps([item.to_dict() for item in items])

    def clear(self) -> None:
        self.storage.pop(self.key, None)
