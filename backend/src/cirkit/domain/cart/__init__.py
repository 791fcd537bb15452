"""Shopping cart domain module."""

from cirkit.domain.cart.models import CartItem, CartProduct, merge_items
from cirkit.domain.cart.store import GuestCartStorage, ShoppingCart
from cirkit.domain.cart.sync import CartSynchronizer

__all__ = [
    "CartItem",
    "CartProduct",
    "CartSynchronizer",
    "GuestCartStorage",
    "ShoppingCart",
    "merge_items",
]
