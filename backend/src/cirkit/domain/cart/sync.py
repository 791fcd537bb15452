"""Guest / account cart reconciliation.

Signed out, every cart change is written to local storage right away.
Signing in merges the guest cart into the account cart (quantities summed),
saves the result server-side and empties local storage. While signed in,
changes are queued and written by ``flush``.
"""

from cirkit.domain.cart.models import CartItem, merge_items
from cirkit.domain.cart.ports import CartRepositoryPort
from cirkit.domain.cart.store import GuestCartStorage, ShoppingCart
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)


class CartSynchronizer:
    """Keeps a ``ShoppingCart`` in sync with guest storage or the account."""

    def __init__(
        self,
        cart: ShoppingCart,
        guest_storage: GuestCartStorage,
        repository: CartRepositoryPort,
    ) -> None:
        self.cart = cart
        self.guest_storage = guest_storage
        self.repository = repository
        self.user_id: str | None = None
        self._dirty = False
        self._restoring = False

        self.cart.replace(self.guest_storage.load())
        self._unsubscribe = self.cart.subscribe(self._on_change)

    @property
    def signed_in(self) -> bool:
        return self.user_id is not None

    @property
    def has_pending_changes(self) -> bool:
        return self._dirty

    def _on_change(self, items: tuple[CartItem, ...]) -> None:
        if self._restoring:
            return
        if self.user_id is None:
            self.guest_storage.save(items)
        else:
            self._dirty = True

    def _restore(self, items: list[CartItem]) -> None:
        self._restoring = True
        try:
            self.cart.replace(items)
        finally:
            self._restoring = False

    async def sign_in(self, user_id: str) -> None:
        """Switch to the account cart, folding in whatever the guest collected.

        Raises:
            CartSyncError: The account cart could not be loaded or saved;
                the guest cart is left untouched in that case.

        Only a guest cart is merged. Signing in again as the current user just
        flushes; signing in as someone else signs the current user out first.
        """
        if self.user_id == user_id:
            await self.flush()
            return
        if self.user_id is not None:
            await self.sign_out()

        guest_items = list(self.cart.items)
        remote_items = await self.repository.load(user_id)
        merged = merge_items(remote_items, guest_items)

        if guest_items:
            await self.repository.save(user_id, merged)

        self.user_id = user_id
        self._dirty = False
        self.guest_storage.clear()
        self._restore(merged)
        logger.info(
            "cart_signed_in",
            user_id=user_id,
            guest_items=len(guest_items),
            account_items=len(remote_items),
        )

    async def flush(self) -> None:
        """Write queued changes to the account cart."""
        if self.user_id is None or not self._dirty:
            return
        await self.repository.save(self.user_id, list(self.cart.items))
        self._dirty = False

    async def sign_out(self) -> None:
        """Flush, then continue as a guest with an empty cart."""
        await self.flush()
        logger.info("cart_signed_out", user_id=self.user_id)
        self.user_id = None
        self._restore([])
        self.guest_storage.clear()

    def close(self) -> None:
        self._unsubscribe()
