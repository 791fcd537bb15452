"""Ports for cart persistence."""

from __future__ import annotations

from typing import Protocol

from cirkit.domain.cart.models import CartItem


class CartRepositoryPort(Protocol):
    """Server-side cart of a signed-in user."""

    async def load(self, user_id: str) -> list[CartItem]:
        """Return the stored cart (empty if none)."""

    async def save(self, user_id: str, items: list[CartItem]) -> None:
        """Replace the stored cart with ``items``."""
