"""Cart value types."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CartProduct:
    """The product fields the cart needs; prices are INR, ``None`` if unlisted."""

    id: str
    name: str
    price: float | None = None
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartProduct":
        price = data.get("price")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            price=float(price) if price is not None else None,
            image_url=data.get("image_url"),
        )


@dataclass(frozen=True)
class CartItem:
    product: CartProduct
    quantity: int
    project_title: str | None = None

    @property
    def subtotal(self) -> float:
        return (self.product.price or 0) * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "project_title": self.project_title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        return cls(
            product=CartProduct.from_dict(data["product"]),
            quantity=int(data["quantity"]),
            project_title=data.get("project_title"),
        )


def merge_items(base: list[CartItem], extra: list[CartItem]) -> list[CartItem]:
    """Combine two carts; quantities of the same product are summed.

    Order follows ``base`` first, then products only present in ``extra``.
    The first known project title wins.
    """
    merged: dict[str, CartItem] = {}
    for item in [*base, *extra]:
        existing = merged.get(item.product.id)
        if existing is None:
            merged[item.product.id] = item
        else:
            merged[item.product.id] = CartItem(
                product=existing.product,
                quantity=existing.quantity + item.quantity,
                project_title=existing.project_title or item.project_title,
            )
    return list(merged.values())
