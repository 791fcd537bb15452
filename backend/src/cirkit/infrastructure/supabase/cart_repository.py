"""Cart persistence over the Supabase REST (PostgREST) API.

Row level security limits ``cart_items`` to the signed-in user, so requests
carry the user's access token, not the service role key.
"""

from typing import Any

import httpx

from cirkit.domain.cart.models import CartItem, CartProduct
from cirkit.shared.exceptions import CartSyncError
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

CART_TABLE = "cart_items"
CART_SELECT = "quantity,project_title,product:products(id,name,price,image_url)"


class SupabaseCartRepository:
    """Loads and replaces a user's cart rows."""

    def __init__(
        self,
        supabase_url: str,
        anon_key: str,
        access_token: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.client = http_client or httpx.AsyncClient(
            base_url=f"{supabase_url.rstrip('/')}/rest/v1",
            timeout=timeout,
        )
        self.headers = {
            "apikey": anon_key,
            "Authorization": f"Bearer {access_token}",
        }

    async def load(self, user_id: str) -> list[CartItem]:
        try:
            response = await self.client.get(
                f"/{CART_TABLE}",
                params={"select": CART_SELECT, "user_id": f"eq.{user_id}"},
                headers=self.headers,
            )
            response.raise_for_status()
            rows: list[dict[str, Any]] = response.json()
        except httpx.HTTPError as e:
            logger.error("cart_load_failed", user_id=user_id, error=str(e))
            raise CartSyncError("Cart could not be loaded", {"user_id": user_id}) from e

        items = []
        for row in rows:
            product = row.get("product")
            if not product:
                # Product was deleted from the catalog
                continue
            items.append(
                CartItem(
                    product=CartProduct.from_dict(product),
                    quantity=int(row["quantity"]),
                    project_title=row.get("project_title"),
                )
            )
        return items

    async def save(self, user_id: str, items: list[CartItem]) -> None:
        rows = [
            {
                "user_id": user_id,
                "product_id": item.product.id,
                "quantity": item.quantity,
                "project_title": item.project_title,
            }
            for item in items
        ]
        try:
            response = await self.client.delete(
                f"/{CART_TABLE}",
                params={"user_id": f"eq.{user_id}"},
                headers=self.headers,
            )
            response.raise_for_status()
            if rows:
                response = await self.client.post(
                    f"/{CART_TABLE}",
                    json=rows,
                    headers={**self.headers, "Prefer": "return=minimal"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("cart_save_failed", user_id=user_id, error=str(e))
            raise CartSyncError("Cart could not be saved", {"user_id": user_id}) from e

        logger.debug("cart_saved", user_id=user_id, items=len(rows))

    async def close(self) -> None:
        await self.client.aclose()
