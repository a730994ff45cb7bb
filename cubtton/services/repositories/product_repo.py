"""Product Repository - Catalogue reads."""
from typing import Optional, List
from .base import BaseRepository
from cubtton.services.models import Product


class ProductRepository(BaseRepository):
    """Product database operations."""

    async def get_products(self) -> List[Product]:
        """Get all products ordered by id."""
        result = await self.client.table("products").select("*").order("id").execute()
        return [Product(**p) for p in result.data]

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        result = await self.client.table("products").select("*").eq("id", product_id).limit(1).execute()
        return Product(**result.data[0]) if result.data else None
