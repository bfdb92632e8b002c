from datetime import datetime
from typing import List

from storefront.schemas.common_schemas import ORMModel


class CartItemOut(ORMModel):
    product_id: int
    quantity: int
    price_snapshot: int


class CartOut(ORMModel):
    id: int
    user_id: int
    items: List[CartItemOut] = []
    subtotal: int
    updated_at: datetime


class WishlistOut(ORMModel):
    id: int
    user_id: int
    product_ids: List[int] = []
    updated_at: datetime
