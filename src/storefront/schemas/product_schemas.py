from datetime import datetime
from typing import List, Optional, Union

from storefront.schemas.common_schemas import ORMModel


class CategoryOut(ORMModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProductOut(ORMModel):
    id: int
    name: str
    slug: str
    description: str
    price: int
    compare_at_price: Optional[int] = None
    images: List[str] = []
    status: str
    stock: int
    sku: Optional[str] = None
    category_ids: List[Union[int, str]] = []
    created_at: datetime
    updated_at: datetime
