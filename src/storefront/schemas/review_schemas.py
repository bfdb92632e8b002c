from datetime import datetime
from typing import Optional

from storefront.schemas.common_schemas import ORMModel


class ReviewOut(ORMModel):
    id: int
    user_id: Optional[int] = None
    product_id: int
    order_id: Optional[int] = None
    rating: int
    title: Optional[str] = None
    body: str
    status: str
    created_at: datetime
    updated_at: datetime
