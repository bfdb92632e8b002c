from datetime import datetime
from typing import Optional

from storefront.schemas.common_schemas import ORMModel


class UserOut(ORMModel):
    """
    Public user shape. password_hash is deliberately absent, so it is dropped
    from every response that goes through this model.
    """
    id: int
    email: str
    name: str
    role: str
    image: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime
