from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from storefront.schemas.common_schemas import ORMModel


class NotificationOut(ORMModel):
    id: int
    user_id: int
    type: str
    title: str
    body: Optional[str] = None
    read: bool
    link: Optional[str] = None
    # The ORM attribute is metadata_ (Base.metadata is SQLAlchemy's own).
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="metadata_")
    created_at: datetime
