from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from storefront.schemas.common_schemas import ORMModel


class PublicSettingsOut(ORMModel):
    """The storefront-safe subset of the settings document."""
    store_name: Optional[str] = None
    payment_phone: Optional[str] = None
    payment_name: Optional[str] = None
    admin_whatsapp: Optional[str] = None
    default_country: Optional[str] = None
    currency: Optional[str] = None
    free_shipping_threshold_pesewas: Optional[int] = None
    shipping_flat_rate_pesewas: Optional[int] = None
    tax_rate_percent: Optional[float] = None
    maintenance_mode: Optional[bool] = None


class SettingsOut(PublicSettingsOut):
    id: int
    updated_at: datetime


class DayStat(BaseModel):
    date: str
    orders: int
    revenue: int


class StatusCount(BaseModel):
    name: str
    count: int


class DashboardStatsOut(BaseModel):
    total_orders: int
    pending_orders: int
    revenue: int
    customer_count: int
    product_count: int
    orders_by_day: List[DayStat]
    orders_by_status: List[StatusCount]
