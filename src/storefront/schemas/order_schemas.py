from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from storefront.schemas.common_schemas import ORMModel


class OrderItemOut(ORMModel):
    product_id: int
    quantity: int
    price_snapshot: int
    name: str


class ShippingAddressOut(ORMModel):
    line1: str
    line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: str
    country: str
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    email: Optional[str] = None


class OrderOut(ORMModel):
    id: int
    order_number: Optional[str] = None
    reference: str
    user_id: Optional[int] = None
    items: List[OrderItemOut] = []
    subtotal: int
    shipping: Optional[int] = None
    tax: Optional[int] = None
    total: int
    status: str
    order_type: str
    payment_id: Optional[int] = None
    shipping_address: Optional[ShippingAddressOut] = None
    created_at: datetime
    updated_at: datetime


class PaymentOut(ORMModel):
    id: int
    order_id: int
    amount: int
    currency: str
    status: str
    whatsapp_thread_id: Optional[str] = None
    whatsapp_message_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CheckoutQuoteOut(BaseModel):
    subtotal: int
    shipping: int
    tax: int
    total: int
    currency: str
    item_count: int


class CheckoutOut(ORMModel):
    order: OrderOut
    payment: PaymentOut
    whatsapp_link: str
