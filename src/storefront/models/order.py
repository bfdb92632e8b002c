from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, Text

from storefront.db import Base, BigIntPK, JSONDocument, UTCDateTime, utcnow


ORDER_STATUSES = (
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
    "refunded",
)
ORDER_TYPES = ("delivery", "pickup")
PAYMENT_STATUSES = ("pending", "sent", "confirmed", "failed", "expired", "refunded")


class Order(Base):
    """
    A placed order.

    items snapshots {"product_id", "quantity", "price_snapshot", "name"} at
    the moment of purchase so later catalog edits never rewrite history.

    subtotal/shipping/tax/total are pesewas. Orders created through
    orders.create keep whatever totals the client sent; only checkout
    computes them server-side.

    status is a plain text column with no transition rules: an admin may move
    an order from any status to any other.

    order_number is the short reference customers quote on WhatsApp. It is
    probed for uniqueness before insert but not constrained.

    payment_id points at the latest payment recorded for the order. It has no
    foreign key because payments already reference orders.
    """

    __tablename__ = "orders"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_number = Column(Text, nullable=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    items = Column(JSONDocument, nullable=False, default=list)
    subtotal = Column(Integer, nullable=False)
    shipping = Column(Integer, nullable=True)
    tax = Column(Integer, nullable=True)
    total = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    order_type = Column(Text, nullable=False, default="delivery")
    payment_id = Column(BigInteger, nullable=True)
    shipping_address = Column(JSONDocument, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_orders_user", "user_id"),
        Index("ix_orders_status", "status"),
        Index("ix_orders_payment", "payment_id"),
        Index("ix_orders_number", "order_number"),
    )

    @property
    def reference(self) -> str:
        """What the customer sees as 'Order #…'."""
        return self.order_number or str(self.id)[-8:]

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status!r} total={self.total}>"


class Payment(Base):
    """
    A manual mobile-money payment confirmed over WhatsApp.

    The customer pays to the store's phone number and sends proof on
    WhatsApp; an admin then flips status to confirmed. The whatsapp_* columns
    hold whatever thread/message reference the admin wants to keep.
    """

    __tablename__ = "payments"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(
        BigIntPK, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    amount = Column(Integer, nullable=False)
    currency = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    whatsapp_thread_id = Column(Text, nullable=True)
    whatsapp_message_id = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_payments_order", "order_id"),
        Index("ix_payments_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment id={self.id} order_id={self.order_id} "
            f"status={self.status!r} amount={self.amount}>"
        )
