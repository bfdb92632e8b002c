from sqlalchemy import Boolean, Column, ForeignKey, Index, Text

from storefront.db import Base, BigIntPK, JSONDocument, UTCDateTime, utcnow


NOTIFICATION_TYPES = ("order", "payment", "review", "promo", "system")


class Notification(Base):
    """An in-app message for one user. read flips once and never back."""

    __tablename__ = "notifications"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    link = Column(Text, nullable=True)
    metadata_ = Column("metadata", JSONDocument, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
    )

    def __repr__(self) -> str:
        return f"<Notification id={self.id} user_id={self.user_id} read={self.read}>"
