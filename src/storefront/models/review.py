from sqlalchemy import Column, ForeignKey, Index, Integer, Text

from storefront.db import Base, BigIntPK, UTCDateTime, utcnow


REVIEW_STATUSES = ("pending", "approved", "rejected")


class Review(Base):
    """
    A product review. New reviews wait in 'pending' until an admin approves
    them; only approved reviews are listed publicly.
    """

    __tablename__ = "reviews"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    product_id = Column(
        BigIntPK, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    order_id = Column(
        BigIntPK, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True
    )
    rating = Column(Integer, nullable=False)
    title = Column(Text, nullable=True)
    body = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_reviews_product_status", "product_id", "status"),
        Index("ix_reviews_user", "user_id"),
        Index("ix_reviews_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Review id={self.id} product_id={self.product_id} rating={self.rating}>"
