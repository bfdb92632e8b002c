from sqlalchemy import Column, ForeignKey

from storefront.db import Base, BigIntPK, JSONDocument, UTCDateTime, utcnow


class Cart(Base):
    """
    A user's shopping cart.

    items is a JSON list of {"product_id", "quantity", "price_snapshot"}
    dicts. The whole list is rewritten on every change; there is no
    cart_items table. user_id is unique, so a user has at most one cart.

    The list must be reassigned (not mutated in place) for SQLAlchemy to
    notice the change.
    """

    __tablename__ = "carts"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    items = Column(JSONDocument, nullable=False, default=list)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def subtotal(self) -> int:
        return sum(i["price_snapshot"] * i["quantity"] for i in self.items or [])

    def __repr__(self) -> str:
        return f"<Cart id={self.id} user_id={self.user_id} lines={len(self.items or [])}>"


class Wishlist(Base):
    """A user's saved products, kept as a JSON list of product ids."""

    __tablename__ = "wishlists"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    product_ids = Column(JSONDocument, nullable=False, default=list)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Wishlist id={self.id} user_id={self.user_id}>"
