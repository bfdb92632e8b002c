from sqlalchemy import Column, Index, Integer, Text

from storefront.db import Base, BigIntPK, JSONDocument, UTCDateTime, utcnow


PRODUCT_STATUSES = ("draft", "active", "archived", "out_of_stock")

# Statuses a shopper may see in catalog listings. Drafts and archived
# products stay reachable by id/slug but never show up in a list for a
# non-admin.
STORE_VISIBLE_STATUSES = ("active", "out_of_stock")


class Category(Base):
    """
    A storefront grouping (e.g. Phones, Accessories).

    sort_order is advisory: listings come back newest first and the client
    re-sorts if it cares.
    """

    __tablename__ = "categories"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_categories_slug", "slug"),
        Index("ix_categories_sort", "sort_order"),
    )

    def __repr__(self) -> str:
        return f"<Category id={self.id} slug={self.slug!r}>"


class Product(Base):
    """
    A sellable item.

    price and compare_at_price are integer pesewas (GH₵12.50 -> 1250).

    slug is indexed but NOT unique: two products may share a slug and
    get_by_slug returns the newest. sku is a short numeric code generated at
    creation when the admin does not supply one; its uniqueness is checked
    before insert but not enforced by the index.

    category_ids is a JSON list of category ids. Membership is tested in
    Python, not with a containment query, so it works on any backend.
    """

    __tablename__ = "products"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Integer, nullable=False)
    compare_at_price = Column(Integer, nullable=True)
    images = Column(JSONDocument, nullable=False, default=list)
    status = Column(Text, nullable=False, default="draft")
    stock = Column(Integer, nullable=False, default=0)
    sku = Column(Text, nullable=True)
    category_ids = Column(JSONDocument, nullable=False, default=list)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_products_slug", "slug"),
        Index("ix_products_status", "status"),
        Index("ix_products_sku", "sku"),
    )

    def in_category(self, category_id) -> bool:
        return str(category_id) in {str(c) for c in (self.category_ids or [])}

    def __repr__(self) -> str:
        return f"<Product id={self.id} slug={self.slug!r} status={self.status!r}>"
