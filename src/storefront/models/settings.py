from sqlalchemy import Boolean, Column, Float, Integer, Text

from storefront.db import Base, BigIntPK, UTCDateTime, utcnow


SETTINGS_FIELDS = (
    "store_name",
    "payment_phone",
    "payment_name",
    "admin_whatsapp",
    "default_country",
    "currency",
    "free_shipping_threshold_pesewas",
    "shipping_flat_rate_pesewas",
    "tax_rate_percent",
    "maintenance_mode",
)


class StoreSettings(Base):
    """
    Singleton store configuration edited from the admin dashboard.

    Every column is nullable: a key that was never saved falls back to the
    configured default (see services.settings.effective_settings). The first
    update creates the row; later updates patch it.
    """

    __tablename__ = "settings"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    store_name = Column(Text, nullable=True)
    payment_phone = Column(Text, nullable=True)
    payment_name = Column(Text, nullable=True)
    admin_whatsapp = Column(Text, nullable=True)
    default_country = Column(Text, nullable=True)
    currency = Column(Text, nullable=True)
    free_shipping_threshold_pesewas = Column(Integer, nullable=True)
    shipping_flat_rate_pesewas = Column(Integer, nullable=True)
    tax_rate_percent = Column(Float, nullable=True)
    maintenance_mode = Column(Boolean, nullable=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<StoreSettings id={self.id} store_name={self.store_name!r}>"
