import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.config import StoreConfig, config
from storefront.models import StoreSettings
from storefront.models.settings import SETTINGS_FIELDS
from storefront.services.auth import require_admin

logger = logging.getLogger(__name__)


def _first(db: Session) -> Optional[StoreSettings]:
    return db.execute(select(StoreSettings).order_by(StoreSettings.id).limit(1)).scalar_one_or_none()


def get_settings(db: Session, session_token: Optional[str]) -> Optional[StoreSettings]:
    require_admin(db, session_token)
    return _first(db)


def get_public_settings(db: Session) -> Optional[StoreSettings]:
    """No auth. None until an admin has saved settings at least once."""
    return _first(db)


def update_settings(
    db: Session, session_token: Optional[str], changes: Dict[str, Any]
) -> StoreSettings:
    """Upsert the singleton; unknown keys are ignored."""
    admin = require_admin(db, session_token)
    updates = {k: changes[k] for k in SETTINGS_FIELDS if changes.get(k) is not None}

    doc = _first(db)
    if doc is None:
        doc = StoreSettings(**updates)
        db.add(doc)
    else:
        for key, value in updates.items():
            setattr(doc, key, value)
    db.commit()
    logger.info(f"Store settings updated by admin {admin.id}: {sorted(updates)}")
    return doc


def effective_settings(db: Session) -> StoreConfig:
    """Saved settings layered over the configured defaults."""
    defaults = config.store
    doc = _first(db)
    merged = {
        field: getattr(defaults, field)
        for field in SETTINGS_FIELDS
    }
    if doc is not None:
        for field in SETTINGS_FIELDS:
            value = getattr(doc, field)
            if value is not None:
                merged[field] = value
    return StoreConfig(timezone=defaults.timezone, **merged)
