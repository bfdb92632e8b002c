import uuid
from datetime import datetime, timedelta, timezone

import bcrypt

from storefront.core.config import config


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.security.password_hash_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database; treat as a mismatch.
        return False


def new_session_token() -> str:
    return str(uuid.uuid4())


def session_expiry(now: datetime = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(days=config.security.session_duration_days)
