"""
Short numeric reference codes (order numbers, product SKUs).

Codes are random digit strings checked against an indexed column before
use. The check and the later insert are separate statements, so two
concurrent creations can still land on the same code.
"""

import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 20
ORDER_NUMBER_DIGITS = 8
PRODUCT_SKU_DIGITS = 6


def random_digits(length: int) -> str:
    # Leading digit is never zero so the code keeps its length when a
    # spreadsheet or client coerces it to a number.
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest


def generate_unique_code(db: Session, column, digits: int, max_attempts: int = MAX_ATTEMPTS) -> str:
    """
    Return a digits-long code not currently present in column.

    After max_attempts collisions the last candidate is returned anyway.
    """
    candidate: Optional[str] = None
    for attempt in range(1, max_attempts + 1):
        candidate = random_digits(digits)
        taken = db.execute(select(column).where(column == candidate).limit(1)).first()
        if taken is None:
            return candidate
        logger.debug(f"Code collision on {column.key} (attempt {attempt}): {candidate}")

    logger.warning(f"Gave up finding a free {column.key} after {max_attempts} attempts")
    return candidate
