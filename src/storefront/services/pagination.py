from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy import Select
from sqlalchemy.orm import Session

from storefront.core.exceptions import ValidationError


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    next_cursor: Optional[str] = None


def parse_cursor(cursor: Optional[str]) -> Optional[int]:
    if cursor is None or cursor == "":
        return None
    try:
        value = int(cursor)
    except (TypeError, ValueError):
        raise ValidationError("Invalid cursor")
    if value <= 0:
        raise ValidationError("Invalid cursor")
    return value


def paginate(
    db: Session,
    stmt: Select,
    model,
    limit: int,
    cursor: Optional[str] = None,
) -> Page:
    """
    Newest-first keyset pagination over model.id.

    The cursor is the id of the last row of the previous page, as a string.
    One extra row is fetched to decide whether another page exists;
    next_cursor is None on the last page.
    """
    after = parse_cursor(cursor)
    if after is not None:
        stmt = stmt.where(model.id < after)
    rows = list(db.execute(stmt.order_by(model.id.desc()).limit(limit + 1)).scalars())
    has_more = len(rows) > limit
    rows = rows[:limit]
    next_cursor = str(rows[-1].id) if has_more and rows else None
    return Page(items=rows, next_cursor=next_cursor)
