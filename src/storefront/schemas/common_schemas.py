from typing import Any, Dict, Type

from pydantic import BaseModel, ConfigDict

from storefront.services.pagination import Page


class ORMModel(BaseModel):
    """Base for response shapes read straight off ORM rows."""
    model_config = ConfigDict(from_attributes=True)


def dump(schema: Type[BaseModel], obj: Any) -> Any:
    """Shape one row (or None) into JSON-ready data."""
    if obj is None:
        return None
    return schema.model_validate(obj).model_dump(mode="json")


def dump_many(schema: Type[BaseModel], rows) -> list:
    return [dump(schema, row) for row in rows]


def dump_page(schema: Type[BaseModel], page: Page) -> Dict[str, Any]:
    return {
        "items": dump_many(schema, page.items),
        "next_cursor": page.next_cursor,
    }
