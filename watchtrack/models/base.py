from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_object_id(value) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


class CamelModel(BaseModel):
    """Snake_case in Python and MongoDB, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def stringify_ids(value):
    """Recursively turn ObjectIds into strings so documents serialize cleanly."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: stringify_ids(v) for k, v in value.items()}
    if isinstance(value, list):
        return [stringify_ids(v) for v in value]
    return value
