# repos/helper.py
from datetime import datetime
from typing import Any, Optional
from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(id_str: str) -> Optional[ObjectId]:
    """Parse a public id; None when it is not a valid ObjectId."""
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None


def to_jsonable(value: Any) -> Any:
    """Recursively convert ObjectIds and datetimes so the value can be cached and returned as JSON."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
