"""MongoDB ObjectId validation and conversion."""

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId


def is_valid_object_id(value: Any) -> bool:
    """True when value is an ObjectId or a 24-char hex string."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def to_object_id(value: Any) -> ObjectId:
    """
    Convert value to an ObjectId.

    Raises ValueError if the value is not a well-formed identifier.
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid ID: {value!r}")
    try:
        return ObjectId(value)
    except InvalidId:
        raise ValueError(f"Invalid ID: {value!r}")


def serialize_document(doc: dict | None) -> dict | None:
    """
    Return a JSON-friendly copy of a Mongo document.

    `_id` becomes a string `id`; nested ObjectIds are stringified.
    """
    if doc is None:
        return None
    return _serialize(doc)


def _serialize(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            if key == "_id":
                result["id"] = _serialize(item)
            else:
                result[key] = _serialize(item)
        return result
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value
