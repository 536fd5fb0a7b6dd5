"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, parse_duration
from utils.text import capitalize
from utils.object_id import is_valid_object_id, to_object_id, serialize_document
