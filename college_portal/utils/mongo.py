from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from college_portal.core.errors import ValidationFailed


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailed("Invalid ID format", details=[{"field": "id", "message": "Invalid ID format"}])


def utcnow() -> datetime:
    # stored naive, the way the driver hands datetimes back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def split_update(fields: dict):
    """Split a partial update into ``$set`` and ``$unset`` parts; None clears a field."""
    to_set = {k: v for k, v in fields.items() if v is not None}
    to_unset = {k: "" for k, v in fields.items() if v is None}
    return to_set, to_unset
