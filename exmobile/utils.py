# exmobile/utils.py
import datetime

from bson import ObjectId
from bson.errors import InvalidId


def utc_now():
    return datetime.datetime.now(datetime.timezone.utc)


def to_iso_z(dt):
    """Converts a datetime object to ISO 8601 format with a 'Z' for UTC."""
    if isinstance(dt, datetime.datetime):
        if dt.tzinfo is not None:
            dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return dt.isoformat() + "Z"
    return None


def serialize(value):
    """Makes a Mongo document JSON-safe: ObjectIds become strings, datetimes ISO strings."""
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime.datetime):
        return to_iso_z(value)
    return value


def parse_object_id(raw_id):
    """Returns an ObjectId, or None when `raw_id` is not a valid one."""
    try:
        return ObjectId(raw_id)
    except (InvalidId, TypeError):
        return None


# --- Response envelopes ---

def created_envelope(inserted_id):
    return {"acknowledged": True, "insertedId": str(inserted_id) if inserted_id is not None else None}


def updated_envelope(result):
    return {"acknowledged": True, "matchedCount": result.matched_count, "modifiedCount": result.modified_count}


def deleted_envelope(result):
    return {"acknowledged": True, "deletedCount": result.deleted_count}
