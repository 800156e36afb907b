import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, List

from bson import Decimal128, ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import DataUnavailable
from settings import get_settings

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None
_db = None


def get_db():
    global _client, _db
    if _db is None:
        settings = get_settings()
        _client = MongoClient(settings.database_url, serverSelectionTimeoutMS=5000)
        _db = _client[settings.database_name]
    return _db


def collection(name: str) -> Collection:
    return get_db()[name]


@contextmanager
def unavailable_on_error(collection_name: str):
    """Translate driver failures into DataUnavailable."""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"Query on '{collection_name}' failed: {e}")
        raise DataUnavailable(f"Record store unavailable: {e}") from e


def object_id(doc_id) -> Optional[ObjectId]:
    """Parse a document id, returning None for malformed ids."""
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


def create_document(collection_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
    col = collection(collection_name)
    now = datetime.now(timezone.utc)
    data = to_document(data)
    data.update({"created_at": now, "updated_at": now})
    with unavailable_on_error(collection_name):
        res = col.insert_one(data)
        doc = col.find_one({"_id": res.inserted_id})
    return serialize_document(doc)


def update_document(collection_name: str, doc_id, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    oid = object_id(doc_id)
    if oid is None:
        return None
    col = collection(collection_name)
    updates = to_document(updates)
    updates.update({"updated_at": datetime.now(timezone.utc)})
    with unavailable_on_error(collection_name):
        res = col.update_one({"_id": oid}, {"$set": updates})
        if res.matched_count == 0:
            return None
        doc = col.find_one({"_id": oid})
    return serialize_document(doc)


def delete_document(collection_name: str, doc_id) -> bool:
    oid = object_id(doc_id)
    if oid is None:
        return False
    col = collection(collection_name)
    with unavailable_on_error(collection_name):
        res = col.delete_one({"_id": oid})
    return res.deleted_count == 1


def get_documents(collection_name: str, filter_dict: Dict[str, Any] = None, sort: Optional[List] = None) -> List[Dict[str, Any]]:
    col = collection(collection_name)
    with unavailable_on_error(collection_name):
        cursor = col.find(filter_dict or {})
        if sort:
            cursor = cursor.sort(sort)
        return [serialize_document(d) for d in cursor]


def get_document(collection_name: str, doc_id) -> Optional[Dict[str, Any]]:
    oid = object_id(doc_id)
    if oid is None:
        return None
    col = collection(collection_name)
    with unavailable_on_error(collection_name):
        doc = col.find_one({"_id": oid})
    return serialize_document(doc) if doc else None


def ping() -> None:
    with unavailable_on_error("admin"):
        get_db().list_collection_names()


def to_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert model values into BSON-encodable ones.

    Calendar dates are stored as ISO strings so period filters are plain
    string range queries; decimals are stored as Decimal128.
    """
    doc = {}
    for key, value in data.items():
        if isinstance(value, Decimal):
            value = Decimal128(value)
        elif isinstance(value, date) and not isinstance(value, datetime):
            value = value.isoformat()
        doc[key] = value
    return doc


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    if not doc:
        return doc
    doc = dict(doc)
    _id = doc.pop("_id", None)
    if _id is not None:
        doc["id"] = str(_id)
    for key, value in doc.items():
        if isinstance(value, Decimal128):
            doc[key] = value.to_decimal()
    return doc
