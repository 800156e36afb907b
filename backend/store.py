"""Record store for activity and finance documents."""

import logging
from typing import Any, Dict, List, Optional

from database import create_document, delete_document, get_documents, update_document
from errors import RecordNotFound
from recap import MonthPeriod

logger = logging.getLogger(__name__)

# Fields the table search in the UI never shows.
_UNSEARCHED = {"id", "created_at", "updated_at", "file_ids"}


def matches_search(record: Dict[str, Any], search: str) -> bool:
    """Case-insensitive substring match against any displayed field value."""
    needle = search.lower()
    return any(
        needle in str(value).lower()
        for key, value in record.items()
        if key not in _UNSEARCHED and value is not None
    )


class RecordStore:
    """CRUD and period queries over one Mongo collection."""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        doc = create_document(self.collection_name, record)
        logger.info(f"Created {self.collection_name} {doc['id']}")
        return doc

    def update(self, record_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        doc = update_document(self.collection_name, record_id, record)
        if doc is None:
            raise RecordNotFound(self.collection_name, record_id)
        logger.info(f"Updated {self.collection_name} {record_id}")
        return doc

    def delete(self, record_id: str) -> bool:
        ok = delete_document(self.collection_name, record_id)
        if ok:
            logger.info(f"Deleted {self.collection_name} {record_id}")
        return ok

    def list(self, period: MonthPeriod, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Records dated within the period, by date then insertion order."""
        query = {
            "date": {
                "$gte": period.first_day.isoformat(),
                "$lte": period.last_day.isoformat(),
            }
        }
        docs = get_documents(self.collection_name, query, sort=[("date", 1), ("_id", 1)])
        if search:
            docs = [d for d in docs if matches_search(d, search)]
        return docs


activity_store = RecordStore("activity")
finance_store = RecordStore("finance")


def get_activity_store() -> RecordStore:
    return activity_store


def get_finance_store() -> RecordStore:
    return finance_store
