"""Evidence file storage on local disk, with metadata in the `file` collection."""

import logging
import os
import uuid
from typing import Any, Dict, Tuple

from database import create_document, get_document
from errors import DataUnavailable, RecordNotFound
from settings import get_settings

logger = logging.getLogger(__name__)


class BlobStore:
    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir
        os.makedirs(self.upload_dir, exist_ok=True)

    def _path(self, filename: str) -> str:
        safe_name = os.path.basename(filename or "upload") or "upload"
        return os.path.join(self.upload_dir, f"{uuid.uuid4().hex}_{safe_name}")

    def upload(self, filename: str, content_type: str, data: bytes) -> Dict[str, Any]:
        path = self._path(filename)
        with open(path, "wb") as f:
            f.write(data)
        try:
            doc = create_document("file", {
                "filename": filename,
                "content_type": content_type or "application/octet-stream",
                "path": path,
                "size": len(data),
            })
        except DataUnavailable:
            os.remove(path)
            raise
        logger.info(f"Stored file {doc['id']} ({len(data)} bytes)")
        return doc

    def open(self, file_id: str) -> Tuple[Dict[str, Any], str]:
        """Metadata and on-disk path of a stored file."""
        doc = get_document("file", file_id)
        if not doc:
            raise RecordNotFound("file", file_id)
        path = doc.get("path")
        if not path or not os.path.exists(path):
            logger.error(f"File {file_id} missing on disk at {path}")
            raise RecordNotFound("file", file_id)
        return doc, path


def get_blob_store() -> BlobStore:
    return BlobStore(get_settings().upload_dir)
