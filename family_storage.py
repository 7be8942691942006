import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from family_auth import Identity
from family_logger import logger

UPLOAD_COLLECTION = "familyData"
USER_COLLECTION = "users"


class PersistenceError(RuntimeError):
    pass


class FamilyDataStore:
    """Stores uploaded CSV text and user profiles in a JSON document service.

    Documents live at ``<base_url>/<collection>/<id>``; uploads are written
    with PUT, profiles merged with PATCH.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = (base_url or "").strip()
        self.session = session or requests.Session()
        self.timeout = timeout

    def _send(self, method: str, path: str, payload: Dict[str, Any]) -> None:
        if not self.base_url:
            raise PersistenceError("No storage URL set (FAMILY_DATA_URL).")
        url = self.base_url.rstrip("/") + "/" + path
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise PersistenceError(f"Storage request failed: {e}") from e
        if resp.status_code not in (200, 201, 204):
            raise PersistenceError(f"Storage request failed: HTTP {resp.status_code} - {resp.text[:200]}")

    def save_upload(self, csv_text: str, uploader_id: str) -> str:
        doc_id = f"{UPLOAD_COLLECTION}_{uuid.uuid4().hex}"
        self._send("PUT", f"{UPLOAD_COLLECTION}/{doc_id}", {
            "csvData": csv_text,
            "uploaderId": uploader_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
        logger.info(f"Stored upload {doc_id} for {uploader_id}")
        return doc_id

    def save_user(self, identity: Identity) -> None:
        self._send("PATCH", f"{USER_COLLECTION}/{identity.uid}", identity.profile())
        logger.info(f"Stored profile for {identity.uid}")
