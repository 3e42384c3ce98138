"""Optional mirror of the collections to the spreadsheet bridge.

The bridge is an HTTP endpoint (a Google Apps Script web app in production)
that stores one sheet per collection. Sync never blocks local work: every
failure is logged as a warning and reported as a falsy return value.
"""

import logging
from typing import Dict, List, Optional

import httpx

from config import SHEETS_API_URL, SYNC_TIMEOUT, SYNCED_COLLECTIONS, USERS
from errors import PersistenceError
from store import RecordStore, load_settings, validate_records

logger = logging.getLogger(__name__)


def get_active_url(store: RecordStore) -> str:
    """The admin override saved in settings, else the SHEETS_API_URL environment value."""
    return (load_settings(store).get("sheets_url") or SHEETS_API_URL or "").strip()


class SheetsClient:
    def __init__(self, url: str, timeout: float = SYNC_TIMEOUT, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport, follow_redirects=True)

    def push(self, collection: str, records: List[dict]) -> bool:
        try:
            with self._client() as client:
                response = client.post(
                    self.url,
                    json={"action": "save", "collection": collection, "data": records},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Sync push of %s to spreadsheet failed: %s", collection, e)
            return False
        logger.info("Pushed %d %s records to spreadsheet", len(records), collection)
        return True

    def pull(self, collection: str) -> Optional[List[dict]]:
        try:
            with self._client() as client:
                response = client.get(self.url, params={"action": "get", "collection": collection})
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Sync pull of %s from spreadsheet failed: %s", collection, e)
            return None

        data = body.get("data") if isinstance(body, dict) else body
        if not isinstance(data, list):
            logger.warning("Spreadsheet returned no list for %s", collection)
            return None
        return data


class MirroredRecordStore(RecordStore):
    """Writes go to the local store first, then are pushed to the spreadsheet."""

    def __init__(self, inner: RecordStore, client: Optional[SheetsClient]):
        self.inner = inner
        self.client = client

    def get(self, collection):
        return self.inner.get(collection)

    def put(self, collection, records):
        self.inner.put(collection, records)
        if self.client is not None and collection in SYNCED_COLLECTIONS:
            self.client.push(collection, records)


def pull_all(store: RecordStore, client: SheetsClient) -> Dict[str, int]:
    """Replace local collections with the spreadsheet copies that came back.

    Collections the bridge could not return, returned empty, or returned with
    records that fail validation are left as they are. A users list without an
    admin is refused too, so a pull can never lock the admins out.
    """
    pulled = {}
    for collection in SYNCED_COLLECTIONS:
        records = client.pull(collection)
        if not records:
            continue
        try:
            items = validate_records(collection, records)
        except PersistenceError:
            logger.warning("Spreadsheet copy of %s is malformed, local data kept", collection)
            continue
        if collection == USERS and not any(u.role == "admin" for u in items):
            logger.warning("Spreadsheet users list has no admin, local data kept")
            continue
        store.put(collection, records)
        pulled[collection] = len(records)
    logger.info("Pulled from spreadsheet: %s", pulled or "nothing")
    return pulled
