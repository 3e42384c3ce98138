"""Key-value record store.

Each collection (production, users, off_days, logs, settings, sessions) is one JSON
document holding a flat list of records. Every core operation receives a store
handle, so tests can pass a MemoryRecordStore instead of the database.

The whole collection is re-read on every operation. At the volume of a single
plant's daily entries this is cheap, and it keeps the store free of indexes
that could drift from the documents.
"""

import json
import logging
from typing import Dict, List, Optional

import pydantic
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import LOGS, OFF_DAYS, PRODUCTION, SESSIONS, SETTINGS, USERS
from errors import ConflictError, PersistenceError
from models import Collection
from schemas import LogEntry, LoginSession, OffDay, ProductionEntry, User

logger = logging.getLogger(__name__)


class RecordStore:
    """Interface: read and replace whole collections."""

    def get(self, collection: str) -> List[dict]:
        raise NotImplementedError

    def put(self, collection: str, records: List[dict]) -> None:
        raise NotImplementedError


class MemoryRecordStore(RecordStore):
    """Holds serialized documents in a dict. Used by tests and the demo seed."""

    def __init__(self, initial: Optional[Dict[str, List[dict]]] = None):
        self.documents: Dict[str, str] = {}
        for name, records in (initial or {}).items():
            self.documents[name] = json.dumps(records)

    def get(self, collection):
        raw = self.documents.get(collection)
        if raw is None:
            return []
        return json.loads(raw)

    def put(self, collection, records):
        self.documents[collection] = json.dumps(records)


class SqlRecordStore(RecordStore):
    """Collections stored as rows of the `collections` table.

    Writes use optimistic concurrency: `put` only succeeds if the row still has
    the version this handle saw on its last `get`. A handle is meant to live for
    one request, so a stale read surfaces as ConflictError instead of silently
    overwriting another client's write.
    """

    def __init__(self, db: Session):
        self.db = db
        self._versions: Dict[str, int] = {}

    def get(self, collection):
        try:
            row = self.db.query(Collection).filter(Collection.name == collection).first()
        except SQLAlchemyError as e:
            logger.error("Reading collection %s failed: %s", collection, e)
            raise PersistenceError(f"Could not read {collection}") from e

        if row is None:
            self._versions[collection] = 0
            return []
        self._versions[collection] = row.version
        try:
            return json.loads(row.payload)
        except ValueError as e:
            logger.error("Collection %s holds invalid JSON", collection)
            raise PersistenceError(f"Collection {collection} is corrupted") from e

    def put(self, collection, records):
        if collection not in self._versions:
            self.get(collection)
        seen = self._versions[collection]
        payload = json.dumps(records)

        try:
            if seen == 0:
                self.db.add(Collection(name=collection, payload=payload, version=1))
                self.db.commit()
            else:
                updated = (
                    self.db.query(Collection)
                    .filter(Collection.name == collection, Collection.version == seen)
                    .update(
                        {
                            Collection.payload: payload,
                            Collection.version: seen + 1,
                            Collection.updated_at: func.now(),
                        },
                        synchronize_session=False,
                    )
                )
                if updated == 0:
                    self.db.rollback()
                    raise ConflictError(
                        f"{collection} was changed by another user, reload and try again"
                    )
                self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                f"{collection} was created by another user, reload and try again"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Writing collection %s failed: %s", collection, e)
            raise PersistenceError(f"Could not save {collection}") from e

        self._versions[collection] = seen + 1


# ===== TYPED HELPERS =====

RECORD_MODELS = {
    PRODUCTION: ProductionEntry,
    USERS: User,
    OFF_DAYS: OffDay,
    LOGS: LogEntry,
    SESSIONS: LoginSession,
}


def _load(store: RecordStore, collection: str):
    """Validate every stored record. A malformed one fails the read, so the
    following save can never drop it.
    """
    return validate_records(collection, store.get(collection))


def validate_records(collection: str, records: List[dict]) -> list:
    model = RECORD_MODELS[collection]
    items = []
    for index, raw in enumerate(records):
        try:
            items.append(model.model_validate(raw))
        except pydantic.ValidationError as e:
            logger.error("Malformed %s record at position %d: %s", collection, index, e.errors()[0]["msg"])
            raise PersistenceError(f"Collection {collection} holds a malformed record at position {index}") from e
    return items


def _dump(items) -> List[dict]:
    return [item.model_dump(mode="json") for item in items]


def load_entries(store: RecordStore) -> List[ProductionEntry]:
    return _load(store, PRODUCTION)


def save_entries(store: RecordStore, entries: List[ProductionEntry]) -> None:
    store.put(PRODUCTION, _dump(entries))


def load_users(store: RecordStore) -> List[User]:
    return _load(store, USERS)


def save_users(store: RecordStore, users: List[User]) -> None:
    store.put(USERS, _dump(users))


def load_off_days(store: RecordStore) -> List[OffDay]:
    return _load(store, OFF_DAYS)


def save_off_days(store: RecordStore, off_days: List[OffDay]) -> None:
    store.put(OFF_DAYS, _dump(off_days))


def load_logs(store: RecordStore) -> List[LogEntry]:
    return _load(store, LOGS)


def save_logs(store: RecordStore, logs: List[LogEntry]) -> None:
    store.put(LOGS, _dump(logs))


def load_sessions(store: RecordStore) -> List[LoginSession]:
    return _load(store, SESSIONS)


def save_sessions(store: RecordStore, sessions: List[LoginSession]) -> None:
    store.put(SESSIONS, _dump(sessions))


def load_settings(store: RecordStore) -> dict:
    docs = store.get(SETTINGS)
    return dict(docs[0]) if docs else {}


def save_settings(store: RecordStore, settings: dict) -> None:
    store.put(SETTINGS, [settings])
