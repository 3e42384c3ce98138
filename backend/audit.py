"""Append-only audit log."""

import logging
import uuid
from typing import List, Optional

from dates import db_timestamp
from schemas import LogAction, LogEntry, User
from store import RecordStore, load_logs, save_logs

logger = logging.getLogger(__name__)


def add_log(store: RecordStore, actor: User, action: LogAction, details: str) -> LogEntry:
    entry = LogEntry(
        id=uuid.uuid4().hex,
        user_id=actor.id,
        user_name=actor.name,
        action=action,
        details=details,
        timestamp=db_timestamp(),
    )
    logs = load_logs(store)
    logs.append(entry)
    save_logs(store, logs)
    logger.info("%s by %s: %s", action.value, actor.username, details)
    return entry


def list_logs(store: RecordStore, limit: Optional[int] = None) -> List[LogEntry]:
    """Newest first."""
    logs = sorted(load_logs(store), key=lambda log: log.timestamp, reverse=True)
    if limit is not None:
        logs = logs[:limit]
    return logs
