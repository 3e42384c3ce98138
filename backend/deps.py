"""FastAPI dependencies shared by the route modules."""

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import get_db
from store import RecordStore, SqlRecordStore
from sync import MirroredRecordStore, SheetsClient, get_active_url
from schemas import User
from users import resolve_session

bearer = HTTPBearer(auto_error=False)


def get_local_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_store(local: RecordStore = Depends(get_local_store)) -> RecordStore:
    """The local store, mirrored to the spreadsheet when a bridge URL is configured."""
    url = get_active_url(local)
    if not url:
        return local
    return MirroredRecordStore(local, SheetsClient(url))


def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    """Token from `Authorization: Bearer <token>`, as issued by /api/auth/login."""
    return credentials.credentials if credentials else None


def get_optional_actor(
    token: Optional[str] = Depends(get_token),
    store: RecordStore = Depends(get_store),
) -> Optional[User]:
    return resolve_session(store, token)


def get_actor(actor: Optional[User] = Depends(get_optional_actor)) -> User:
    if actor is None:
        raise HTTPException(401, "Sign in required", headers={"WWW-Authenticate": "Bearer"})
    return actor
