"""Staff accounts: creation, removal, password hashing, login checks and sessions."""

import hashlib
import hmac
import logging
import secrets
import uuid
from typing import List, Optional

from audit import add_log
from config import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, ROLES, SESSION_TTL_HOURS
from dates import db_timestamp
from errors import NotFoundError, ValidationError
from permissions import ADMIN_ROLES, require_role
from schemas import LoginSession, LogAction, User
from store import RecordStore, load_sessions, load_users, save_sessions, save_users

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 260000

# Verified against on unknown usernames so a miss costs as much as a wrong password
_DUMMY_HASH = "pbkdf2_sha256$%d$%s$%s" % (PBKDF2_ITERATIONS, "0" * 32, "0" * 64)


def hash_password(pw: str, salt: Optional[str] = None, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Salted PBKDF2-SHA256, stored as pbkdf2_sha256$iterations$salt$hexdigest."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", pw.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"pbkdf2_sha256${iterations}${salt}${digest.hex()}"


def verify_password(pw: str, hashed: str) -> bool:
    try:
        algorithm, iterations, salt, _ = hashed.split("$", 3)
    except (AttributeError, ValueError):
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    return hmac.compare_digest(hash_password(pw, salt, int(iterations)), hashed)


def list_users(store: RecordStore) -> List[User]:
    return sorted(load_users(store), key=lambda u: u.name.lower())


def find_user(store: RecordStore, user_id: str) -> Optional[User]:
    for user in load_users(store):
        if user.id == user_id:
            return user
    return None


def add_user(
    store: RecordStore,
    name: str,
    username: str,
    email: str,
    role: str,
    password: str,
    actor: User,
) -> User:
    require_role(actor, ADMIN_ROLES, "manage users")

    name = (name or "").strip()
    username = (username or "").strip()
    if not name or not username:
        raise ValidationError("Name and username are required")
    if not password:
        raise ValidationError("Password is required")
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    users = load_users(store)
    if any(u.username.lower() == username.lower() for u in users):
        raise ValidationError("Username already exists!")

    user = User(
        id=uuid.uuid4().hex,
        name=name,
        username=username,
        email=(email or "").strip(),
        role=role,
        password_hash=hash_password(password),
    )
    users.append(user)
    save_users(store, users)

    add_log(store, actor, LogAction.ADD_USER, f"Created new user account: {user.name} ({user.role})")
    return user


def delete_user(store: RecordStore, user_id: str, actor: User) -> User:
    """Remove an account. The last remaining admin can never be removed."""
    require_role(actor, ADMIN_ROLES, "manage users")

    users = load_users(store)
    target = next((u for u in users if u.id == user_id), None)
    if target is None:
        raise NotFoundError("User not found")

    if target.role == "admin" and sum(1 for u in users if u.role == "admin") <= 1:
        raise ValidationError("Cannot delete the last remaining admin")

    save_users(store, [u for u in users if u.id != user_id])
    sessions = load_sessions(store)
    if any(s.user_id == user_id for s in sessions):
        save_sessions(store, [s for s in sessions if s.user_id != user_id])
    add_log(store, actor, LogAction.DELETE_USER, f"Removed user account: {target.name} (@{target.username})")
    return target


def authenticate(store: RecordStore, username: str, password: str) -> Optional[User]:
    """Return the user for a valid username/password pair; usernames are case-insensitive."""
    wanted = (username or "").strip().lower()
    user = next((u for u in load_users(store) if u.username.lower() == wanted), None)
    if user is None:
        verify_password(password or "", _DUMMY_HASH)
    elif verify_password(password or "", user.password_hash):
        add_log(store, user, LogAction.LOGIN, f"{user.name} signed in")
        return user
    logger.info("Failed login for %r", username)
    return None


# ===== SESSIONS =====

def _token_hash(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def open_session(store: RecordStore, user: User, ttl_hours: float = SESSION_TTL_HOURS) -> str:
    """Issue a bearer token for a signed-in user. Expired sessions are pruned on the way."""
    token = secrets.token_urlsafe(32)
    now = db_timestamp()
    sessions = [s for s in load_sessions(store) if s.expires_at > now]
    sessions.append(LoginSession(
        token_hash=_token_hash(token),
        user_id=user.id,
        created_at=now,
        expires_at=db_timestamp(hours=ttl_hours),
    ))
    save_sessions(store, sessions)
    return token


def resolve_session(store: RecordStore, token: Optional[str]) -> Optional[User]:
    """The user a live token belongs to, or None for unknown, expired or orphaned tokens."""
    if not token:
        return None
    wanted = _token_hash(token)
    now = db_timestamp()
    for session in load_sessions(store):
        if hmac.compare_digest(session.token_hash, wanted):
            if session.expires_at <= now:
                return None
            return find_user(store, session.user_id)
    return None


def close_session(store: RecordStore, token: str, actor: User) -> None:
    wanted = _token_hash(token)
    sessions = load_sessions(store)
    remaining = [s for s in sessions if s.token_hash != wanted]
    if len(remaining) != len(sessions):
        save_sessions(store, remaining)
    add_log(store, actor, LogAction.LOGOUT, f"{actor.name} signed out")


def ensure_default_admin(store: RecordStore) -> Optional[User]:
    """Create the bootstrap admin when there are no users at all."""
    users = load_users(store)
    if users:
        return None
    admin = User(
        id=uuid.uuid4().hex,
        name="Administrator",
        username=DEFAULT_ADMIN_USERNAME,
        email="",
        role="admin",
        password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
    )
    save_users(store, [admin])
    logger.warning("No users found, created default admin '%s'. Change its password.", admin.username)
    return admin
