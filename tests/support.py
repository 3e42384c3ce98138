import uuid

from schemas import OffDay, User
from store import MemoryRecordStore, save_off_days, save_users
from users import hash_password, open_session

# Low iteration count keeps the suite fast; production uses the default
FAST_ITERATIONS = 1000


def make_user(role: str, name: str = None, username: str = None, password: str = "secret") -> User:
    name = name or f"{role.title()} User"
    return User(
        id=uuid.uuid4().hex,
        name=name,
        username=username or f"{role}-{uuid.uuid4().hex[:6]}",
        email="",
        role=role,
        password_hash=hash_password(password, iterations=FAST_ITERATIONS),
    )


def make_store(users=(), off_days=()) -> MemoryRecordStore:
    store = MemoryRecordStore()
    if users:
        save_users(store, list(users))
    if off_days:
        save_off_days(store, [OffDay(date=d, description=desc) for d, desc in off_days])
    return store


def auth_headers(store, user: User) -> dict:
    return {"Authorization": f"Bearer {open_session(store, user)}"}
