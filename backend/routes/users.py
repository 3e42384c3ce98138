from fastapi import APIRouter, Depends, HTTPException
from deps import get_actor, get_local_store, get_store, get_token
from schemas import UserCreate, LoginRequest, Severity, User
from store import RecordStore
from permissions import ADMIN_ROLES, require_role
import users as accounts

router = APIRouter(prefix="/api/users", tags=["users"])
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/login")
def login(body: LoginRequest, store: RecordStore = Depends(get_store)):
    user = accounts.authenticate(store, body.username, body.password)
    if not user:
        raise HTTPException(401, "Invalid username or password")
    token = accounts.open_session(store, user)
    return {
        "user": user.public(),
        "token": token,
        "token_type": "bearer",
        "notifications": [
            {"message": f"Login successful! Welcome {user.username}.", "type": Severity.SUCCESS.value}
        ],
    }


@auth_router.post("/logout")
def logout(
    store: RecordStore = Depends(get_local_store),
    actor: User = Depends(get_actor),
    token: str = Depends(get_token),
):
    accounts.close_session(store, token, actor)
    return {"notifications": [{"message": "SIGNED OUT", "type": Severity.INFO.value}]}


@router.get("")
def list_users(store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    require_role(actor, ADMIN_ROLES, "view staff accounts")
    return [u.public() for u in accounts.list_users(store)]


@router.post("", status_code=201)
def add_user(body: UserCreate, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    user = accounts.add_user(
        store,
        name=body.name,
        username=body.username,
        email=body.email,
        role=body.role,
        password=body.password,
        actor=actor,
    )
    return {
        "user": user.public(),
        "notifications": [{"message": f"NEW USER CREATED: {user.name.upper()}", "type": Severity.SUCCESS.value}],
    }


@router.delete("/{user_id}")
def delete_user(user_id: str, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    removed = accounts.delete_user(store, user_id, actor)
    return {
        "user": removed.public(),
        "notifications": [{"message": f"USER REMOVED: {removed.name.upper()}", "type": Severity.INFO.value}],
    }
