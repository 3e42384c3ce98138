"""Pydantic models for stored records and API request bodies."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class Stage(str, Enum):
    PLAN = "plan"
    ACTUAL = "actual"


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class LogAction(str, Enum):
    CREATE_PLAN = "CREATE_PLAN"
    RECORD_ACTUAL = "RECORD_ACTUAL"
    EDIT_RECORD = "EDIT_RECORD"
    EDIT_NO_CHANGE = "EDIT_NO_CHANGE"
    DELETE_RECORD = "DELETE_RECORD"
    EXPORT_REPORT = "EXPORT_REPORT"
    ADD_USER = "ADD_USER"
    DELETE_USER = "DELETE_USER"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    IMPORT_OFF_DAYS = "IMPORT_OFF_DAYS"
    UPDATE_CONFIG = "UPDATE_CONFIG"
    SYNC_PULL = "SYNC_PULL"


# ===== STORED RECORDS =====

class ProductionEntry(BaseModel):
    id: str
    date: str
    category: str
    process: str
    product_name: str
    plan_quantity: int = 0
    actual_quantity: int = 0  # 0 means not yet recorded
    unit: str = "KG"
    batch_no: Optional[str] = None
    manpower: int = 0
    stage: Stage = Stage.PLAN  # which quantity edits target
    last_updated_by: Optional[str] = None
    updated_at: Optional[str] = None


class OffDay(BaseModel):
    date: str
    description: str = ""


class User(BaseModel):
    id: str
    name: str
    username: str
    email: str = ""
    role: str = "operator"
    password_hash: str

    def public(self) -> dict:
        return self.model_dump(exclude={"password_hash"})


class LoginSession(BaseModel):
    token_hash: str  # sha256 of the bearer token; the token itself is never stored
    user_id: str
    created_at: str
    expires_at: str


class LogEntry(BaseModel):
    id: str
    user_id: str
    user_name: str
    action: LogAction
    details: str
    timestamp: str


# ===== REQUEST BODIES =====

class PlanCreate(BaseModel):
    date: str
    category: str
    process: str
    product_name: str
    quantity: int
    unit: str = "KG"


class ActualRecord(BaseModel):
    plan_id: str
    quantity: int
    batch_no: Optional[str] = None
    manpower: int = 0
    date: Optional[str] = None  # restricts the candidate plans to this day


class EntryUpdate(BaseModel):
    date: Optional[str] = None
    category: Optional[str] = None
    process: Optional[str] = None
    product_name: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[int] = None
    target: Optional[Stage] = None
    manpower: Optional[int] = None
    batch_no: Optional[str] = None


class UserCreate(BaseModel):
    name: str
    username: str
    email: str = ""
    role: str = "operator"
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class OffDayImport(BaseModel):
    off_days: List[OffDay]
    replace: bool = False


class SyncSettingsUpdate(BaseModel):
    sheets_url: str = ""
