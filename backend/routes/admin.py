from fastapi import APIRouter, Depends, Query
from deps import get_actor, get_local_store, get_store
from schemas import OffDayImport, SyncSettingsUpdate, LogAction, Severity, User
from store import RecordStore, load_settings, save_settings
from permissions import ADMIN_ROLES, require_role
from offdays import list_off_days, import_off_days
from audit import add_log, list_logs
from sync import SheetsClient, get_active_url, pull_all
from config import SHEETS_API_URL

router = APIRouter(prefix="/api", tags=["admin"])


# ===== OFF DAYS =====

@router.get("/off-days")
def get_off_days(store: RecordStore = Depends(get_store)):
    return list_off_days(store)


@router.put("/off-days")
def put_off_days(body: OffDayImport, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    saved = import_off_days(store, body.off_days, actor, replace=body.replace)
    return {"count": len(saved), "off_days": saved}


# ===== AUDIT LOG =====

@router.get("/logs")
def get_logs(
    limit: int = Query(200, ge=1, le=5000),
    store: RecordStore = Depends(get_store),
    actor: User = Depends(get_actor),
):
    require_role(actor, ADMIN_ROLES, "view the activity log")
    return list_logs(store, limit=limit)


# ===== SPREADSHEET SYNC =====

@router.get("/settings/sync")
def get_sync_settings(store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    require_role(actor, ADMIN_ROLES, "view sync settings")
    override = load_settings(store).get("sheets_url") or ""
    return {
        "sheets_url": get_active_url(store),
        "source": "override" if override else ("environment" if SHEETS_API_URL else "disabled"),
    }


@router.put("/settings/sync")
def update_sync_settings(
    body: SyncSettingsUpdate,
    store: RecordStore = Depends(get_local_store),
    actor: User = Depends(get_actor),
):
    """Save or clear (empty string) the spreadsheet URL override."""
    require_role(actor, ADMIN_ROLES, "change sync settings")
    settings = load_settings(store)
    settings["sheets_url"] = body.sheets_url.strip()
    save_settings(store, settings)
    add_log(store, actor, LogAction.UPDATE_CONFIG, "Updated spreadsheet sync URL")
    return {
        "sheets_url": get_active_url(store),
        "notifications": [{"message": "DATABASE CONFIGURATION UPDATED", "type": Severity.SUCCESS.value}],
    }


@router.post("/settings/sync/pull")
def pull_from_sheets(store: RecordStore = Depends(get_local_store), actor: User = Depends(get_actor)):
    """Replace local collections with the spreadsheet copies. Failures are reported, not raised."""
    require_role(actor, ADMIN_ROLES, "pull from the spreadsheet")
    url = get_active_url(store)
    if not url:
        return {
            "pulled": {},
            "notifications": [{"message": "SPREADSHEET SYNC IS NOT CONFIGURED", "type": Severity.INFO.value}],
        }

    pulled = pull_all(store, SheetsClient(url))
    add_log(store, actor, LogAction.SYNC_PULL, f"Pulled from spreadsheet: {pulled or 'nothing'}")
    severity = Severity.SUCCESS if pulled else Severity.ERROR
    message = "SPREADSHEET DATA LOADED" if pulled else "SPREADSHEET UNREACHABLE, LOCAL DATA KEPT"
    return {"pulled": pulled, "notifications": [{"message": message, "type": severity.value}]}
