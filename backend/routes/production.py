from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from config import CATEGORIES
from dates import date_key, is_valid_month, month_of, normalize_month
from deps import get_actor, get_store
from schemas import PlanCreate, ActualRecord, EntryUpdate, LogAction, Severity, User
from store import RecordStore, load_entries, load_off_days
from notifier import CollectingNotifier
from offdays import off_day_for
from audit import add_log
from aggregator import filter_entries
import entries as editor

router = APIRouter(prefix="/api/production", tags=["production"])


@router.get("")
def list_production(
    category: str = Query(CATEGORIES[0]),
    month: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """Entries of one category, newest date first, optionally limited to a YYYY-MM month."""
    month = normalize_month(month)
    if month and not is_valid_month(month):
        raise HTTPException(400, "month must be YYYY-MM")
    rows = filter_entries(load_entries(store), category)
    if month:
        rows = [e for e in rows if month_of(e.date) == month]
    return rows


@router.get("/plans")
def plans_for_date(date: str, store: RecordStore = Depends(get_store)):
    """Jobs scheduled on a day, for the record-actual form. Flags the day if it is an off day."""
    notifier = CollectingNotifier()
    off_day = off_day_for(load_off_days(store), date)
    if off_day:
        notifier.notify(f"PUBLIC HOLIDAY: {off_day.description or 'OFF DAY'}", Severity.INFO)
    return {
        "date": date_key(date),
        "off_day": off_day,
        "plans": editor.plans_for_date(store, date),
        "notifications": notifier.messages,
    }


@router.get("/{entry_id}")
def get_production(entry_id: str, store: RecordStore = Depends(get_store)):
    return editor.get_entry(store, entry_id)


@router.post("/plan", status_code=201)
def create_plan(body: PlanCreate, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    notifier = CollectingNotifier()
    entry = editor.create_plan(
        store,
        date=body.date,
        category=body.category,
        process=body.process,
        product_name=body.product_name,
        quantity=body.quantity,
        unit=body.unit,
        actor=actor,
        notifier=notifier,
    )
    return {"entry": entry, "notifications": notifier.messages}


@router.post("/actual")
def record_actual(body: ActualRecord, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    notifier = CollectingNotifier()
    entry = editor.record_actual(
        store,
        plan_id=body.plan_id,
        quantity=body.quantity,
        batch_no=body.batch_no,
        manpower=body.manpower,
        actor=actor,
        date=body.date,
        notifier=notifier,
    )
    return {"entry": entry, "notifications": notifier.messages}


@router.put("/{entry_id}")
def edit_production(
    entry_id: str,
    body: EntryUpdate,
    store: RecordStore = Depends(get_store),
    actor: User = Depends(get_actor),
):
    notifier = CollectingNotifier()
    entry = editor.edit_entry(store, entry_id, body.model_dump(exclude_none=True), actor, notifier=notifier)
    return {"entry": entry, "notifications": notifier.messages}


@router.delete("/{entry_id}")
def delete_production(entry_id: str, store: RecordStore = Depends(get_store), actor: User = Depends(get_actor)):
    """Permanently delete a production entry (no soft delete)."""
    deleted = editor.delete_entry(store, entry_id, actor)
    if not deleted:
        raise HTTPException(404, "Production entry not found")

    add_log(
        store, actor, LogAction.DELETE_RECORD,
        f"Admin/Manager permanently deleted production record: {deleted.product_name} ({deleted.date})",
    )
    return {
        "message": "Deleted",
        "deleted": deleted,
        "notifications": [{"message": "RECORD DELETED SUCCESSFULLY", "type": Severity.INFO.value}],
    }
