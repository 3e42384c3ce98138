from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from config import CATEGORIES, PROCESSES, UNITS, ROLES
from dates import current_month_iso, is_valid_month, normalize_month
from deps import get_store
from store import RecordStore, load_entries, load_off_days
from aggregator import aggregate

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def resolve_filters(category: str, month: Optional[str]):
    if category not in CATEGORIES:
        raise HTTPException(400, f"category must be one of: {', '.join(CATEGORIES)}")
    month = normalize_month(month) or current_month_iso()
    if not is_valid_month(month):
        raise HTTPException(400, "month must be YYYY-MM")
    return category, month


@router.get("")
def dashboard(
    category: str = Query(CATEGORIES[0]),
    month: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """KPI cards, per-process breakdown and daily log for one category and month."""
    category, month = resolve_filters(category, month)
    return aggregate(load_entries(store), load_off_days(store), category, month)


@router.get("/options")
def form_options():
    """Choices for the plan/actual forms."""
    return {
        "categories": CATEGORIES,
        "processes": PROCESSES,
        "units": UNITS,
        "roles": ROLES,
    }
