from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from typing import Optional
from config import CATEGORIES, ORG_NAME
from deps import get_actor, get_store
from schemas import LogAction, User
from store import RecordStore, load_entries, load_off_days
from aggregator import aggregate
from exporter import to_csv, report_filename
from audit import add_log
from routes.dashboard import resolve_filters

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/export")
def export_report(
    category: str = Query(CATEGORIES[0]),
    month: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
    actor: User = Depends(get_actor),
):
    """Full daily report for a category and month as a CSV download."""
    category, month = resolve_filters(category, month)
    view = aggregate(load_entries(store), load_off_days(store), category, month)
    content = to_csv(view["daily_groups"])

    add_log(store, actor, LogAction.EXPORT_REPORT, f"Exported full report for {category} ({month})")

    filename = report_filename(ORG_NAME, category, month)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
