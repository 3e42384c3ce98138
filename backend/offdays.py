"""Holiday calendar lookups and import."""

import logging
from typing import List, Optional

from audit import add_log
from dates import canonical_date, date_key
from errors import ValidationError
from permissions import OFF_DAY_ROLES, require_role
from schemas import LogAction, OffDay, User
from store import RecordStore, load_off_days, save_off_days

logger = logging.getLogger(__name__)


def list_off_days(store: RecordStore) -> List[OffDay]:
    return sorted(load_off_days(store), key=lambda od: date_key(od.date), reverse=True)


def off_day_for(off_days: List[OffDay], date: str) -> Optional[OffDay]:
    key = date_key(date)
    if not key:
        return None
    for od in off_days:
        if date_key(od.date) == key:
            return od
    return None


def import_off_days(store: RecordStore, items: List[OffDay], actor: User, replace: bool = False) -> List[OffDay]:
    """Merge calendar days into the stored list, keyed by date.

    With replace=True the stored list is discarded first.
    """
    require_role(actor, OFF_DAY_ROLES, "import off days")

    incoming = {}
    for item in items:
        try:
            key = canonical_date(item.date)
        except ValueError:
            raise ValidationError(f"Invalid off day date: {item.date!r}")
        incoming[key] = OffDay(date=key, description=item.description.strip())

    merged = {} if replace else {date_key(od.date): od for od in load_off_days(store)}
    merged.update(incoming)
    result = sorted(merged.values(), key=lambda od: od.date)
    save_off_days(store, result)

    add_log(
        store, actor, LogAction.IMPORT_OFF_DAYS,
        f"Imported {len(incoming)} off day(s){' (replaced calendar)' if replace else ''}",
    )
    return result
