"""Creating, recording and editing production entries.

A single ProductionEntry carries both the plan and the actual for one
(date, category, process, product) occurrence: planning creates it with
actual_quantity=0, recording the actual output updates it in place.
"""

import logging
import uuid
from typing import List, Optional

from audit import add_log
from config import CATEGORIES, PROCESSES, UNITS
from dates import canonical_date, date_key, db_timestamp
from errors import NotFoundError, ValidationError
from notifier import notify
from offdays import off_day_for
from permissions import ACTUAL_ROLES, EDIT_ROLES, PLAN_ROLES, require_role
from schemas import LogAction, ProductionEntry, Severity, Stage, User
from store import RecordStore, load_entries, load_off_days, save_entries

logger = logging.getLogger(__name__)


# ===== VALIDATION =====

def _as_int(value, label: str, minimum: int = 0) -> int:
    """Coerce form input to an int >= minimum, rejecting floats like 2.5 and bools."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValidationError(f"{label} must be a whole number")
        value = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{label} must be a whole number")
        value = int(value)
    elif not isinstance(value, int):
        raise ValidationError(f"{label} must be a whole number")

    if value < minimum:
        if minimum == 1:
            raise ValidationError(f"{label} must be greater than 0")
        raise ValidationError(f"{label} cannot be negative")
    return value


def _check_choice(value: str, choices: List[str], label: str) -> str:
    if value not in choices:
        raise ValidationError(f"{label} must be one of: {', '.join(choices)}")
    return value


def _check_date(value: str) -> str:
    """Canonical YYYY-MM-DD for form input, so "2024-1-5" is stored as "2024-01-05"."""
    try:
        return canonical_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def _pick(changes: dict, key: str, default):
    value = changes.get(key)
    return default if value is None else value


def _clean_batch(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


# ===== QUERIES =====

def get_entry(store: RecordStore, entry_id: str) -> ProductionEntry:
    for entry in load_entries(store):
        if entry.id == entry_id:
            return entry
    raise NotFoundError("Production record not found")


def plans_for_date(store: RecordStore, date: str) -> List[ProductionEntry]:
    """Entries scheduled on a day, i.e. the jobs an operator can record output against."""
    key = date_key(date)
    return [e for e in load_entries(store) if date_key(e.date) == key]


# ===== COMMANDS =====

def create_plan(
    store: RecordStore,
    date: str,
    category: str,
    process: str,
    product_name: str,
    quantity,
    unit: str,
    actor: User,
    notifier=None,
) -> ProductionEntry:
    require_role(actor, PLAN_ROLES, "create production plans")

    key = _check_date(date)
    off_day = off_day_for(load_off_days(store), key)
    if off_day:
        notify(notifier, f"ENTRY RESTRICTED: {key} is {off_day.description or 'an Off Day'}", Severity.INFO)
        raise ValidationError(f"Selected date is an Off Day: {off_day.description or key}.")

    product = (product_name or "").strip()
    if not product:
        raise ValidationError("Product name is required")
    qty = _as_int(quantity, "Plan quantity", minimum=1)
    _check_choice(category, CATEGORIES, "Category")
    _check_choice(process, PROCESSES, "Process")
    _check_choice(unit, UNITS, "Unit")

    entry = ProductionEntry(
        id=uuid.uuid4().hex,
        date=key,
        category=category,
        process=process,
        product_name=product,
        plan_quantity=qty,
        actual_quantity=0,
        unit=unit,
        stage=Stage.PLAN,
        last_updated_by=actor.id,
        updated_at=db_timestamp(),
    )
    entries = load_entries(store)
    entries.append(entry)
    save_entries(store, entries)

    add_log(store, actor, LogAction.CREATE_PLAN, f"Planned {qty} {unit} for {product} ({key})")
    notify(notifier, "PRODUCTION PLAN SUBMITTED", Severity.SUCCESS)
    return entry


def record_actual(
    store: RecordStore,
    plan_id: str,
    quantity,
    batch_no: Optional[str],
    manpower,
    actor: User,
    date: Optional[str] = None,
    notifier=None,
) -> ProductionEntry:
    """Record measured output against an existing plan.

    When `date` is given the plan must be one of that day's entries.
    """
    require_role(actor, ACTUAL_ROLES, "record actual output")

    qty = _as_int(quantity, "Actual quantity")
    crew = _as_int(manpower, "Manpower")

    entries = load_entries(store)
    key = date_key(date) if date else None
    target = None
    for entry in entries:
        if entry.id == plan_id and (key is None or date_key(entry.date) == key):
            target = entry
            break
    if target is None:
        raise NotFoundError("Selected plan was not found for this date")

    target.actual_quantity = qty
    target.batch_no = _clean_batch(batch_no)
    target.manpower = crew
    target.stage = Stage.ACTUAL
    target.last_updated_by = actor.id
    target.updated_at = db_timestamp()
    save_entries(store, entries)

    add_log(
        store, actor, LogAction.RECORD_ACTUAL,
        f"Recorded actual output of {qty} {target.unit} for {target.product_name}",
    )
    notify(notifier, "PRODUCTION RECORD SYNCHRONIZED", Severity.SUCCESS)
    return target


def edit_entry(store: RecordStore, entry_id: str, changes: dict, actor: User, notifier=None) -> ProductionEntry:
    """Apply field changes and write one audit line listing what actually changed.

    `changes` may hold date, category, process, product_name, unit, quantity,
    target, manpower and batch_no; missing or None keys keep the stored value.
    `quantity` updates the plan or the actual depending on `target`, which
    defaults to the entry's stage. Edits are not subject to the off-day lock.
    """
    require_role(actor, EDIT_ROLES, "edit production records")

    entries = load_entries(store)
    index = next((i for i, e in enumerate(entries) if e.id == entry_id), None)
    if index is None:
        raise NotFoundError("Production record not found")
    old = entries[index]

    old_date = date_key(old.date)
    new_date = _check_date(_pick(changes, "date", old_date))
    category = _check_choice(_pick(changes, "category", old.category), CATEGORIES, "Category")
    process = _check_choice(_pick(changes, "process", old.process), PROCESSES, "Process")
    unit = _check_choice(_pick(changes, "unit", old.unit), UNITS, "Unit")
    product = str(_pick(changes, "product_name", old.product_name)).strip()
    if not product:
        raise ValidationError("Product name is required")

    try:
        target = Stage(_pick(changes, "target", old.stage))
    except ValueError:
        raise ValidationError("Edit target must be plan or actual")
    old_qty = old.plan_quantity if target == Stage.PLAN else old.actual_quantity
    new_qty = old_qty
    if changes.get("quantity") is not None:
        if target == Stage.PLAN:
            new_qty = _as_int(changes["quantity"], "Plan quantity", minimum=1)
        else:
            new_qty = _as_int(changes["quantity"], "Actual quantity")
    manpower = _as_int(_pick(changes, "manpower", old.manpower), "Manpower")
    batch = _clean_batch(_pick(changes, "batch_no", old.batch_no or ""))

    diff = []
    if old_date != new_date:
        diff.append(f"Date ({old_date} → {new_date})")
    if old.product_name != product:
        diff.append(f"Product ({old.product_name} → {product})")
    if old.category != category:
        diff.append(f"Category ({old.category} → {category})")
    if old.process != process:
        diff.append(f"Process ({old.process} → {process})")
    if old.unit != unit:
        diff.append(f"Unit ({old.unit} → {unit})")
    if old_qty != new_qty:
        label = "Plan Qty" if target == Stage.PLAN else "Actual Qty"
        diff.append(f"{label} ({old_qty} → {new_qty})")
    if old.manpower != manpower:
        diff.append(f"Manpower ({old.manpower} → {manpower})")
    if (old.batch_no or "") != (batch or ""):
        diff.append(f"Batch ({old.batch_no or 'None'} → {batch or 'None'})")

    if not diff:
        add_log(
            store, actor, LogAction.EDIT_NO_CHANGE,
            f"Updated record for {old.product_name} ({old.process}) on {old_date} (No values changed)",
        )
        notify(notifier, "NO CHANGES TO SAVE", Severity.INFO)
        return old

    updated = old.model_copy(update={
        "date": new_date,
        "category": category,
        "process": process,
        "product_name": product,
        "unit": unit,
        "manpower": manpower,
        "batch_no": batch,
        "last_updated_by": actor.id,
        "updated_at": db_timestamp(),
    })
    if target == Stage.PLAN:
        updated.plan_quantity = new_qty
    else:
        updated.actual_quantity = new_qty
        updated.stage = Stage.ACTUAL
    entries[index] = updated
    save_entries(store, entries)

    add_log(
        store, actor, LogAction.EDIT_RECORD,
        f"Edited {product} ({old.process}) on {old_date}: {', '.join(diff)}",
    )
    notify(notifier, "PRODUCTION RECORD SYNCHRONIZED", Severity.SUCCESS)
    return updated


def delete_entry(store: RecordStore, entry_id: str, actor: User) -> Optional[ProductionEntry]:
    """Permanently remove an entry. Returns the removed entry, or None if the id is unknown.

    The caller writes the audit line; an unknown id leaves the store untouched.
    """
    require_role(actor, EDIT_ROLES, "delete production records")

    entries = load_entries(store)
    deleted = next((e for e in entries if e.id == entry_id), None)
    if deleted is None:
        logger.info("Delete requested for unknown production record %s", entry_id)
        return None

    save_entries(store, [e for e in entries if e.id != entry_id])
    return deleted
