"""Seed the database with demo staff, holidays and a month of plans/actuals."""
import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

import random
from datetime import date, timedelta
from config import CATEGORIES, PROCESSES, UNITS
from entries import create_plan, record_actual
from offdays import import_off_days
from schemas import OffDay
from store import RecordStore, load_users
from users import add_user, ensure_default_admin

# ===== STAFF =====
STAFF = [
    ("Siti Manager", "siti", "manager"),
    ("Hafiz Planner", "hafiz", "planner"),
    ("Ravi Operator", "ravi", "operator"),
]

# ===== PRODUCTS (per category) =====
PRODUCTS = {
    "Liquid": ["Herbal Tonic 250ml", "Cough Syrup 100ml"],
    "Semi-Solid": ["Pain Relief Gel 50g", "Moisturising Cream 30g"],
    "Solid": ["Vitamin C Tablets", "Herbal Capsules"],
}

HOLIDAYS = [
    (1, "New Year's Day"),
    (25, "Federal Territory Day"),
]


def seed(store: RecordStore, month_start: date, days: int = 20, rng=None):
    """Fill `store` with demo data for the month beginning at `month_start`. Returns the plans created."""
    rng = rng or random.Random(42)

    admin = ensure_default_admin(store) or next(u for u in load_users(store) if u.role == "admin")
    for name, username, role in STAFF:
        add_user(store, name, username, f"{username}@example.com", role, "changeme", actor=admin)

    holidays = [
        OffDay(date=month_start.replace(day=d).isoformat(), description=desc)
        for d, desc in HOLIDAYS
    ]
    import_off_days(store, holidays, actor=admin)
    holiday_dates = {h.date for h in holidays}

    created = []
    for offset in range(days):
        day = month_start + timedelta(days=offset)
        if day.isoformat() in holiday_dates or day.weekday() >= 5:
            continue
        for category in CATEGORIES:
            product = rng.choice(PRODUCTS.get(category, ["Sample Product"]))
            plan = create_plan(
                store,
                date=day.isoformat(),
                category=category,
                process=rng.choice(PROCESSES),
                product_name=product,
                quantity=rng.randint(50, 500),
                unit=rng.choice(UNITS),
                actor=admin,
            )
            created.append(plan)
            # Leave the last few days without actuals, as on a live floor
            if offset < days - 3:
                record_actual(
                    store,
                    plan_id=plan.id,
                    quantity=int(plan.plan_quantity * rng.uniform(0.7, 1.1)),
                    batch_no=f"B{day:%y%m%d}-{len(created):03d}",
                    manpower=rng.randint(2, 8),
                    actor=admin,
                )
    return created


if __name__ == "__main__":
    from database import SessionLocal, init_db
    from store import SqlRecordStore

    init_db()
    db = SessionLocal()
    try:
        plans = seed(SqlRecordStore(db), date.today().replace(day=1))
        print(f"Seeded {len(plans)} production plans")
    finally:
        db.close()
