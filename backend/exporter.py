"""CSV serialization of the dashboard's daily groups."""

import csv
import io
from typing import List

HEADERS = ["Date", "Status", "Process", "Product", "Plan", "Actual", "Unit", "Batch No", "Manpower"]


def report_rows(groups: List[dict]) -> List[list]:
    rows = []
    for group in groups:
        if not group["entries"]:
            # Off day with nothing logged: one placeholder row
            rows.append([group["date"], group["off_day_name"] or "Off Day", "-", "-", 0, 0, "-", "-", 0])
            continue
        status = f"Holiday ({group['off_day_name']})" if group["is_off_day"] else "Normal"
        for e in group["entries"]:
            rows.append([
                group["date"],
                status,
                e.process,
                e.product_name,
                e.plan_quantity,
                e.actual_quantity,
                e.unit or "KG",
                e.batch_no or "",
                e.manpower,
            ])
    return rows


def to_csv(groups: List[dict]) -> str:
    """Header plus one row per entry. Fields with commas or quotes are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADERS)
    writer.writerows(report_rows(groups))
    return buf.getvalue()


def report_filename(org: str, category: str, month: str) -> str:
    return f"{org}_Full_Report_{category}_{month}.csv"
