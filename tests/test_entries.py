import unittest

from aggregator import aggregate
from entries import create_plan, delete_entry, edit_entry, plans_for_date, record_actual
from errors import NotFoundError, PermissionDenied, ValidationError
from notifier import CollectingNotifier
from schemas import LogAction, Stage
from store import load_entries, load_logs, load_off_days

from support import make_store, make_user


def plan(store, actor, **overrides):
    fields = dict(
        date="2024-01-10",
        category="Liquid",
        process="Mixing",
        product_name="Herbal Tonic 250ml",
        quantity=100,
        unit="KG",
    )
    fields.update(overrides)
    return create_plan(store, actor=actor, **fields)


class TestCreatePlan(unittest.TestCase):
    def setUp(self) -> None:
        self.planner = make_user("planner")
        self.store = make_store(users=[self.planner], off_days=[("2024-01-11", "Thaipusam")])

    def test_creates_entry_and_log(self) -> None:
        notifier = CollectingNotifier()
        entry = plan(self.store, self.planner, date="2024-01-10 08:00:00", notifier=notifier)

        self.assertEqual(entry.date, "2024-01-10")
        self.assertEqual(entry.actual_quantity, 0)
        self.assertEqual(entry.stage, Stage.PLAN)
        self.assertEqual([e.id for e in load_entries(self.store)], [entry.id])

        logs = load_logs(self.store)
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0].action, LogAction.CREATE_PLAN)
        self.assertEqual(logs[0].details, "Planned 100 KG for Herbal Tonic 250ml (2024-01-10)")
        self.assertEqual(notifier.messages[-1]["type"], "success")

    def test_off_day_is_rejected_without_mutation(self) -> None:
        before = dict(self.store.documents)
        with self.assertRaises(ValidationError):
            plan(self.store, self.planner, date="2024-01-11")
        self.assertEqual(self.store.documents, before)

    def test_unpadded_date_hits_off_day_lock(self) -> None:
        before = dict(self.store.documents)
        with self.assertRaises(ValidationError):
            plan(self.store, self.planner, date="2024-1-11")
        self.assertEqual(self.store.documents, before)

    def test_unpadded_date_is_stored_canonical(self) -> None:
        entry = plan(self.store, self.planner, date="2024-1-5")
        self.assertEqual(entry.date, "2024-01-05")
        view = aggregate(load_entries(self.store), load_off_days(self.store), "Liquid", "2024-01")
        self.assertEqual(view["stats"]["plan"], 100)

    def test_quantity_must_be_positive_integer(self) -> None:
        for bad in [0, -5, 2.5, "abc", "", True]:
            with self.assertRaises(ValidationError):
                plan(self.store, self.planner, quantity=bad)
        self.assertEqual(load_entries(self.store), [])

    def test_numeric_string_quantity_accepted(self) -> None:
        entry = plan(self.store, self.planner, quantity="40")
        self.assertEqual(entry.plan_quantity, 40)

    def test_unknown_process_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            plan(self.store, self.planner, process="Welding")

    def test_blank_product_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            plan(self.store, self.planner, product_name="   ")

    def test_operator_cannot_plan(self) -> None:
        with self.assertRaises(PermissionDenied):
            plan(self.store, make_user("operator"))
        self.assertEqual(load_entries(self.store), [])


class TestRecordActual(unittest.TestCase):
    def setUp(self) -> None:
        self.planner = make_user("planner")
        self.operator = make_user("operator")
        self.store = make_store(users=[self.planner, self.operator])
        self.entry = plan(self.store, self.planner)

    def test_updates_same_record(self) -> None:
        updated = record_actual(
            self.store, self.entry.id, 80, " B-001 ", 4, self.operator, date="2024-01-10",
        )
        self.assertEqual(updated.id, self.entry.id)
        self.assertEqual(updated.actual_quantity, 80)
        self.assertEqual(updated.batch_no, "B-001")
        self.assertEqual(updated.manpower, 4)
        self.assertEqual(updated.stage, Stage.ACTUAL)
        self.assertEqual(updated.last_updated_by, self.operator.id)

        stored = load_entries(self.store)
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].plan_quantity, 100)
        self.assertEqual(stored[0].actual_quantity, 80)
        self.assertEqual(load_logs(self.store)[-1].action, LogAction.RECORD_ACTUAL)

    def test_plan_outside_candidate_day_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            record_actual(self.store, self.entry.id, 80, "B", 1, self.operator, date="2024-01-12")

    def test_unknown_plan_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            record_actual(self.store, "missing", 80, "B", 1, self.operator)

    def test_planner_cannot_record(self) -> None:
        with self.assertRaises(PermissionDenied):
            record_actual(self.store, self.entry.id, 80, "B", 1, self.planner)

    def test_negative_manpower_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            record_actual(self.store, self.entry.id, 80, "B", -1, self.operator)

    def test_candidates_for_date(self) -> None:
        plan(self.store, self.planner, date="2024-01-12")
        self.assertEqual([e.id for e in plans_for_date(self.store, "2024-01-10 00:00")], [self.entry.id])


class TestEditEntry(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = make_user("manager")
        self.store = make_store(users=[self.manager], off_days=[("2024-01-11", "Thaipusam")])
        self.entry = plan(self.store, self.manager)

    def test_no_change_logs_noop(self) -> None:
        before = self.store.documents["production"]
        result = edit_entry(self.store, self.entry.id, {"quantity": 100, "process": "Mixing"}, self.manager)

        log = load_logs(self.store)[-1]
        self.assertEqual(log.action, LogAction.EDIT_NO_CHANGE)
        self.assertIn("No values changed", log.details)
        self.assertEqual(result.id, self.entry.id)
        self.assertEqual(self.store.documents["production"], before)

    def test_single_field_diff(self) -> None:
        edit_entry(self.store, self.entry.id, {"quantity": 120}, self.manager)

        log = load_logs(self.store)[-1]
        self.assertEqual(log.action, LogAction.EDIT_RECORD)
        self.assertEqual(
            log.details,
            "Edited Herbal Tonic 250ml (Mixing) on 2024-01-10: Plan Qty (100 → 120)",
        )
        self.assertEqual(load_entries(self.store)[0].plan_quantity, 120)

    def test_multiple_fields_listed_in_order(self) -> None:
        edit_entry(
            self.store, self.entry.id,
            {"date": "2024-01-09", "process": "Filling", "batch_no": "LOT-9"},
            self.manager,
        )
        details = load_logs(self.store)[-1].details
        self.assertIn("Date (2024-01-10 → 2024-01-09), Process (Mixing → Filling), Batch (None → LOT-9)", details)

    def test_edit_onto_off_day_is_allowed(self) -> None:
        updated = edit_entry(self.store, self.entry.id, {"date": "2024-01-11"}, self.manager)
        self.assertEqual(updated.date, "2024-01-11")

    def test_actual_target_is_explicit(self) -> None:
        # actual is still 0, but the edit explicitly targets it
        updated = edit_entry(self.store, self.entry.id, {"quantity": 90, "target": "actual"}, self.manager)
        self.assertEqual(updated.plan_quantity, 100)
        self.assertEqual(updated.actual_quantity, 90)
        self.assertEqual(updated.stage, Stage.ACTUAL)
        self.assertIn("Actual Qty (0 → 90)", load_logs(self.store)[-1].details)

    def test_stage_picks_default_target(self) -> None:
        record_actual(self.store, self.entry.id, 70, "B", 2, self.manager)
        updated = edit_entry(self.store, self.entry.id, {"quantity": 75}, self.manager)
        self.assertEqual(updated.actual_quantity, 75)
        self.assertEqual(updated.plan_quantity, 100)

    def test_missing_id(self) -> None:
        with self.assertRaises(NotFoundError):
            edit_entry(self.store, "nope", {"quantity": 1}, self.manager)

    def test_planner_cannot_edit(self) -> None:
        with self.assertRaises(PermissionDenied):
            edit_entry(self.store, self.entry.id, {"quantity": 1}, make_user("planner"))


class TestDeleteEntry(unittest.TestCase):
    def setUp(self) -> None:
        self.admin = make_user("admin")
        self.store = make_store(users=[self.admin])
        self.entry = plan(self.store, self.admin)

    def test_missing_id_leaves_store_unchanged(self) -> None:
        before = dict(self.store.documents)
        self.assertIsNone(delete_entry(self.store, "missing", self.admin))
        self.assertEqual(self.store.documents, before)

    def test_deletes_and_returns_record(self) -> None:
        deleted = delete_entry(self.store, self.entry.id, self.admin)
        self.assertEqual(deleted.id, self.entry.id)
        self.assertEqual(load_entries(self.store), [])

    def test_operator_cannot_delete(self) -> None:
        with self.assertRaises(PermissionDenied):
            delete_entry(self.store, self.entry.id, make_user("operator"))


class TestPlanToDashboard(unittest.TestCase):
    def test_plan_then_actual_aggregates(self) -> None:
        planner = make_user("planner")
        operator = make_user("operator")
        store = make_store(users=[planner, operator])

        entry = plan(store, planner, quantity=100, unit="KG")
        record_actual(store, entry.id, 80, "B-1", 3, operator, date="2024-01-10")

        view = aggregate(load_entries(store), load_off_days(store), "Liquid", "2024-01")
        self.assertEqual(view["stats"]["plan"], 100)
        self.assertEqual(view["stats"]["actual"], 80)
        self.assertEqual(view["stats"]["efficiency"], 80.0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
