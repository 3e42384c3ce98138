import unittest

from entries import create_plan
from errors import PermissionDenied, ValidationError
from offdays import import_off_days, list_off_days, off_day_for
from schemas import LogAction, OffDay
from store import load_logs, load_off_days

from support import make_store, make_user


class TestImportOffDays(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = make_user("manager")
        self.store = make_store(users=[self.manager], off_days=[("2024-01-11", "Thaipusam")])

    def test_unpadded_import_is_stored_canonical(self) -> None:
        import_off_days(self.store, [OffDay(date="2024-2-1 00:00", description=" Federal Territory Day ")], self.manager)

        self.assertEqual([od.date for od in list_off_days(self.store)], ["2024-02-01", "2024-01-11"])
        self.assertEqual(off_day_for(load_off_days(self.store), "2024-02-01").description, "Federal Territory Day")
        self.assertEqual(load_logs(self.store)[-1].action, LogAction.IMPORT_OFF_DAYS)

        with self.assertRaises(ValidationError):
            create_plan(
                self.store, "2024-02-01", "Liquid", "Mixing", "Herbal Tonic 250ml", 10, "KG", make_user("planner"),
            )

    def test_merge_overrides_same_day(self) -> None:
        import_off_days(self.store, [OffDay(date="2024-1-11", description="Thaipusam (observed)")], self.manager)
        self.assertEqual([(od.date, od.description) for od in load_off_days(self.store)],
                         [("2024-01-11", "Thaipusam (observed)")])

    def test_replace_discards_calendar(self) -> None:
        import_off_days(self.store, [OffDay(date="2024-03-11", description="Nuzul Quran")], self.manager, replace=True)
        self.assertEqual([od.date for od in load_off_days(self.store)], ["2024-03-11"])

    def test_invalid_date_rejected(self) -> None:
        before = dict(self.store.documents)
        with self.assertRaises(ValidationError):
            import_off_days(self.store, [OffDay(date="2024-02-30")], self.manager)
        self.assertEqual(self.store.documents, before)

    def test_planner_cannot_import(self) -> None:
        with self.assertRaises(PermissionDenied):
            import_off_days(self.store, [], make_user("planner"))

    def test_lookup_accepts_unpadded_key(self) -> None:
        self.assertEqual(off_day_for(load_off_days(self.store), "2024-1-11").description, "Thaipusam")
        self.assertIsNone(off_day_for(load_off_days(self.store), ""))


if __name__ == "__main__":
    unittest.main(verbosity=2)
