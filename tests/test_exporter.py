import csv
import io
import unittest

from aggregator import daily_groups
from exporter import HEADERS, report_filename, to_csv
from schemas import OffDay, ProductionEntry


def parse(text):
    return list(csv.reader(io.StringIO(text)))


class TestCsvExport(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = [
            ProductionEntry(
                id="1", date="2024-01-10", category="Liquid", process="Filling",
                product_name="Gel, Pain Relief 50g", plan_quantity=100, actual_quantity=80,
                unit="KG", batch_no="B-01", manpower=4,
            ),
            ProductionEntry(
                id="2", date="2024-01-12", category="Liquid", process="Mixing",
                product_name="Tonic", plan_quantity=30, actual_quantity=0, unit="L",
            ),
        ]
        self.off_days = [
            OffDay(date="2024-01-11", description="Thaipusam"),
            OffDay(date="2024-01-12", description="Half Day"),
        ]

    def test_rows(self) -> None:
        rows = parse(to_csv(daily_groups(self.entries, self.off_days, "2024-01")))

        self.assertEqual(rows[0], HEADERS)
        self.assertEqual(rows[1], ["2024-01-12", "Holiday (Half Day)", "Mixing", "Tonic", "30", "0", "L", "", "0"])
        self.assertEqual(rows[2], ["2024-01-11", "Thaipusam", "-", "-", "0", "0", "-", "-", "0"])
        self.assertEqual(
            rows[3],
            ["2024-01-10", "Normal", "Filling", "Gel, Pain Relief 50g", "100", "80", "KG", "B-01", "4"],
        )
        self.assertEqual(len(rows), 4)

    def test_commas_are_quoted(self) -> None:
        text = to_csv(daily_groups(self.entries, [], "2024-01"))
        self.assertIn('"Gel, Pain Relief 50g"', text)

    def test_empty_month_has_only_header(self) -> None:
        self.assertEqual(to_csv([]), ",".join(HEADERS) + "\n")

    def test_filename(self) -> None:
        self.assertEqual(
            report_filename("Halagel", "Liquid", "2024-01"),
            "Halagel_Full_Report_Liquid_2024-01.csv",
        )


if __name__ == "__main__":
    unittest.main(verbosity=2)
