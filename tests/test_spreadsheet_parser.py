import csv
import tempfile
import unittest
from datetime import datetime, time
from pathlib import Path

from openpyxl import Workbook

from swim_schedule.dtos import HeatRecordRow, parse_heat_descriptor, parse_int
from swim_schedule.errors import SpreadsheetFormatError
from swim_schedule.roster_csv import attach_roster, parse_roster_csv, unique_participants
from swim_schedule.spreadsheet_parser import build_heats, cell_text, find_header_index, parse_spreadsheet

HEADER = ["項次", "組次", "年齡組", "性別", "比賽項目", "姓名", "單位", "報名成績"]

ROWS = [
    ["1", "1/2", "10", "F", "50m Free", "Amy", "Club A", "00:45.50"],
    ["1", "1/2", "10", "F", "50m Free", "Beth", "Club B", "00:48.00"],
    ["1", "2/2", "10", "F", "50m Free", "Cara", "Club A", ""],
    ["2", "1/1", "11", "M", "100m Back", "Dan", "Club C", "not a time"],
]


class TestDescriptorParsing(unittest.TestCase):
    def test_heat_descriptor(self):
        self.assertEqual(parse_heat_descriptor("3/5"), (3, 5))
        self.assertEqual(parse_heat_descriptor(" 2 / 4 "), (2, 4))
        self.assertEqual(parse_heat_descriptor("3"), (3, 0))
        self.assertEqual(parse_heat_descriptor(""), (0, 0))
        self.assertEqual(parse_heat_descriptor("x/y"), (0, 0))

    def test_event_number(self):
        self.assertEqual(parse_int("17"), 17)
        self.assertEqual(parse_int(""), 0)
        self.assertEqual(parse_int("seventeen"), 0)

    def test_excel_cell_text(self):
        self.assertEqual(cell_text(None), "")
        self.assertEqual(cell_text(12.0), "12")
        self.assertEqual(cell_text(time(0, 1, 30, 500000)), "01:30.50")
        self.assertEqual(cell_text(time(0, 0, 59)), "00:59")

    def test_excel_minutes_typed_as_hours(self):
        # "01:30" typed into Excel is stored as 01:30:00, one and a half minutes here
        self.assertEqual(cell_text(time(1, 30)), "01:30")
        self.assertEqual(cell_text(datetime(1900, 1, 1, 2, 5)), "02:05")
        self.assertEqual(cell_text(time(0, 1, 0)), "01:00")


class TestHeatSheetParsing(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write_csv(self, name: str, rows: list[list[str]]) -> Path:
        path = self.tmp / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(rows)
        return path

    def test_header_found_below_title_rows(self):
        rows = [["Heat sheet"], [""], HEADER] + ROWS
        self.assertEqual(find_header_index(rows), 2)
        self.assertEqual(find_header_index([["a", "b"]]), -1)

    def test_csv_rows_aggregate_into_heats(self):
        path = self._write_csv("heats.csv", [["Heat sheet 2025"], HEADER] + ROWS)
        heats = parse_spreadsheet(path)

        self.assertEqual([h.key for h in heats], [(1, 1, 2), (1, 2, 2), (2, 1, 1)])
        first = heats[0]
        self.assertEqual(first.recorded_durations, (45.5, 48.0))
        self.assertEqual(first.participants, ("Amy", "Beth"))
        self.assertEqual(first.event_name, "50m Free")
        self.assertEqual(heats[1].recorded_durations, ())
        # Unparseable entry time counts as no result
        self.assertEqual(heats[2].recorded_durations, ())

    def test_english_headers(self):
        header = ["event", "heat", "age_group", "gender", "event_name", "name", "club", "entry_time"]
        path = self._write_csv("english.csv", [header, ["4", "1/1", "12", "F", "200m IM", "Eve", "X", "03:10"]])
        [heat] = parse_spreadsheet(path)
        self.assertEqual(heat.key, (4, 1, 1))
        self.assertEqual(heat.recorded_durations, (190,))

    def test_club_column_is_ignored(self):
        row = HeatRecordRow.from_record({"event_number": "3", "heat": "1/1", "club": "Club A"})
        self.assertEqual(row.event_number, 3)
        self.assertNotIn("club", HeatRecordRow.model_fields)
        self.assertEqual(find_header_index([["club", "team", "event", "heat", "name"]]), -1)

    def test_missing_header_row(self):
        path = self._write_csv("bad.csv", [["a", "b", "c"], ["1", "2", "3"]])
        with self.assertRaises(SpreadsheetFormatError):
            parse_spreadsheet(path)

    def test_missing_file(self):
        with self.assertRaises(SpreadsheetFormatError):
            parse_spreadsheet(self.tmp / "nope.xlsx")

    def test_xlsx_prefers_all_sheet(self):
        workbook = Workbook()
        workbook.active.title = "Cover"
        workbook.active.append(["nothing here"])
        sheet = workbook.create_sheet("All")
        sheet.append(HEADER)
        sheet.append([3, "1/1", "13", "M", "50m Fly", "Finn", "Club D", "00:35.20"])
        sheet.append([3, "1/1", "13", "M", "50m Fly", "Gus", "Club D", "00:36.00"])
        path = self.tmp / "heats.xlsx"
        workbook.save(path)

        [heat] = parse_spreadsheet(path)
        self.assertEqual(heat.key, (3, 1, 1))
        self.assertEqual(heat.participants, ("Finn", "Gus"))
        self.assertEqual(max(heat.recorded_durations), 36.0)

    def test_build_heats_without_event_number(self):
        heats = build_heats([{"heat": "1/1", "entry_time": "01:00"}])
        self.assertEqual(heats[0].event_number, 0)
        self.assertEqual(heats[0].recorded_durations, (60,))


class TestRosterCsv(unittest.TestCase):
    def test_roster_names_attach_to_matching_heats(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "roster.csv"
            path.write_text(
                "heat,age,gender,event,name\n"
                "1/2,10,F,50m Free,Zoe\n"
                "1/2,10,F,50m Free,Amy\n"
                "2/2,10,F,50m Free,\n"
                "\n"
                "1/1,11,M,100m Back,Dan\n",
                encoding="utf-8",
            )
            entries = parse_roster_csv(path)

        self.assertEqual(len(entries), 3)
        self.assertEqual(unique_participants(entries), ["Amy", "Dan", "Zoe"])

        heats = build_heats([
            {"event_number": "1", "heat": "1/2", "age_group": "10", "gender": "F",
             "event_name": "50m Free", "participant": "Amy"},
        ])
        [heat] = attach_roster(heats, entries)
        self.assertEqual(heat.participants, ("Amy", "Zoe"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
