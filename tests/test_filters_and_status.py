import unittest
from datetime import date, datetime, time

from swim_schedule.config import ScheduleConfig
from swim_schedule.filters import HeatFilter, apply_filter, filter_options, participant_matches
from swim_schedule.functional_scheduler import project
from swim_schedule.html_schedule_generator import generate_html_schedule_table
from swim_schedule.live_status import current_heat, marshalling_heat
from swim_schedule.models import DayRule, DayTable, Heat
from swim_schedule.schedule_printer import format_schedule_for_printing

BASE_DATE = date(2025, 9, 19)
DAYS = DayTable(rules=(DayRule("d1", "Day 1", 1, 50, time(9, 0)),))


def at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2025, 9, 19, hour, minute, second)


HEATS = [
    Heat(1, 1, 1, "10", "F", "50m Free", (50,), ("Amy Lee", "Beth Chan")),
    Heat(2, 1, 1, "10", "M", "50m Free", (50,), ("Carl Wu",)),
    Heat(3, 1, 1, "11", "F", "100m Back", (50,), ("Amy Lee",)),
    Heat(4, 1, 1, "11", "M", "100m Back", (50,), ("Dan Ho",)),
    Heat(5, 1, 1, "12", "F", "200m IM", (50,), ()),
]


class TestHeatFilter(unittest.TestCase):
    def test_empty_filter_keeps_everything(self):
        self.assertEqual(apply_filter(HEATS, HeatFilter()), HEATS)
        self.assertEqual(apply_filter(HEATS, None), HEATS)
        self.assertTrue(HeatFilter(age_group="all", gender="").is_empty)

    def test_field_filters_combine(self):
        result = apply_filter(HEATS, HeatFilter(age_group="11", gender="F"))
        self.assertEqual([h.event_number for h in result], [3])

    def test_participant_search(self):
        result = apply_filter(HEATS, HeatFilter(participant_search="amy"))
        self.assertEqual([h.event_number for h in result], [1, 3])

    def test_participant_search_without_hit(self):
        self.assertEqual(apply_filter(HEATS, HeatFilter(participant_search="Zhang")), [])

    def test_participant_matches(self):
        self.assertTrue(participant_matches("Beth  Chan", "beth chan"))
        self.assertTrue(participant_matches("Carl Wu", ""))
        self.assertFalse(participant_matches("Carl Wu", "Dan"))

    def test_filter_options(self):
        options = filter_options(HEATS)
        self.assertEqual(options.age_groups, ["10", "11", "12"])
        self.assertEqual(options.genders, ["F", "M"])
        self.assertEqual(options.event_names, ["100m Back", "200m IM", "50m Free"])
        self.assertEqual(options.participants, ["Amy Lee", "Beth Chan", "Carl Wu", "Dan Ho"])


class TestLiveStatus(unittest.TestCase):
    def setUp(self):
        config = ScheduleConfig(turnover_seconds=10, lunch_start="12:00", lunch_end="13:00")
        # 50 s heats, 10 s turnover: heat n starts at 09:00 + (n - 1) minutes
        self.projected = project(HEATS, config, day_table=DAYS, base_date=BASE_DATE).heats

    def test_current_heat(self):
        self.assertEqual(current_heat(self.projected, at(9, 1, 20)).event_number, 2)
        self.assertIsNone(current_heat(self.projected, at(8, 59)))

    def test_between_heats_nothing_is_running(self):
        self.assertIsNone(current_heat(self.projected, at(9, 0, 55)))

    def test_marshalling_heat_is_two_after_current(self):
        self.assertEqual(marshalling_heat(self.projected, at(9, 1, 20)).event_number, 4)
        self.assertIsNone(marshalling_heat(self.projected, at(9, 3, 20)))

    def test_marshalling_heat_between_heats_is_next_to_start(self):
        self.assertEqual(marshalling_heat(self.projected, at(9, 0, 55)).event_number, 2)
        self.assertEqual(marshalling_heat(self.projected, at(8, 30)).event_number, 1)


class TestLiveStatusAcrossDays(unittest.TestCase):
    def setUp(self):
        days = DayTable(rules=(
            DayRule("d1", "Day 1", 1, 1, time(9, 0)),
            DayRule("d2", "Day 2", 2, 10, time(8, 15)),
        ))
        config = ScheduleConfig(turnover_seconds=10, lunch_start="12:00", lunch_end="13:00")
        hour_heats = [Heat(n, 1, 1, "10", "F", "400m Free", (3600,)) for n in (1, 2, 3, 4)]
        # Day 1: event 1 at 09:00. Day 2: events 2, 3, 4 from 08:15, one hour each
        self.result = project(
            hour_heats, config, day_table=days, heat_filter=HeatFilter(day_key="d2"), base_date=BASE_DATE
        )

    def test_visible_day_heats_excludes_hidden_days(self):
        self.assertEqual([p.event_number for p in self.result.visible_day_heats()], [2, 3, 4])

    def test_live_status_ignores_same_clock_time_on_other_days(self):
        day_heats = self.result.visible_day_heats()
        self.assertEqual(current_heat(day_heats, at(9, 0)).event_number, 2)
        self.assertEqual(marshalling_heat(day_heats, at(9, 0)).event_number, 4)

    def test_printer_reports_heat_of_shown_day(self):
        text = format_schedule_for_printing(self.result, now=at(9, 0))
        self.assertIn("In the water: event 2 heat 1/1", text)
        self.assertIn("Marshalling:  event 4 heat 1/1", text)

    def test_html_highlights_heat_of_shown_day(self):
        html = generate_html_schedule_table(self.result, now=at(9, 0))
        self.assertEqual(html.count('class="current"'), 1)
        self.assertIn('<tr class="current"><td>2</td>', html)


if __name__ == "__main__":
    unittest.main(verbosity=2)
