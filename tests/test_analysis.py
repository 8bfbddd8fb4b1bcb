"""Tests für die Wochenübersicht (Belegung, Auslastung, Coach-Kennzahlen)."""

from datetime import date

from analysis.week_summary import summarize_week
from models.coach import Coach
from models.slot import Slot, SlotType

WEEK = date(2026, 1, 26)

COACHES = [
    Coach(id="val", name="Val Murphy"),
    Coach(id="ciaran", name="Ciaran Byrne"),
    Coach(id="aoife", name="Aoife Kelly"),
]


def _slot(slot_id: str, coach: str, slot_type: SlotType, day: int = 0,
          coach_name: str = "") -> Slot:
    return Slot(
        id=slot_id, coach_id=coach, coach_name=coach_name, slot_type=slot_type,
        student_name=None if slot_type is SlotType.AVAILABLE else "Mia Jones",
        day_of_week=day, start_time="15:00", end_time="16:00", week_start=WEEK,
    )


class TestWeekSummary:
    def test_totals_and_utilization(self):
        slots = [
            _slot("a", "val", SlotType.ONE_TO_ONE),
            _slot("b", "val", SlotType.AVAILABLE, day=1),
            _slot("c", "ciaran", SlotType.GROUP_DEVELOPMENT),
            _slot("d", "ciaran", SlotType.AFTER_SCHOOL_CLUB, day=2),
        ]
        summary = summarize_week(WEEK, slots, COACHES)
        assert summary.total_slots == 4
        assert summary.booked_slots == 3
        assert summary.available_slots == 1
        assert summary.utilization_rate == 75.0
        assert summary.week_end == date(2026, 2, 1)

    def test_coach_rows(self):
        slots = [
            _slot("a", "val", SlotType.ONE_TO_ONE),
            _slot("c", "ciaran", SlotType.GROUP_DEVELOPMENT),
            _slot("d", "ciaran", SlotType.AFTER_SCHOOL_CLUB, day=2),
        ]
        summary = summarize_week(WEEK, slots, COACHES)
        assert [c.name for c in summary.coaches] == [
            "Aoife Kelly", "Ciaran Byrne", "Val Murphy"]

        aoife, ciaran, val = summary.coaches
        assert aoife.total_slots == 0
        assert ciaran.abbreviation == "CIARAN"
        assert (ciaran.gds_slots, ciaran.asc_slots, ciaran.booked_slots) == (1, 1, 2)
        assert val.booked_slots == 1
        assert val.available_slots == 0

    def test_empty_week(self):
        summary = summarize_week(WEEK, [], COACHES)
        assert summary.total_slots == 0
        assert summary.utilization_rate == 0.0
        assert summary.label == "26 Jan – 1 Feb 2026"

    def test_unknown_coach_uses_slot_name(self):
        slots = [_slot("x", "ghost", SlotType.OBSERVATION, coach_name="Orla Brennan")]
        summary = summarize_week(WEEK, slots, [])
        assert len(summary.coaches) == 1
        assert summary.coaches[0].name == "Orla Brennan"
        assert summary.coaches[0].abbreviation == "ORLA"

    def test_rate_is_rounded(self):
        slots = [
            _slot("a", "val", SlotType.ONE_TO_ONE),
            _slot("b", "val", SlotType.AVAILABLE, day=1),
            _slot("c", "val", SlotType.AVAILABLE, day=2),
        ]
        assert summarize_week(WEEK, slots, COACHES).utilization_rate == 33.3
