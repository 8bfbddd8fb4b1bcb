"""Tests für Terminal-Darstellung und Excel-Export der Woche."""

from datetime import date
from pathlib import Path

import pytest

from config.defaults import afternoon_time_grid
from data.slot_store import InMemorySlotStore
from export.excel_export import ExcelExporter
from export.helpers import COLORS, format_slot, format_slots, slot_color
from export.tui_renderer import build_week_table, legend_markup, render_week_rows
from grid.board import TimetableBoard
from grid.renderer import EMPTY_CELL_LABEL
from models.slot import SlotCreate, SlotType

WEEK = date(2026, 1, 26)


def _make_store() -> InMemorySlotStore:
    """Zwei Coaches; Mo 15:00 geteilt, Mi 17:00 frei buchbar."""
    store = InMemorySlotStore()
    store.add_coach("Val Murphy", coach_id="val")
    store.add_coach("Ciaran Byrne", coach_id="ciaran")
    for coach, slot_type, student, day, start, end in [
        ("ciaran", SlotType.AFTER_SCHOOL_CLUB, "Mia Jones", 0, "15:00", "16:00"),
        ("val", SlotType.ONE_TO_ONE, "Noah Kelly", 0, "15:00", "16:00"),
        ("val", SlotType.AVAILABLE, None, 2, "17:00", "18:00"),
    ]:
        store.create_slot(SlotCreate(
            slot_type=slot_type, student_name=student, coach_id=coach,
            coach_name=store.get_coach(coach).name, day_of_week=day,
            start_time=start, end_time=end, week_start=WEEK))
    return store


@pytest.fixture
def store() -> InMemorySlotStore:
    return _make_store()


@pytest.fixture
def board(store: InMemorySlotStore) -> TimetableBoard:
    return TimetableBoard(store, afternoon_time_grid(), week_start=WEEK)


def _export(store: InMemorySlotStore, out: Path, **kwargs) -> None:
    ExcelExporter(afternoon_time_grid(), WEEK, store.list_slots(WEEK),
                  store.list_coaches(), business_name="Test Club").export(out, **kwargs)


# ─── Zelltext ─────────────────────────────────────────────────────────────────

class TestFormatting:
    def test_full_card(self, store: InMemorySlotStore):
        slot = store.list_slots(WEEK, "ciaran")[0]
        assert format_slot(slot) == "ASC  15:00-16:00\nMia Jones\nCiaran Byrne"

    def test_compact_card(self, store: InMemorySlotStore):
        slot = store.list_slots(WEEK, "ciaran")[0]
        assert format_slot(slot, compact=True) == "ASC\nMia Jones"

    def test_available_card(self, store: InMemorySlotStore):
        slot = [s for s in store.list_slots(WEEK) if s.day_of_week == 2][0]
        assert "Available" in format_slot(slot)

    def test_shared_cell_is_compact(self, store: InMemorySlotStore):
        shared = [s for s in store.list_slots(WEEK) if s.day_of_week == 0]
        text = format_slots(shared)
        assert "──" in text
        assert "15:00-16:00" not in text

    def test_empty_cell(self):
        assert format_slots([]) == ""
        assert slot_color([]) == COLORS["free"]

    def test_color_by_first_slot(self, store: InMemorySlotStore):
        available = [s for s in store.list_slots(WEEK) if s.day_of_week == 2]
        assert slot_color(available) == COLORS["AVAILABLE"]


# ─── Terminal ─────────────────────────────────────────────────────────────────

class TestTerminalRenderer:
    def test_rows_and_empty_affordance(self, board: TimetableBoard):
        rows = render_week_rows(board.render())
        assert len(rows) == 4
        assert rows[0][0] == "15:00 - 16:00"
        assert "Mia Jones" in rows[0][1]
        assert "Noah Kelly" in rows[0][1]
        assert rows[0][2] == EMPTY_CELL_LABEL
        assert rows[1][1] == EMPTY_CELL_LABEL

    def test_rows_with_ids(self, board: TimetableBoard):
        rows = render_week_rows(board.render(), show_ids=True)
        for slot in board.index.slots_at(0, "15:00"):
            assert f"#{slot.id}" in rows[0][1]

    def test_table_shape(self, board: TimetableBoard):
        table = build_week_table(board)
        assert len(table.columns) == 7
        assert table.row_count == 4
        assert table.title == "26 Jan – 1 Feb 2026"

    def test_table_hides_empty_rows(self, board: TimetableBoard):
        assert build_week_table(board, hide_empty_rows=True).row_count == 2

    def test_table_title_shows_coach_filter(self, board: TimetableBoard):
        board.set_coach_filter("val")
        assert build_week_table(board).title.endswith("Val Murphy")

    def test_legend_lists_all_types(self):
        text = legend_markup()
        for label in ("1-to-1 Session", "After School Club", "Available"):
            assert label in text


# ─── Excel ────────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_creates_file(self, tmp_path: Path, store: InMemorySlotStore):
        out = tmp_path / "sub" / "week.xlsx"
        _export(store, out)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_has_overview_and_coach_sheets(self, tmp_path: Path, store: InMemorySlotStore):
        from openpyxl import load_workbook
        out = tmp_path / "week.xlsx"
        _export(store, out)
        titles = load_workbook(out).sheetnames
        assert titles == ["Übersicht", "CIARAN", "VAL"]

    def test_overview_content(self, tmp_path: Path, store: InMemorySlotStore):
        from openpyxl import load_workbook
        out = tmp_path / "week.xlsx"
        _export(store, out)
        ws = load_workbook(out)["Übersicht"]

        assert ws.cell(row=1, column=1).value == "Test Club – 26 Jan – 1 Feb 2026"
        assert ws.cell(row=2, column=2).value == "Mon\n26 Jan"
        # Leere Zeilen ausgeblendet: 15:00 und 17:00 bleiben
        assert ws.cell(row=3, column=1).value == "15:00 - 16:00"
        assert ws.cell(row=4, column=1).value == "17:00 - 18:00"
        assert ws.cell(row=3, column=2).value == "ASC\nMia Jones\n──\n121\nNoah Kelly"
        assert ws.cell(row=3, column=2).fill.start_color.rgb.endswith(COLORS["ASC"])

    def test_all_rows(self, tmp_path: Path, store: InMemorySlotStore):
        from openpyxl import load_workbook
        out = tmp_path / "week.xlsx"
        _export(store, out, hide_empty_rows=False)
        ws = load_workbook(out)["Übersicht"]
        assert ws.cell(row=6, column=1).value == "18:00 - 19:00"

    def test_coach_sheet_only_own_slots(self, tmp_path: Path, store: InMemorySlotStore):
        from openpyxl import load_workbook
        out = tmp_path / "week.xlsx"
        _export(store, out)
        ws = load_workbook(out)["VAL"]
        values = {str(c.value) for row in ws.iter_rows() for c in row if c.value}
        assert any("Noah Kelly" in v for v in values)
        assert not any("Mia Jones" in v for v in values)
        assert ws.cell(row=3, column=2).value == "121  15:00-16:00\nNoah Kelly\nVal Murphy"
