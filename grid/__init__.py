"""Wochenraster: Index, Editor, Drag & Drop, Navigation."""

from .week_range import WeekRange, format_week_label, week_start_for
from .slot_index import ALL_COACHES, SlotIndex
from .slot_editor import EditorMode, SlotEditor, SlotForm, validate_form
from .drag_relocate import CellRef, DragRelocateController, DragState, RelocationOutcome
from .week_navigator import WeekNavigator
from .renderer import GridCell, GridRenderer
from .board import TimetableBoard

__all__ = [
    "WeekRange",
    "format_week_label",
    "week_start_for",
    "ALL_COACHES",
    "SlotIndex",
    "EditorMode",
    "SlotEditor",
    "SlotForm",
    "validate_form",
    "CellRef",
    "DragRelocateController",
    "DragState",
    "RelocationOutcome",
    "WeekNavigator",
    "GridCell",
    "GridRenderer",
    "TimetableBoard",
]
