"""Zellmodell des Wochenrasters: TimeRow × DayColumn gegen den SlotIndex.

Der Renderer hält keinen eigenen Zustand. Er liefert pro Zeile und Spalte
eine GridCell; Terminal- und Excel-Ausgabe zeichnen daraus.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from config.schema import DayColumn, TimeGridConfig, TimeRow
from grid.drag_relocate import CellRef, DragRelocateController
from grid.slot_index import SlotIndex
from grid.week_range import format_day_date
from models.slot import Slot, cell_key

# Beschriftung freier Zellen ("hier anlegen")
EMPTY_CELL_LABEL = "+ Add Slot"


@dataclass(frozen=True)
class GridCell:
    """Eine Zelle mit ihren Slots und dem Drag-Feedback."""

    day: DayColumn
    row: TimeRow
    slots: tuple[Slot, ...] = ()
    is_drag_source: bool = False
    is_drop_target: bool = False
    is_valid_target: bool = False

    @property
    def key(self) -> str:
        return cell_key(self.day.day_of_week, self.row.start_time)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    @property
    def compact(self) -> bool:
        """Mehrere Slots teilen sich die Zelle → kompakte Darstellung."""
        return len(self.slots) > 1

    @property
    def ref(self) -> CellRef:
        return CellRef(self.day.day_of_week, self.row.start_time, self.row.end_time)


@dataclass(frozen=True)
class GridRow:
    row: TimeRow
    cells: tuple[GridCell, ...]


class GridRenderer:
    """Baut das Zellmodell für ein gegebenes Raster."""

    def __init__(self, time_grid: TimeGridConfig) -> None:
        self.time_grid = time_grid

    def header(self, week_start: Optional[date] = None) -> list[str]:
        """Kopfzeile: "Time" + ein Eintrag pro Tag (mit Datum wenn bekannt)."""
        labels = ["Time"]
        for day in self.time_grid.days:
            if week_start is None:
                labels.append(day.short_name)
            else:
                labels.append(
                    f"{day.short_name}\n{format_day_date(week_start, day.day_of_week)}")
        return labels

    def build(self, index: SlotIndex,
              drag: Optional[DragRelocateController] = None) -> list[GridRow]:
        rows: list[GridRow] = []
        for row in self.time_grid.time_rows:
            cells = []
            for day in self.time_grid.days:
                ref = CellRef(day.day_of_week, row.start_time, row.end_time)
                active = drag is not None and drag.is_active
                cells.append(GridCell(
                    day=day,
                    row=row,
                    slots=tuple(index.slots_at(day.day_of_week, row.start_time)),
                    is_drag_source=active and drag.is_source(day.day_of_week, row.start_time),
                    is_drop_target=active and drag.is_drop_target(ref),
                    is_valid_target=active and drag.is_valid_target(ref),
                ))
            rows.append(GridRow(row=row, cells=tuple(cells)))
        return rows

    def cell(self, index: SlotIndex, day_of_week: int, start_time: str) -> GridCell:
        """Einzelne Zelle; KeyError wenn Tag oder Zeile nicht im Raster liegen."""
        day = self.time_grid.day_for(day_of_week)
        row = self.time_grid.row_for(start_time)
        if day is None or row is None:
            raise KeyError(f"Zelle {cell_key(day_of_week, start_time)} liegt nicht im Raster")
        return GridCell(day=day, row=row,
                        slots=tuple(index.slots_at(day_of_week, start_time)))
