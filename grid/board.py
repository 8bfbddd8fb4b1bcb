"""TimetableBoard: bindet Navigation, Store, Index, Editor und Drag zusammen.

Anzeige:   Store.list_slots → SlotIndex → GridRenderer
Änderung:  SlotEditor / DragRelocateController → Store → refresh() → neuer Index
"""

import logging
from datetime import date
from typing import Callable, Optional

from config.schema import EditorDefaults, TimeGridConfig
from data.slot_store import SlotStore, SlotStoreError
from grid.drag_relocate import CellRef, DragRelocateController, RelocationResult
from grid.guard import MutationGuard
from grid.renderer import GridRenderer, GridRow
from grid.slot_editor import SlotEditor
from grid.slot_index import ALL_COACHES, SlotIndex
from grid.week_navigator import WeekNavigator
from models.slot import Slot

logger = logging.getLogger(__name__)


class TimetableBoard:
    """Wochenraster mit Coach-Filter, Slot-Editor und Drag & Drop."""

    def __init__(
        self,
        store: SlotStore,
        time_grid: TimeGridConfig,
        week_start: Optional[date] = None,
        editor_defaults: Optional[EditorDefaults] = None,
        can_delete: bool = True,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.time_grid = time_grid
        self.renderer = GridRenderer(time_grid)
        self.guard = MutationGuard()
        self.coaches = store.list_coaches(active_only=True)
        self.slots: list[Slot] = []
        self.coach_filter = ALL_COACHES
        self.index = SlotIndex()
        self.last_error: Optional[str] = None

        self.editor = SlotEditor(
            store, self.coaches,
            guard=self.guard,
            defaults=editor_defaults,
            can_delete=can_delete,
            on_saved=lambda _slot: self.refresh(),
            on_deleted=lambda _slot_id: self.refresh(),
            time_grid=time_grid,
        )
        self.drag = DragRelocateController(
            store, guard=self.guard, on_committed=lambda _slot: self.refresh())
        self.navigator = WeekNavigator(
            week_start, on_change=self._on_week_change, today=today)
        self.refresh()

    # ─── Woche ───

    @property
    def week_start(self) -> date:
        return self.navigator.week_start

    @property
    def week_label(self) -> str:
        return self.navigator.label

    def _on_week_change(self, week_start: date) -> None:
        # Drag- und Editor-Zustand gelten nur für die bisher angezeigte Woche
        self.drag.reset()
        self.editor.close()
        self.refresh()

    def refresh(self) -> None:
        """Slots der Woche neu laden und den Index neu aufbauen."""
        try:
            slots = self.store.list_slots(self.week_start)
        except SlotStoreError as e:
            self.last_error = f"Laden fehlgeschlagen: {e}"
            logger.warning(self.last_error)
            return
        self.last_error = None
        self.slots = slots
        self._rebuild_index()

    def _rebuild_index(self) -> None:
        self.index = SlotIndex(self.slots, self.coach_filter)

    # ─── Filter ───

    def coach_filter_options(self) -> list[tuple[str, str]]:
        return [(ALL_COACHES, "All Coaches")] + [(c.id, c.name) for c in self.coaches]

    def set_coach_filter(self, coach_id: Optional[str]) -> None:
        """Nur die Anzeige ändert sich, die Daten bleiben unberührt."""
        coach_id = coach_id or ALL_COACHES
        if coach_id != ALL_COACHES and coach_id not in {c.id for c in self.coaches}:
            raise ValueError(f"Unbekannter Coach: {coach_id}")
        self.coach_filter = coach_id
        self._rebuild_index()

    # ─── Aktivierung ───

    def activate_cell(self, day_of_week: int, start_time: str) -> SlotEditor:
        """Freie Zelle anklicken: Editor im Anlege-Modus mit Tag/Zeit der Zelle."""
        cell = self.renderer.cell(self.index, day_of_week, start_time)
        if not cell.is_empty:
            raise ValueError(
                f"Zelle {cell.key} ist belegt; bitte einen Slot auswählen")
        self.editor.open(None, self.week_start,
                         default_day=cell.day.day_of_week,
                         default_start=cell.row.start_time,
                         default_end=cell.row.end_time)
        return self.editor

    def activate_slot(self, slot_id: str) -> SlotEditor:
        """Sichtbaren Slot anklicken: Editor im Bearbeiten-Modus."""
        slot = self.index.find(slot_id)
        if slot is None:
            raise KeyError(f"Slot {slot_id} ist in dieser Ansicht nicht sichtbar")
        self.editor.open(slot, self.week_start)
        return self.editor

    def save_editor(self) -> Optional[Slot]:
        return self.editor.save()

    def delete_from_editor(self) -> bool:
        return self.editor.delete()

    # ─── Verschieben ───

    def cell_ref(self, day_of_week: int, start_time: str) -> CellRef:
        """CellRef einer Rasterzelle; ValueError wenn außerhalb des Rasters."""
        row = self.time_grid.row_for(start_time)
        if row is None or self.time_grid.day_for(day_of_week) is None:
            raise ValueError(
                f"Tag {day_of_week} / {start_time} liegt nicht im Raster")
        return CellRef(day_of_week, row.start_time, row.end_time)

    def relocate(self, slot_id: str, day_of_week: int,
                 start_time: str) -> RelocationResult:
        """Kompletter Drag-Vorgang: greifen, Zielzelle betreten, loslassen."""
        slot = self.index.find(slot_id)
        if slot is None:
            raise KeyError(f"Slot {slot_id} ist in dieser Ansicht nicht sichtbar")
        target = self.cell_ref(day_of_week, start_time)
        self.drag.begin_drag(slot)
        self.drag.enter_cell(target)
        return self.drag.drop(target)

    # ─── Darstellung ───

    def render(self) -> list[GridRow]:
        return self.renderer.build(self.index, self.drag)

    def header(self) -> list[str]:
        return self.renderer.header(self.week_start)
