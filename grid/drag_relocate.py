"""Verschieben eines Slots per Drag & Drop als endlicher Automat.

Zustände: IDLE → DRAGGING → (TARGETING)* → (COMMITTED | CANCELLED) → IDLE

Der Automat wird über diskrete Aufrufe getrieben (begin_drag, enter_cell,
leave_cell, drop, cancel) und lässt sich damit ohne echte Zeiger-Events
testen. Beim Verschieben ändern sich nur day_of_week, start_time und
end_time; end_time kommt aus der Ziel-Zeile, nicht aus der alten Dauer.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from data.slot_store import SlotStore, SlotStoreError
from grid.guard import MutationGuard, SlotBusyError
from models.slot import Slot, SlotUpdate, cell_key

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    TARGETING = "targeting"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class RelocationOutcome(str, Enum):
    MOVED = "moved"            # Store-Update erfolgreich
    NO_OP = "no_op"            # Auf die Quellzelle fallen gelassen
    CANCELLED = "cancelled"    # Kein Ziel oder explizit abgebrochen
    FAILED = "failed"          # Store hat abgelehnt, Slot bleibt an der Quelle


class DragStateError(Exception):
    """Aufruf passt nicht zum aktuellen Zustand."""


@dataclass(frozen=True)
class CellRef:
    """Adresse einer Rasterzelle inkl. Zeitfenster der Zeile."""

    day_of_week: int
    start_time: str
    end_time: str

    @property
    def key(self) -> str:
        return cell_key(self.day_of_week, self.start_time)


@dataclass
class RelocationResult:
    """Ergebnis eines Drag-Vorgangs."""

    outcome: RelocationOutcome
    slot: Slot                      # Nach Erfolg der aktualisierte Slot, sonst der alte
    target: Optional[CellRef] = None
    error: Optional[str] = None

    @property
    def moved(self) -> bool:
        return self.outcome is RelocationOutcome.MOVED


class DragRelocateController:
    """Verfolgt genau einen laufenden Verschiebe-Vorgang."""

    def __init__(
        self,
        store: SlotStore,
        guard: Optional[MutationGuard] = None,
        on_committed: Optional[Callable[[Slot], None]] = None,
    ) -> None:
        self.store = store
        self.guard = guard or MutationGuard()
        self.on_committed = on_committed
        self.state = DragState.IDLE
        self.slot: Optional[Slot] = None
        self.source_key: Optional[str] = None
        self.target: Optional[CellRef] = None
        # Durchlaufene Zustände des letzten Vorgangs
        self.transitions: list[DragState] = [DragState.IDLE]

    # ─── Zustandswechsel ───

    def _go(self, state: DragState) -> None:
        self.state = state
        self.transitions.append(state)

    def _finish(self, state: DragState) -> None:
        self._go(state)
        self.slot = None
        self.source_key = None
        self.target = None
        self._go(DragState.IDLE)

    @property
    def is_active(self) -> bool:
        return self.state in (DragState.DRAGGING, DragState.TARGETING)

    def begin_drag(self, slot: Slot) -> None:
        """Slot greifen. Quelle ist seine aktuelle Zelle."""
        if self.is_active:
            raise DragStateError("Es läuft bereits ein Verschiebe-Vorgang")
        if slot.id is None:
            raise DragStateError("Nur gespeicherte Slots können verschoben werden")
        self.slot = slot
        self.source_key = slot.cell_key
        self.target = None
        self.transitions = [DragState.IDLE]
        self._go(DragState.DRAGGING)

    def enter_cell(self, cell: CellRef) -> None:
        """Zeiger betritt eine Zelle: sie wird das einzige vorläufige Ziel."""
        self._require_active()
        self.target = cell
        if self.state is not DragState.TARGETING:
            self._go(DragState.TARGETING)

    def leave_cell(self, cell: Optional[CellRef] = None) -> None:
        """Zeiger verlässt eine Zelle; ohne Ziel zurück nach DRAGGING."""
        self._require_active()
        if cell is not None and self.target is not None and cell.key != self.target.key:
            return
        self.target = None
        if self.state is DragState.TARGETING:
            self._go(DragState.DRAGGING)

    # ─── Abfragen für die Darstellung ───

    def is_valid_target(self, cell: CellRef) -> bool:
        """Gültig ist jede Zelle außer der Quellzelle."""
        return self.is_active and cell.key != self.source_key

    def is_drop_target(self, cell: CellRef) -> bool:
        return self.target is not None and self.target.key == cell.key

    def is_source(self, day_of_week: int, start_time: str) -> bool:
        return self.is_active and cell_key(day_of_week, start_time) == self.source_key

    # ─── Abschluss ───

    def cancel(self) -> Optional[RelocationResult]:
        """Verwirft den Vorgang ohne Store-Aufruf."""
        if not self.is_active:
            return None
        slot = self.slot
        self._finish(DragState.CANCELLED)
        return RelocationResult(RelocationOutcome.CANCELLED, slot)

    def drop(self, cell: Optional[CellRef] = None) -> RelocationResult:
        """Loslassen über cell (Default: aktuelles vorläufiges Ziel)."""
        self._require_active()
        cell = cell or self.target
        slot = self.slot

        if cell is None:
            self._finish(DragState.CANCELLED)
            return RelocationResult(RelocationOutcome.CANCELLED, slot)

        if cell.key == self.source_key:
            self._finish(DragState.CANCELLED)
            return RelocationResult(RelocationOutcome.NO_OP, slot, target=cell)

        update = SlotUpdate(
            day_of_week=cell.day_of_week,
            start_time=cell.start_time,
            end_time=cell.end_time,
        )
        try:
            with self.guard.hold(slot.id):
                moved = self.store.update_slot(slot.id, update)
        except (SlotStoreError, SlotBusyError) as e:
            error = f"Verschieben fehlgeschlagen: {e}"
            logger.warning(f"{error} (Slot {slot.id} → {cell.key})")
            self._finish(DragState.CANCELLED)
            return RelocationResult(RelocationOutcome.FAILED, slot,
                                    target=cell, error=error)

        logger.info(f"Slot {slot.id} verschoben: {slot.cell_key} → {cell.key}")
        self._finish(DragState.COMMITTED)
        if self.on_committed is not None:
            self.on_committed(moved)
        return RelocationResult(RelocationOutcome.MOVED, moved, target=cell)

    def reset(self) -> None:
        """Verwirft einen laufenden Vorgang stillschweigend (z.B. Wochenwechsel)."""
        if self.is_active:
            self._finish(DragState.CANCELLED)

    def _require_active(self) -> None:
        if not self.is_active:
            raise DragStateError(f"Kein Verschiebe-Vorgang aktiv (Zustand: {self.state.value})")
