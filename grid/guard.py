"""Pro Slot höchstens eine laufende Änderung (Speichern, Löschen, Verschieben)."""

from contextlib import contextmanager
from typing import Iterator, Optional


class SlotBusyError(Exception):
    """Für diesen Slot läuft bereits eine Änderung."""


class MutationGuard:
    """Merkt sich Slot-IDs mit laufender Store-Anfrage."""

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_busy(self, slot_id: Optional[str]) -> bool:
        return slot_id is not None and slot_id in self._in_flight

    @contextmanager
    def hold(self, slot_id: Optional[str]) -> Iterator[None]:
        """Sperrt slot_id für die Dauer des Blocks. None (neuer Slot) sperrt nichts."""
        if slot_id is None:
            yield
            return
        if slot_id in self._in_flight:
            raise SlotBusyError(f"Für Slot {slot_id} läuft bereits eine Änderung")
        self._in_flight.add(slot_id)
        try:
            yield
        finally:
            self._in_flight.discard(slot_id)
