"""Index "welche Slots liegen in Zelle (Tag, Beginn)?".

Der Index wird nie inkrementell verändert. Bei neuer Slot-Liste oder neuem
Coach-Filter entsteht ein neuer Index, damit er nicht von seiner Quelle
abweichen kann.
"""

from collections import defaultdict
from typing import Iterable

from models.slot import Slot, cell_key

# Filterwert für "alle Coaches"
ALL_COACHES = "all"


class SlotIndex:
    """Gruppierung der sichtbaren Slots nach Zelle. O(n) Aufbau, O(1) Abfrage."""

    def __init__(self, slots: Iterable[Slot] = (),
                 coach_filter: str = ALL_COACHES) -> None:
        self.coach_filter = coach_filter or ALL_COACHES
        self._cells: dict[str, tuple[Slot, ...]] = self._build(
            list(slots), self.coach_filter)

    @staticmethod
    def _build(slots: list[Slot], coach_filter: str) -> dict[str, tuple[Slot, ...]]:
        if coach_filter != ALL_COACHES:
            slots = [s for s in slots if s.coach_id == coach_filter]
        groups: dict[str, list[Slot]] = defaultdict(list)
        for s in slots:
            groups[cell_key(s.day_of_week, s.start_time)].append(s)
        return {key: tuple(group) for key, group in groups.items()}

    # ─── Abfragen ───

    def slots_at(self, day_of_week: int, start_time: str) -> list[Slot]:
        """Slots der Zelle in Eingabe-Reihenfolge; leere Liste wenn frei."""
        return list(self._cells.get(cell_key(day_of_week, start_time), ()))

    def is_empty_cell(self, day_of_week: int, start_time: str) -> bool:
        return cell_key(day_of_week, start_time) not in self._cells

    def find(self, slot_id: str) -> Slot | None:
        """Sichtbaren Slot per id suchen (O(n))."""
        for group in self._cells.values():
            for s in group:
                if s.id == slot_id:
                    return s
        return None

    def grouping(self) -> dict[str, list[str | None]]:
        """Zellschlüssel → Slot-IDs; zum Vergleichen zweier Indizes."""
        return {key: [s.id for s in group] for key, group in self._cells.items()}

    def visible_slots(self) -> list[Slot]:
        return [s for group in self._cells.values() for s in group]

    def __len__(self) -> int:
        return sum(len(group) for group in self._cells.values())

    def __repr__(self) -> str:
        return (f"SlotIndex({len(self)} slots in {len(self._cells)} cells, "
                f"filter={self.coach_filter!r})")
