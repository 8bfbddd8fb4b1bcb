"""Demo-Daten für den Wochenplan.

Erzeugt Coaches und eine realistisch gefüllte Woche:
  1. Belegt werden nur die Nachmittagszeilen (15:00–19:00), sofern das
     Raster welche hat; sonst alle Zeilen.
  2. Pro Zelle arbeiten 0 bis 2 Coaches, nie derselbe Coach zweimal.
  3. Etwa ein Viertel der Slots bleibt "AVAILABLE".
"""

import random
from datetime import date
from typing import Optional

from config.schema import TimetableConfig
from data.slot_store import InMemorySlotStore, SlotNotFoundError
from models.coach import Coach
from models.slot import Slot, SlotCreate, SlotType

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_COACH_NAMES = [
    "Val Murphy", "Ciaran Byrne", "Aoife Kelly", "Sean Doyle",
    "Niamh Walsh", "Declan Ryan", "Orla Brennan", "Liam Gallagher",
]

_STUDENT_FIRST = [
    "Emma", "Jack", "Sophie", "Noah", "Grace", "James", "Ava", "Conor",
    "Lucy", "Daniel", "Mia", "Adam", "Ella", "Finn", "Chloe", "Oisín",
]

_STUDENT_LAST = [
    "O'Brien", "Murphy", "Kelly", "Walsh", "Smith", "Byrne", "Ryan",
    "O'Connor", "Doyle", "McCarthy", "Lynch", "Quinn",
]

# Gewichtung der Slot-Typen
_TYPE_WEIGHTS: list[tuple[SlotType, int]] = [
    (SlotType.ONE_TO_ONE, 30),
    (SlotType.AFTER_SCHOOL_CLUB, 20),
    (SlotType.GROUP_DEVELOPMENT, 15),
    (SlotType.OBSERVATION, 10),
    (SlotType.AVAILABLE, 25),
]

_AFTERNOON = ("15:00", "19:00")


class DemoDataGenerator:
    """Füllt einen Store mit Coaches und einer Demo-Woche."""

    def __init__(self, config: TimetableConfig, seed: Optional[int] = None,
                 num_coaches: int = 5, fill_rate: float = 0.6) -> None:
        if not 1 <= num_coaches <= len(_COACH_NAMES):
            raise ValueError(
                f"num_coaches muss zwischen 1 und {len(_COACH_NAMES)} liegen")
        self.config = config
        self.rng = random.Random(seed)
        self.num_coaches = num_coaches
        self.fill_rate = fill_rate

    # ─── Coaches ──────────────────────────────────────────────────────────────

    def generate_coaches(self, store: InMemorySlotStore) -> list[Coach]:
        """Legt die Demo-Coaches an (id = Vorname klein)."""
        coaches = []
        for name in _COACH_NAMES[:self.num_coaches]:
            coach_id = name.split()[0].lower()
            try:
                coaches.append(store.get_coach(coach_id))
            except SlotNotFoundError:
                coaches.append(store.add_coach(name, coach_id=coach_id))
        return coaches

    # ─── Slots ────────────────────────────────────────────────────────────────

    def _rows(self):
        rows = self.config.time_grid.time_rows
        afternoon = [r for r in rows
                     if _AFTERNOON[0] <= r.start_time < _AFTERNOON[1]]
        return afternoon or rows

    def _student(self) -> str:
        return f"{self.rng.choice(_STUDENT_FIRST)} {self.rng.choice(_STUDENT_LAST)}"

    def generate_week(self, store: InMemorySlotStore, week_start: date,
                      coaches: list[Coach]) -> list[Slot]:
        """Legt Slots für week_start an und gibt sie zurück."""
        types = [t for t, _ in _TYPE_WEIGHTS]
        weights = [w for _, w in _TYPE_WEIGHTS]
        created: list[Slot] = []

        for day in self.config.time_grid.days:
            # Wochenende dünner besetzt
            rate = self.fill_rate if day.day_of_week < 5 else self.fill_rate / 3
            for row in self._rows():
                if self.rng.random() >= rate:
                    continue
                count = 2 if self.rng.random() < 0.2 else 1
                for coach in self.rng.sample(coaches, min(count, len(coaches))):
                    slot_type = self.rng.choices(types, weights=weights)[0]
                    created.append(store.create_slot(SlotCreate(
                        slot_type=slot_type,
                        student_name=self._student() if slot_type.is_booked else None,
                        coach_id=coach.id,
                        coach_name=coach.name,
                        day_of_week=day.day_of_week,
                        start_time=row.start_time,
                        end_time=row.end_time,
                        week_start=week_start,
                    )))
        return created

    def generate(self, store: InMemorySlotStore, week_start: date) -> list[Slot]:
        """Coaches + eine Woche in einem Schritt."""
        coaches = self.generate_coaches(store)
        return self.generate_week(store, week_start, coaches)

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, slots: list[Slot]) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Slot-Typ", style="bold cyan")
        table.add_column("Anzahl", justify="right")

        for slot_type, _ in _TYPE_WEIGHTS:
            n = sum(1 for s in slots if s.slot_type is slot_type)
            table.add_row(slot_type.value, str(n))
        table.add_row("Gesamt", str(len(slots)), style="bold")
        console.print(table)
