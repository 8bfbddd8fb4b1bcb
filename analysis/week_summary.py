"""Wochenübersicht: Belegung, Auslastung und Kennzahlen pro Coach."""

from collections import defaultdict
from datetime import date

from pydantic import BaseModel

from grid.week_range import format_week_label, week_end_for
from models.coach import Coach
from models.slot import Slot, SlotType


# ─── Kennzahlen-Modelle ───────────────────────────────────────────────────────

class CoachSummary(BaseModel):
    """Kennzahlen eines Coaches in einer Woche."""

    id: str
    name: str
    abbreviation: str      # "VAL", "CIARAN", ...
    total_slots: int
    booked_slots: int
    available_slots: int
    gds_slots: int
    asc_slots: int


class WeeklySummary(BaseModel):
    """Übersicht einer Woche (aus den Slots berechnet, nie gespeichert)."""

    week_start: date
    week_end: date
    total_slots: int
    booked_slots: int
    available_slots: int
    utilization_rate: float    # Prozent gebuchter Slots, 0–100
    coaches: list[CoachSummary]

    @property
    def label(self) -> str:
        return format_week_label(self.week_start, self.week_end)


# ─── Berechnung ───────────────────────────────────────────────────────────────

def summarize_week(week_start: date, slots: list[Slot],
                   coaches: list[Coach]) -> WeeklySummary:
    """Berechnet die Kennzahlen einer Woche.

    Coaches ohne Slots erscheinen mit Nullwerten; Slots unbekannter Coaches
    werden unter ihrem denormalisierten Namen geführt.
    """
    by_coach: dict[str, list[Slot]] = defaultdict(list)
    for s in slots:
        by_coach[s.coach_id].append(s)

    names = {c.id: c.name for c in coaches}
    for s in slots:
        names.setdefault(s.coach_id, s.coach_name or s.coach_id)

    summaries = []
    for coach_id, name in sorted(names.items(), key=lambda kv: kv[1]):
        own = by_coach.get(coach_id, [])
        booked = sum(1 for s in own if s.slot_type.is_booked)
        summaries.append(CoachSummary(
            id=coach_id,
            name=name,
            abbreviation=name.split()[0].upper() if name.strip() else coach_id.upper(),
            total_slots=len(own),
            booked_slots=booked,
            available_slots=len(own) - booked,
            gds_slots=sum(1 for s in own if s.slot_type is SlotType.GROUP_DEVELOPMENT),
            asc_slots=sum(1 for s in own if s.slot_type is SlotType.AFTER_SCHOOL_CLUB),
        ))

    total = len(slots)
    booked_total = sum(1 for s in slots if s.slot_type.is_booked)
    utilization = booked_total / total * 100 if total else 0.0

    return WeeklySummary(
        week_start=week_start,
        week_end=week_end_for(week_start),
        total_slots=total,
        booked_slots=booked_total,
        available_slots=total - booked_total,
        utilization_rate=round(utilization, 1),
        coaches=summaries,
    )


def print_rich(summary: WeeklySummary) -> None:
    """Gibt die Wochenübersicht formatiert über Rich aus."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table
    from rich import box

    console = Console()

    rate = summary.utilization_rate
    rate_color = "green" if rate >= 75 else "yellow" if rate >= 50 else "red"
    console.print(Panel(
        f"[bold]{summary.label}[/bold]\n"
        f"Slots: {summary.total_slots}  |  "
        f"gebucht: {summary.booked_slots}  |  "
        f"frei: {summary.available_slots}  |  "
        f"Auslastung: [{rate_color}]{rate:.1f}%[/{rate_color}]",
        title="Wochenübersicht",
        border_style="cyan",
    ))

    table = Table(title="Coaches", box=box.ROUNDED)
    table.add_column("Kürzel", style="bold")
    table.add_column("Name")
    table.add_column("Slots", justify="right")
    table.add_column("Gebucht", justify="right")
    table.add_column("Frei", justify="right")
    table.add_column("GDS", justify="right")
    table.add_column("ASC", justify="right")
    for c in summary.coaches:
        table.add_row(
            c.abbreviation, c.name, str(c.total_slots), str(c.booked_slots),
            str(c.available_slots), str(c.gds_slots), str(c.asc_slots),
        )
    console.print(table)
