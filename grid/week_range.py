"""Datumsarithmetik für Kalenderwochen (Montag bis Sonntag)."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

DAYS_PER_WEEK = 7

# Bewusst nicht strftime("%b"): das Ergebnis hinge von der Locale ab.
MONTH_ABBR = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def week_start_for(d: date) -> date:
    """Montag der Woche, in der d liegt."""
    return d - timedelta(days=d.weekday())


def week_end_for(week_start: date) -> date:
    """Sonntag der Woche (week_start + 6 Tage)."""
    return week_start + timedelta(days=DAYS_PER_WEEK - 1)


def day_date(week_start: date, day_of_week: int) -> date:
    """Kalenderdatum eines Wochentags (0=Montag) in dieser Woche."""
    return week_start + timedelta(days=day_of_week)


def _short(d: date, with_year: bool = False) -> str:
    text = f"{d.day} {MONTH_ABBR[d.month - 1]}"
    return f"{text} {d.year}" if with_year else text


def format_day_date(week_start: date, day_of_week: int) -> str:
    """Datum für den Spaltenkopf, z.B. "27 Jan"."""
    return _short(day_date(week_start, day_of_week))


def format_week_label(start: date, end: Optional[date] = None) -> str:
    """Lesbarer Bereich für die Kopfzeile.

    - gleicher Monat:         "2 – 8 Feb 2026"
    - gleiches Jahr:          "30 Jan – 5 Feb 2026"
    - verschiedene Jahre:     "29 Dec 2025 – 4 Jan 2026"
    """
    end = end or week_end_for(start)
    if start.year != end.year:
        return f"{_short(start, True)} – {_short(end, True)}"
    if start.month != end.month:
        return f"{_short(start)} – {_short(end)} {end.year}"
    return f"{start.day} – {_short(end)} {end.year}"


def parse_week(value: str) -> date:
    """ISO-Datum einlesen und auf den Montag der Woche normalisieren."""
    try:
        d = date.fromisoformat(value)
    except ValueError:
        raise ValueError(
            f"'{value}' ist kein gültiges ISO-Datum (z.B. 2026-01-26)") from None
    return week_start_for(d)


@dataclass(frozen=True)
class WeekRange:
    """Eine Kalenderwoche, identifiziert durch ihren Montag."""

    start: date

    def __post_init__(self) -> None:
        if self.start.weekday() != 0:
            raise ValueError(f"Wochenbeginn muss ein Montag sein: {self.start}")

    @classmethod
    def containing(cls, d: date) -> "WeekRange":
        return cls(week_start_for(d))

    @property
    def end(self) -> date:
        return week_end_for(self.start)

    @property
    def label(self) -> str:
        return format_week_label(self.start, self.end)

    def shifted(self, weeks: int) -> "WeekRange":
        """Um weeks Wochen verschoben (negativ = zurück)."""
        return WeekRange(self.start + timedelta(days=DAYS_PER_WEEK * weeks))

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def is_current(self, today: Optional[date] = None) -> bool:
        """True wenn today (Default: heute) in dieser Woche liegt."""
        return self.contains(today or date.today())

    def __str__(self) -> str:
        return self.start.isoformat()
