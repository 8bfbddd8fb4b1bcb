from config.schema import (
    DayColumn,
    TimeGridConfig,
    TimeRow,
    TimetableConfig,
)


# ─── Slot-Typen ───────────────────────────────────────────────────────────────

SLOT_TYPE_LABELS: dict[str, str] = {
    "121":       "1-to-1 Session",
    "ASC":       "After School Club",
    "GDS":       "Group Development",
    "OBS":       "Observation",
    "AVAILABLE": "Available",
}

# Hintergrundfarbe je Slot-Typ (RRGGBB, ohne #)
SLOT_TYPE_COLORS: dict[str, str] = {
    "121":       "DBEAFE",
    "ASC":       "DCFCE7",
    "GDS":       "F3E8FF",
    "OBS":       "FEF9C3",
    "AVAILABLE": "F3F4F6",
}

# Rich-Stil je Slot-Typ für die Terminal-Ansicht
SLOT_TYPE_STYLES: dict[str, str] = {
    "121":       "blue",
    "ASC":       "green",
    "GDS":       "magenta",
    "OBS":       "yellow",
    "AVAILABLE": "dim",
}

_DAY_NAMES = [
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
]


def default_day_columns() -> list[DayColumn]:
    """Sieben Spalten, Montag zuerst (0=Montag .. 6=Sonntag)."""
    return [
        DayColumn(day_of_week=i, name=name, short_name=name[:3])
        for i, name in enumerate(_DAY_NAMES)
    ]


def _to_minutes(hhmm: str) -> int:
    hh, mm = hhmm.split(":")
    return int(hh) * 60 + int(mm)


def _to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def default_time_rows(first: str = "06:00", last: str = "22:00",
                      step_minutes: int = 30) -> list[TimeRow]:
    """Zeit-Zeilen von first bis last im Abstand step_minutes.

    Die letzte Zeile endet genau bei last; ein Rest kürzer als step_minutes
    wird verworfen.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes muss > 0 sein")
    start, end = _to_minutes(first), _to_minutes(last)
    rows: list[TimeRow] = []
    t = start
    while t + step_minutes <= end:
        rows.append(TimeRow(start_time=_to_hhmm(t),
                            end_time=_to_hhmm(t + step_minutes)))
        t += step_minutes
    return rows


def default_time_grid() -> TimeGridConfig:
    """Standard-Raster: Mo–So, 06:00–22:00 in 30-Minuten-Zeilen (32 Zeilen)."""
    return TimeGridConfig(
        days=default_day_columns(),
        time_rows=default_time_rows(),
    )


def afternoon_time_grid() -> TimeGridConfig:
    """Kompaktes Nachmittagsraster: Mo–Sa, 15:00–19:00 in Stunden-Zeilen."""
    return TimeGridConfig(
        days=default_day_columns()[:6],
        time_rows=default_time_rows("15:00", "19:00", 60),
    )


def default_timetable_config() -> TimetableConfig:
    """Vollständige Default-Konfiguration."""
    return TimetableConfig(time_grid=default_time_grid())
