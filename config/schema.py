import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


# Nullgepolsterte 24h-Uhrzeit. Nur in diesem Format ist der String-Vergleich
# "15:00" < "16:00" gleichbedeutend mit dem Zeitvergleich.
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def is_valid_time(value: str) -> bool:
    """Prüft ob value eine Uhrzeit im Format "HH:MM" ist."""
    return bool(value) and TIME_PATTERN.match(value) is not None


# ─── ZEITRASTER (vollständig konfigurierbar) ───

class TimeRow(BaseModel):
    """Eine Zeile im Wochenraster."""
    # Beginn im Format "HH:MM"
    start_time: str
    # Ende im Format "HH:MM"
    end_time: str
    # Anzeigename, z.B. "15:00 - 16:00"
    label: str = ""

    @model_validator(mode='after')
    def validate_times(self):
        for t in (self.start_time, self.end_time):
            if not is_valid_time(t):
                raise ValueError(f"Ungültige Uhrzeit '{t}' (erwartet HH:MM)")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Zeile {self.start_time}-{self.end_time}: Beginn muss vor Ende liegen")
        if not self.label:
            self.label = f"{self.start_time} - {self.end_time}"
        return self


class DayColumn(BaseModel):
    """Eine Spalte im Wochenraster."""
    # 0=Montag .. 6=Sonntag
    day_of_week: int = Field(ge=0, le=6)
    # Anzeigename, z.B. "Monday"
    name: str
    # Kurzname, z.B. "Mon"
    short_name: str = ""

    @model_validator(mode='after')
    def default_short_name(self):
        if not self.short_name:
            self.short_name = self.name[:3]
        return self


class TimeGridConfig(BaseModel):
    """Achsen des Wochenrasters: Tages-Spalten × Zeit-Zeilen.

    Beide Listen werden in der angegebenen Reihenfolge dargestellt. Das Raster
    ist unabhängig davon ob die Woche mit Montag oder Sonntag beginnt; der
    Index day_of_week folgt aber immer ISO (0=Montag).
    """
    days: list[DayColumn] = Field(
        description="Tages-Spalten in Anzeigereihenfolge")
    time_rows: list[TimeRow] = Field(
        description="Zeit-Zeilen, aufsteigend nach Beginn")

    @model_validator(mode='after')
    def validate_axes(self):
        """Prüfe eindeutige Tage und streng aufsteigende Zeilen."""
        if not self.days:
            raise ValueError("Mindestens eine Tages-Spalte erforderlich")
        if not self.time_rows:
            raise ValueError("Mindestens eine Zeit-Zeile erforderlich")
        seen = set()
        for d in self.days:
            if d.day_of_week in seen:
                raise ValueError(f"Tag {d.day_of_week} ist doppelt definiert")
            seen.add(d.day_of_week)
        starts = [r.start_time for r in self.time_rows]
        for prev, cur in zip(starts, starts[1:]):
            if cur <= prev:
                raise ValueError(
                    f"Zeit-Zeilen nicht aufsteigend: {prev} vor {cur}")
        return self

    def row_for(self, start_time: str) -> TimeRow | None:
        """Gibt die Zeile mit diesem Beginn zurück (oder None)."""
        for row in self.time_rows:
            if row.start_time == start_time:
                return row
        return None

    def day_for(self, day_of_week: int) -> DayColumn | None:
        """Gibt die Spalte für diesen Wochentag zurück (oder None)."""
        for day in self.days:
            if day.day_of_week == day_of_week:
                return day
        return None

    @property
    def day_indices(self) -> list[int]:
        """Liste aller Wochentag-Indizes in Anzeigereihenfolge."""
        return [d.day_of_week for d in self.days]

    def time_choices(self) -> list[str]:
        """Alle im Raster vorkommenden Uhrzeiten (für Auswahllisten)."""
        times = {r.start_time for r in self.time_rows}
        times |= {r.end_time for r in self.time_rows}
        return sorted(times)


# ─── SPEICHER ───

class StorageConfig(BaseModel):
    """Ablage der Slot-Daten (JSON-Datei)."""
    # Pfad der JSON-Datei mit Coaches, Slots und Vorlagen
    data_file: Path = Field(Path("output/timetable.json"),
        description="JSON-Datei mit Coaches, Slots und Vorlagen")
    # Ein Coach darf nicht zweimal in derselben Zelle derselben Woche stehen
    reject_coach_double_booking: bool = Field(True,
        description="Doppelbelegung eines Coaches in einer Zelle ablehnen")


# ─── EDITOR ───

class EditorDefaults(BaseModel):
    """Vorbelegung des Slot-Editors im Anlege-Modus ohne Zellbezug."""
    day_of_week: int = Field(0, ge=0, le=6)
    start_time: str = "15:00"
    end_time: str = "16:00"

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"Ungültige Uhrzeit '{v}' (erwartet HH:MM)")
        return v


# ─── GESAMT-CONFIG ───

class TimetableConfig(BaseModel):
    """Gesamtkonfiguration des Wochenplans."""
    # Name des Anbieters (Kopfzeile, Export)
    business_name: str = Field("Kids Activity Club",
        description="Name des Anbieters")
    # Tages-Spalten und Zeit-Zeilen
    time_grid: TimeGridConfig
    # Ablage der Daten
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Vorbelegung für neue Slots
    editor: EditorDefaults = Field(default_factory=EditorDefaults)
