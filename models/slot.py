"""Datenmodell für einen Slot im Wochenplan (Pydantic v2)."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config.schema import is_valid_time


class SlotType(str, Enum):
    ONE_TO_ONE = "121"
    AFTER_SCHOOL_CLUB = "ASC"
    GROUP_DEVELOPMENT = "GDS"
    OBSERVATION = "OBS"
    AVAILABLE = "AVAILABLE"

    @property
    def is_booked(self) -> bool:
        """True für alle Typen außer AVAILABLE."""
        return self is not SlotType.AVAILABLE


def cell_key(day_of_week: int, start_time: str) -> str:
    """Schlüssel einer Rasterzelle, z.B. "0-15:00"."""
    return f"{day_of_week}-{start_time}"


class Slot(BaseModel):
    """Eine Belegung eines Coaches für ein Zeitfenster an einem Tag einer Woche."""

    id: Optional[str] = None                  # Vergibt der Store beim Anlegen
    slot_type: SlotType = SlotType.AVAILABLE
    student_name: Optional[str] = None        # Pflicht außer bei AVAILABLE
    coach_id: str
    coach_name: str = ""                      # Denormalisierte Anzeige-Kopie
    day_of_week: int = Field(ge=0, le=6)      # 0=Mo .. 6=So
    start_time: str                           # "HH:MM"
    end_time: str                             # "HH:MM"
    week_start: date                          # Montag der Woche
    notes: str = ""
    booking_id: Optional[str] = None          # Verweis auf eine Buchung
    source_template_id: Optional[str] = None  # Vorlage, aus der der Slot stammt
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time_format(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"Uhrzeit '{v}' muss im Format HH:MM sein")
        return v

    @model_validator(mode='after')
    def _check_invariants(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Beginn ({self.start_time}) muss vor Ende ({self.end_time}) liegen")
        if self.slot_type.is_booked and not (self.student_name or "").strip():
            raise ValueError(
                f"Slot-Typ {self.slot_type.value} erfordert einen Schülernamen")
        return self

    @property
    def cell_key(self) -> str:
        """Schlüssel der Zelle, in der der Slot liegt."""
        return cell_key(self.day_of_week, self.start_time)

    @property
    def is_available(self) -> bool:
        return self.slot_type is SlotType.AVAILABLE

    def display_name(self) -> str:
        """Text für die Karte: "Available", Schülername oder "Unassigned"."""
        if self.is_available:
            return "Available"
        return self.student_name or "Unassigned"


class SlotCreate(BaseModel):
    """Alle Attribute eines neuen Slots außer id und Zeitstempeln."""

    slot_type: SlotType = SlotType.AVAILABLE
    student_name: Optional[str] = None
    coach_id: str
    coach_name: str = ""
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    week_start: date
    notes: str = ""
    booking_id: Optional[str] = None
    source_template_id: Optional[str] = None


class SlotUpdate(BaseModel):
    """Teil-Update eines Slots. Nur gesetzte Felder werden übernommen."""

    slot_type: Optional[SlotType] = None
    student_name: Optional[str] = None
    coach_id: Optional[str] = None
    coach_name: Optional[str] = None
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    week_start: Optional[date] = None
    notes: Optional[str] = None

    def changes(self) -> dict:
        """Nur die explizit gesetzten Felder."""
        return self.model_dump(exclude_unset=True)
