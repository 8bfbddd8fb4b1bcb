"""Vorlagen für wiederkehrende Wochenpläne ("Fixed Rota")."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.slot import SlotType


class TemplateSlot(BaseModel):
    """Ein Slot einer Vorlage, ohne Wochenbezug."""

    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    coach_id: str
    coach_name: str
    slot_type: SlotType
    default_student_name: Optional[str] = None
    default_booking_id: Optional[str] = None


class TimetableTemplate(BaseModel):
    """Benannte Vorlage, die auf eine beliebige Woche angewendet werden kann."""

    id: str
    name: str
    description: str = ""
    is_active: bool = True
    slots: list[TemplateSlot] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
