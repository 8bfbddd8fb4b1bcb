"""Vorlagen ("Fixed Rota"): Woche als Vorlage sichern und auf Wochen anwenden."""

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from data.slot_store import InMemorySlotStore, SlotConflictError, SlotStoreError
from models.slot import SlotCreate
from models.template import TemplateSlot, TimetableTemplate

logger = logging.getLogger(__name__)


@dataclass
class TemplateApplyResult:
    """Zusammenfassung einer angewendeten Vorlage."""

    template_id: str
    template_name: str
    week_start: date
    slots_created: int
    slots_deleted: int
    slot_ids: list[str] = field(default_factory=list)


def _slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "template"


def template_from_week(store: InMemorySlotStore, name: str, week_start: date,
                       description: str = "") -> TimetableTemplate:
    """Sichert alle Slots einer Woche als Vorlage (id = Slug des Namens)."""
    slots = store.list_slots(week_start)
    if not slots:
        raise SlotStoreError(f"Woche {week_start} enthält keine Slots")
    template = TimetableTemplate(
        id=_slugify(name),
        name=name,
        description=description,
        slots=[
            TemplateSlot(
                day_of_week=s.day_of_week,
                start_time=s.start_time,
                end_time=s.end_time,
                coach_id=s.coach_id,
                coach_name=s.coach_name,
                slot_type=s.slot_type,
                default_student_name=s.student_name,
                default_booking_id=s.booking_id,
            )
            for s in slots
        ],
    )
    return store.save_template(template)


def apply_template(store: InMemorySlotStore, template_id: str, week_start: date,
                   overwrite: bool = False) -> TemplateApplyResult:
    """Legt die Slots einer Vorlage in der Woche week_start an.

    Bestehende Slots der Woche blockieren, außer overwrite=True; dann wird
    die Woche in einem Schritt ersetzt.
    """
    if week_start.weekday() != 0:
        raise SlotStoreError(f"Wochenbeginn muss ein Montag sein: {week_start}")

    template = store.get_template(template_id)
    if not template.is_active:
        raise SlotStoreError(
            f"Vorlage '{template.name}' ist inaktiv. Bitte zuerst aktivieren.")
    if not template.slots:
        raise SlotStoreError(f"Vorlage '{template.name}' enthält keine Slots")

    existing = store.list_slots(week_start)
    if existing and not overwrite:
        raise SlotConflictError(
            f"{len(existing)} Slots existieren bereits in der Woche {week_start}. "
            f"Mit overwrite ersetzen.")

    new_slots = [
        SlotCreate(
            slot_type=ts.slot_type,
            student_name=ts.default_student_name,
            coach_id=ts.coach_id,
            coach_name=ts.coach_name,
            day_of_week=ts.day_of_week,
            start_time=ts.start_time,
            end_time=ts.end_time,
            week_start=week_start,
            booking_id=ts.default_booking_id,
            source_template_id=template.id,
        )
        for ts in template.slots
    ]
    deleted, created = store.replace_week(week_start, new_slots)
    logger.info(
        f"Vorlage '{template.name}' auf Woche {week_start} angewendet: "
        f"{len(created)} angelegt, {deleted} gelöscht")
    return TemplateApplyResult(
        template_id=template.id,
        template_name=template.name,
        week_start=week_start,
        slots_created=len(created),
        slots_deleted=deleted,
        slot_ids=[s.id for s in created],
    )
