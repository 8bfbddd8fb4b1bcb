"""Slot-Editor: Formular + Validierung für genau einen Slot.

Bis save() oder delete() aufgerufen wird, hat der Editor keine Seiteneffekte.
Schlägt der Store-Aufruf fehl, bleibt der Editor mit den Eingaben offen.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError

from config.schema import EditorDefaults, TimeGridConfig, is_valid_time
from data.slot_store import SlotStore, SlotStoreError
from grid.guard import MutationGuard, SlotBusyError
from models.coach import Coach
from models.slot import Slot, SlotCreate, SlotType, SlotUpdate

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class EditorStateError(Exception):
    """Aktion im aktuellen Editor-Zustand nicht erlaubt."""


@dataclass
class SlotForm:
    """Formularfelder des Editors (ungeprüft)."""

    slot_type: SlotType = SlotType.AVAILABLE
    student_name: str = ""
    coach_id: str = ""
    day_of_week: int = 0
    start_time: str = ""
    end_time: str = ""
    notes: str = ""

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotForm":
        return cls(
            slot_type=slot.slot_type,
            student_name=slot.student_name or "",
            coach_id=slot.coach_id,
            day_of_week=slot.day_of_week,
            start_time=slot.start_time,
            end_time=slot.end_time,
            notes=slot.notes or "",
        )


def validate_form(form: SlotForm,
                  time_grid: Optional[TimeGridConfig] = None) -> dict[str, str]:
    """Prüft alle Regeln unabhängig voneinander.

    Gibt {feldname: meldung} zurück; leeres Dict = gültig. Der Zeitvergleich
    ist ein reiner String-Vergleich, was bei "HH:MM" korrekt ist.

    Mit time_grid müssen Tag und Beginn eine Spalte bzw. Zeile des Rasters
    treffen, sonst würde der Slot gespeichert aber nie angezeigt.
    """
    errors: dict[str, str] = {}

    if not form.coach_id:
        errors["coach_id"] = "Bitte einen Coach auswählen"

    day = form.day_of_week
    if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
        errors["day_of_week"] = "Tag muss zwischen 0 (Montag) und 6 (Sonntag) liegen"
    elif time_grid is not None and day not in time_grid.day_indices:
        errors["day_of_week"] = f"Tag {day} ist im Wochenraster nicht vorhanden"

    if not form.start_time:
        errors["start_time"] = "Beginn ist erforderlich"
    elif not is_valid_time(form.start_time):
        errors["start_time"] = "Beginn muss im Format HH:MM sein"
    elif time_grid is not None and time_grid.row_for(form.start_time) is None:
        errors["start_time"] = f"Beginn {form.start_time} ist keine Zeile im Raster"

    if not form.end_time:
        errors["end_time"] = "Ende ist erforderlich"
    elif not is_valid_time(form.end_time):
        errors["end_time"] = "Ende muss im Format HH:MM sein"
    elif time_grid is not None and form.end_time not in time_grid.time_choices():
        errors["end_time"] = f"Ende {form.end_time} liegt nicht auf dem Raster"

    if "start_time" not in errors and "end_time" not in errors \
            and form.start_time >= form.end_time:
        errors["end_time"] = "Ende muss nach dem Beginn liegen"

    if SlotType(form.slot_type) is not SlotType.AVAILABLE \
            and not form.student_name.strip():
        errors["student_name"] = "Schülername ist für gebuchte Slots erforderlich"

    return errors


class SlotEditor:
    """Modaler Editor zum Anlegen und Bearbeiten eines Slots."""

    def __init__(
        self,
        store: SlotStore,
        coaches: list[Coach],
        guard: Optional[MutationGuard] = None,
        defaults: Optional[EditorDefaults] = None,
        can_delete: bool = True,
        on_saved: Optional[Callable[[Slot], None]] = None,
        on_deleted: Optional[Callable[[str], None]] = None,
        time_grid: Optional[TimeGridConfig] = None,
    ) -> None:
        self.store = store
        self.coaches = list(coaches)
        self.guard = guard or MutationGuard()
        self.defaults = defaults or EditorDefaults()
        self.time_grid = time_grid
        self.can_delete = can_delete
        self.on_saved = on_saved
        self.on_deleted = on_deleted

        self.is_open = False
        self.mode: Optional[EditorMode] = None
        self.slot: Optional[Slot] = None
        self.week_start: Optional[date] = None
        self.form = SlotForm()
        self.errors: dict[str, str] = {}
        self.error: Optional[str] = None
        self.is_saving = False
        self.is_deleting = False

    # ─── Öffnen / Schließen ───

    def open(
        self,
        slot: Optional[Slot],
        week_start: date,
        default_day: Optional[int] = None,
        default_start: Optional[str] = None,
        default_end: Optional[str] = None,
    ) -> None:
        """Mit slot: Bearbeiten (vorbelegt). Ohne: Anlegen mit den Defaults."""
        if slot is not None:
            if slot.id is None:
                raise EditorStateError("Nur gespeicherte Slots können bearbeitet werden")
            self.mode = EditorMode.EDIT
            self.form = SlotForm.from_slot(slot)
        else:
            self.mode = EditorMode.CREATE
            d = self.defaults
            self.form = SlotForm(
                coach_id=self.coaches[0].id if self.coaches else "",
                day_of_week=d.day_of_week if default_day is None else default_day,
                start_time=default_start or d.start_time,
                end_time=default_end or d.end_time,
            )
        self.slot = slot
        self.week_start = week_start
        self.errors = {}
        self.error = None
        self.is_open = True

    def close(self) -> None:
        """Schließt ohne zu speichern; alle Eingaben werden verworfen."""
        self.is_open = False
        self.mode = None
        self.slot = None
        self.form = SlotForm()
        self.errors = {}
        self.error = None

    @property
    def is_edit_mode(self) -> bool:
        return self.mode is EditorMode.EDIT

    @property
    def is_busy(self) -> bool:
        return self.is_saving or self.is_deleting

    # ─── Eingabe ───

    def set(self, **values) -> None:
        """Setzt Formularfelder, z.B. set(student_name="Mia", slot_type="121")."""
        self._require_open()
        known = {f.name for f in fields(SlotForm)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unbekannte Felder: {sorted(unknown)}")
        if "slot_type" in values:
            values["slot_type"] = SlotType(values["slot_type"])
        for name, value in values.items():
            setattr(self.form, name, value)

    def validate(self) -> dict[str, str]:
        """Feldfehler des aktuellen Formulars (wird auch in self.errors abgelegt)."""
        self.errors = validate_form(self.form, self.time_grid)
        if "coach_id" not in self.errors \
                and self.coach_name_for(self.form.coach_id) is None:
            self.errors["coach_id"] = (
                f"Unbekannter oder inaktiver Coach: {self.form.coach_id}")
        return dict(self.errors)

    def coach_name_for(self, coach_id: str) -> Optional[str]:
        """Anzeigename zur Coach-ID; None wenn nicht auswählbar.

        Ein inzwischen inaktiver Coach bleibt beim Bearbeiten erhalten,
        solange die Zuordnung nicht geändert wird.
        """
        for c in self.coaches:
            if c.id == coach_id:
                return c.name
        if self.is_edit_mode and self.slot.coach_id == coach_id and self.slot.coach_name:
            return self.slot.coach_name
        return None

    # ─── Speichern ───

    def save(self) -> Optional[Slot]:
        """Validiert und speichert.

        Gibt den gespeicherten Slot zurück und schließt den Editor. Bei
        Validierungs- oder Store-Fehler: None, Editor bleibt offen.
        """
        self._require_open()
        if self.is_busy:
            raise EditorStateError("Es läuft bereits eine Anfrage")
        if self.validate():
            return None

        f = self.form
        slot_type = SlotType(f.slot_type)
        fields_ = {
            "slot_type": slot_type,
            "student_name": f.student_name.strip() if slot_type.is_booked else None,
            "coach_id": f.coach_id,
            "coach_name": self.coach_name_for(f.coach_id),
            "day_of_week": f.day_of_week,
            "start_time": f.start_time,
            "end_time": f.end_time,
            "notes": f.notes,
        }

        try:
            if self.is_edit_mode:
                payload = SlotUpdate(**fields_)
            else:
                payload = SlotCreate(week_start=self.week_start, **fields_)
        except ValidationError as e:
            self.error = f"Ungültige Eingaben: {e.errors()[0]['msg']}"
            logger.warning(self.error)
            return None

        self.error = None
        self.is_saving = True
        try:
            target_id = self.slot.id if self.is_edit_mode else None
            with self.guard.hold(target_id):
                if self.is_edit_mode:
                    saved = self.store.update_slot(target_id, payload)
                else:
                    saved = self.store.create_slot(payload)
        except (SlotStoreError, SlotBusyError) as e:
            self.error = f"Speichern fehlgeschlagen: {e}"
            logger.warning(self.error)
            return None
        finally:
            self.is_saving = False

        self.close()
        if self.on_saved is not None:
            self.on_saved(saved)
        return saved

    def delete(self) -> bool:
        """Löscht den bearbeiteten Slot. True bei Erfolg."""
        self._require_open()
        if not self.is_edit_mode:
            raise EditorStateError("Löschen ist nur im Bearbeiten-Modus möglich")
        if not self.can_delete:
            raise EditorStateError("Löschen ist hier nicht verfügbar")
        if self.is_busy:
            raise EditorStateError("Es läuft bereits eine Anfrage")

        slot_id = self.slot.id
        self.error = None
        self.is_deleting = True
        try:
            with self.guard.hold(slot_id):
                self.store.delete_slot(slot_id)
        except (SlotStoreError, SlotBusyError) as e:
            self.error = f"Löschen fehlgeschlagen: {e}"
            logger.warning(self.error)
            return False
        finally:
            self.is_deleting = False

        self.close()
        if self.on_deleted is not None:
            self.on_deleted(slot_id)
        return True

    def _require_open(self) -> None:
        if not self.is_open:
            raise EditorStateError("Editor ist nicht geöffnet")
