"""Slot-Ablage: Vertrag des Rasters zur Persistenz + Referenz-Implementierungen.

Das Raster kennt nur die abstrakte Klasse SlotStore (Liste pro Woche, Anlegen,
Teil-Update, Löschen, Coaches auflisten). InMemorySlotStore implementiert die
Regeln des Backends; JsonSlotStore schreibt nach jeder Änderung eine JSON-Datei.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from models.coach import Coach
from models.slot import Slot, SlotCreate, SlotUpdate
from models.template import TimetableTemplate

logger = logging.getLogger(__name__)


class SlotStoreError(Exception):
    """Der Store hat eine Anfrage abgelehnt."""


class SlotNotFoundError(SlotStoreError):
    """Unbekannte Slot-, Coach- oder Vorlagen-ID."""


class SlotConflictError(SlotStoreError):
    """Coach ist in dieser Zelle derselben Woche bereits eingeplant."""


class SlotLockedError(SlotStoreError):
    """Slot hängt an einer Buchung und darf nicht gelöscht werden."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


# ─── Vertrag ──────────────────────────────────────────────────────────────────

class SlotStore(ABC):
    """Was das Wochenraster von der Persistenz braucht."""

    @abstractmethod
    def list_slots(self, week_start: date,
                   coach_id: Optional[str] = None) -> list[Slot]:
        """Alle Slots einer Woche, optional nur eines Coaches."""

    @abstractmethod
    def create_slot(self, data: SlotCreate) -> Slot:
        """Legt einen Slot an und gibt ihn mit id zurück."""

    @abstractmethod
    def update_slot(self, slot_id: str, data: SlotUpdate) -> Slot:
        """Übernimmt nur die gesetzten Felder von data."""

    @abstractmethod
    def delete_slot(self, slot_id: str) -> None:
        """Löscht einen Slot."""

    @abstractmethod
    def list_coaches(self, active_only: bool = True) -> list[Coach]:
        """Coaches für Filter und Namensauflösung."""


# ─── In-Memory ────────────────────────────────────────────────────────────────

class InMemorySlotStore(SlotStore):
    """Store im Speicher mit den Regeln des Backends."""

    def __init__(self, reject_coach_double_booking: bool = True) -> None:
        self.reject_coach_double_booking = reject_coach_double_booking
        self._slots: dict[str, Slot] = {}
        self._coaches: dict[str, Coach] = {}
        self._templates: dict[str, TimetableTemplate] = {}

    # ─── Coaches ───

    def add_coach(self, name: str, coach_id: Optional[str] = None,
                  active: bool = True) -> Coach:
        """Legt einen Coach an."""
        coach = Coach(id=coach_id or _new_id(), name=name, active=active)
        if coach.id in self._coaches:
            raise SlotConflictError(f"Coach-ID '{coach.id}' existiert bereits")
        self._coaches[coach.id] = coach
        self._persist()
        logger.info(f"Coach angelegt: {coach.id} ({coach.name})")
        return coach

    def get_coach(self, coach_id: str) -> Coach:
        try:
            return self._coaches[coach_id]
        except KeyError:
            raise SlotNotFoundError(f"Coach nicht gefunden: {coach_id}") from None

    def list_coaches(self, active_only: bool = True) -> list[Coach]:
        coaches = sorted(self._coaches.values(), key=lambda c: c.name)
        if active_only:
            coaches = [c for c in coaches if c.active]
        return coaches

    # ─── Slots ───

    def list_slots(self, week_start: date,
                   coach_id: Optional[str] = None) -> list[Slot]:
        # Wie das Backend: nach Tag, dann Beginn sortiert
        slots = [s for s in self._slots.values() if s.week_start == week_start]
        if coach_id:
            slots = [s for s in slots if s.coach_id == coach_id]
        slots.sort(key=lambda s: (s.day_of_week, s.start_time))
        return [s.model_copy() for s in slots]

    def get_slot(self, slot_id: str) -> Slot:
        try:
            return self._slots[slot_id].model_copy()
        except KeyError:
            raise SlotNotFoundError(f"Slot nicht gefunden: {slot_id}") from None

    def create_slot(self, data: SlotCreate) -> Slot:
        now = _now()
        try:
            slot = Slot(id=_new_id(), created_at=now, updated_at=now,
                        **data.model_dump())
        except ValidationError as e:
            raise SlotStoreError(f"Slot ungültig: {e}") from e
        self._check_double_booking(slot)
        self._slots[slot.id] = slot
        self._persist()
        logger.info(
            f"Slot angelegt: {slot.id} ({slot.week_start} Tag {slot.day_of_week} "
            f"{slot.start_time}, {slot.coach_name or slot.coach_id})")
        return slot.model_copy()

    def update_slot(self, slot_id: str, data: SlotUpdate) -> Slot:
        current = self.get_slot(slot_id)
        changes = data.changes()
        if "coach_name" in changes and "coach_id" not in changes:
            raise SlotStoreError(
                "coach_name kann nur zusammen mit coach_id geändert werden")
        if "coach_id" in changes:
            # Anzeigename immer neu auflösen, nie unabhängig setzen
            coach = self._coaches.get(changes["coach_id"])
            if coach is not None:
                changes["coach_name"] = coach.name
        merged = {**current.model_dump(), **changes, "updated_at": _now()}
        try:
            updated = Slot.model_validate(merged)
        except ValidationError as e:
            raise SlotStoreError(f"Slot ungültig: {e}") from e
        if current.cell_key != updated.cell_key or \
                current.coach_id != updated.coach_id or \
                current.week_start != updated.week_start:
            self._check_double_booking(updated)
        self._slots[slot_id] = updated
        self._persist()
        logger.info(f"Slot aktualisiert: {slot_id} {sorted(changes)}")
        return updated.model_copy()

    def delete_slot(self, slot_id: str) -> None:
        slot = self.get_slot(slot_id)
        if slot.booking_id:
            raise SlotLockedError(
                "Slot mit aktiver Buchung kann nicht gelöscht werden. "
                "Bitte zuerst die Buchung stornieren.")
        del self._slots[slot_id]
        self._persist()
        logger.info(f"Slot gelöscht: {slot_id}")

    def replace_week(self, week_start: date,
                     new_slots: list[SlotCreate]) -> tuple[int, list[Slot]]:
        """Ersetzt alle Slots einer Woche in einem Schritt.

        Gibt (Anzahl gelöschter Slots, angelegte Slots) zurück. Schlägt ein
        neuer Slot fehl, bleibt die Woche unverändert.
        """
        now = _now()
        try:
            created = [
                Slot(id=_new_id(), created_at=now, updated_at=now,
                     **{**d.model_dump(), "week_start": week_start})
                for d in new_slots
            ]
        except ValidationError as e:
            raise SlotStoreError(f"Slot ungültig: {e}") from e
        old_ids = [sid for sid, s in self._slots.items()
                   if s.week_start == week_start]
        if self.reject_coach_double_booking:
            seen: set[tuple] = set()
            for s in created:
                key = (s.coach_id, s.day_of_week, s.start_time)
                if key in seen:
                    raise SlotConflictError(
                        f"Coach {s.coach_name or s.coach_id} ist am Tag "
                        f"{s.day_of_week} um {s.start_time} doppelt eingeplant")
                seen.add(key)
        for sid in old_ids:
            del self._slots[sid]
        for s in created:
            self._slots[s.id] = s
        self._persist()
        logger.info(
            f"Woche {week_start} ersetzt: {len(old_ids)} gelöscht, "
            f"{len(created)} angelegt")
        return len(old_ids), [s.model_copy() for s in created]

    def _check_double_booking(self, slot: Slot) -> None:
        if not self.reject_coach_double_booking:
            return
        for other in self._slots.values():
            if other.id == slot.id:
                continue
            if (other.week_start == slot.week_start
                    and other.coach_id == slot.coach_id
                    and other.day_of_week == slot.day_of_week
                    and other.start_time == slot.start_time):
                raise SlotConflictError(
                    "Für diesen Coach existiert bereits ein Slot an diesem "
                    "Tag zu dieser Uhrzeit")

    # ─── Vorlagen ───

    def save_template(self, template: TimetableTemplate) -> TimetableTemplate:
        now = _now()
        stored = template.model_copy(update={
            "created_at": template.created_at or now,
            "updated_at": now,
        })
        self._templates[stored.id] = stored
        self._persist()
        logger.info(f"Vorlage gespeichert: {stored.id} ({len(stored.slots)} Slots)")
        return stored

    def get_template(self, template_id: str) -> TimetableTemplate:
        try:
            return self._templates[template_id]
        except KeyError:
            raise SlotNotFoundError(
                f"Vorlage nicht gefunden: {template_id}") from None

    def list_templates(self) -> list[TimetableTemplate]:
        return sorted(self._templates.values(), key=lambda t: t.name)

    # ─── Persistenz-Haken ───

    def _persist(self) -> None:
        """Im Speicher: nichts zu tun."""

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}({len(self._coaches)} coaches, "
                f"{len(self._slots)} slots)")


# ─── JSON-Datei ───────────────────────────────────────────────────────────────

class JsonSlotStore(InMemorySlotStore):
    """Wie InMemorySlotStore, schreibt aber nach jeder Änderung nach path."""

    def __init__(self, path: Path, reject_coach_double_booking: bool = True) -> None:
        super().__init__(reject_coach_double_booking)
        self.path = Path(path)
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as e:
                raise SlotStoreError(f"Datendatei ist kein JSON: {self.path}\n{e}") from e
        try:
            self._coaches = {c["id"]: Coach(**c) for c in raw.get("coaches", [])}
            self._slots = {s["id"]: Slot(**s) for s in raw.get("slots", [])}
            self._templates = {
                t["id"]: TimetableTemplate(**t) for t in raw.get("templates", [])
            }
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise SlotStoreError(f"Datendatei ungültig: {self.path}\n{e}") from e
        logger.info(f"Geladen: {self.path} ({len(self._slots)} Slots)")

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "coaches": [c.model_dump(mode="json") for c in self._coaches.values()],
            "slots": [s.model_dump(mode="json") for s in self._slots.values()],
            "templates": [t.model_dump(mode="json") for t in self._templates.values()],
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
