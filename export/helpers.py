"""Gemeinsame Hilfsfunktionen für Terminal- und Excel-Ausgabe."""

from datetime import date

from config.defaults import SLOT_TYPE_COLORS
from models.slot import Slot

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    **SLOT_TYPE_COLORS,
    "free":   "FAFAFA",
    "header": "0EA5E9",
    "time":   "F5F5F5",
}


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def slot_color(slots: list[Slot]) -> str:
    """Hintergrundfarbe einer Zelle (nach dem ersten Slot)."""
    if not slots:
        return COLORS["free"]
    return COLORS.get(slots[0].slot_type.value, COLORS["free"])


# ─── Zelleninhalt-Formatierung ────────────────────────────────────────────────

def format_slot(slot: Slot, compact: bool = False) -> str:
    """Formatiert einen Slot als Karte.

    voll:     "ASC  15:00-16:00\\nMia Jones\\nCiaran Byrne"
    kompakt:  "ASC\\nMia Jones"
    """
    name = slot.display_name()
    if compact:
        return f"{slot.slot_type.value}\n{name}"
    lines = [f"{slot.slot_type.value}  {slot.start_time}-{slot.end_time}", name]
    if slot.coach_name:
        lines.append(slot.coach_name)
    return "\n".join(lines)


def format_slots(slots: list[Slot]) -> str:
    """Formatiert alle Slots einer Zelle (getrennt durch ──).

    Ab zwei Slots wird jeder kompakt dargestellt.
    """
    if not slots:
        return ""
    if len(slots) == 1:
        return format_slot(slots[0])
    return "\n──\n".join(format_slot(s, compact=True) for s in slots)
