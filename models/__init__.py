from models.slot import Slot, SlotCreate, SlotType, SlotUpdate, cell_key
from models.coach import Coach
from models.template import TemplateSlot, TimetableTemplate

__all__ = [
    "Slot",
    "SlotCreate",
    "SlotType",
    "SlotUpdate",
    "cell_key",
    "Coach",
    "TemplateSlot",
    "TimetableTemplate",
]
