"""Terminal-Darstellung des Wochenrasters (Rich).

Wird von `week` und den `slot`-Befehlen der CLI verwendet.
"""

from typing import TYPE_CHECKING

from config.defaults import SLOT_TYPE_LABELS, SLOT_TYPE_STYLES
from export.helpers import format_slots
from grid.renderer import EMPTY_CELL_LABEL, GridRow

if TYPE_CHECKING:
    from grid.board import TimetableBoard
    from rich.table import Table


def render_week_rows(rows: list[GridRow], show_ids: bool = False) -> list[list[str]]:
    """Gibt Tabellenzeilen als Text zurück.

    Jede Zeile: [time_label, Tag 1, Tag 2, ...]. Freie Zellen zeigen
    EMPTY_CELL_LABEL, geteilte Zellen jeden Slot kompakt.
    """
    out: list[list[str]] = []
    for grid_row in rows:
        cells = [grid_row.row.label]
        for cell in grid_row.cells:
            if cell.is_empty:
                cells.append(EMPTY_CELL_LABEL)
                continue
            text = format_slots(list(cell.slots))
            if show_ids:
                text += "\n" + " ".join(f"#{s.id}" for s in cell.slots)
            cells.append(text)
        out.append(cells)
    return out


def _markup(cell, text: str) -> str:
    """Rich-Markup für eine Zelle inkl. Drag-Feedback."""
    if cell.is_drop_target:
        return f"[bold reverse]{text}[/bold reverse]"
    if cell.is_drag_source:
        return f"[strike dim]{text}[/strike dim]"
    if cell.is_empty:
        return f"[dim]{text}[/dim]"
    style = SLOT_TYPE_STYLES.get(cell.slots[0].slot_type.value, "")
    return f"[{style}]{text}[/{style}]" if style else text


def build_week_table(board: "TimetableBoard", show_ids: bool = True,
                     hide_empty_rows: bool = False) -> "Table":
    """Baut eine Rich-Tabelle der angezeigten Woche."""
    from rich.table import Table
    from rich import box

    title = board.week_label
    if board.coach_filter != "all":
        name = next((c.name for c in board.coaches if c.id == board.coach_filter),
                    board.coach_filter)
        title += f"  ·  {name}"
    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    for i, label in enumerate(board.header()):
        table.add_column(label, justify="left" if i == 0 else "center",
                         no_wrap=(i == 0))

    rows = board.render()
    texts = render_week_rows(rows, show_ids=show_ids)
    for grid_row, text_row in zip(rows, texts):
        if hide_empty_rows and all(c.is_empty for c in grid_row.cells):
            continue
        table.add_row(
            text_row[0],
            *(_markup(cell, text) for cell, text in zip(grid_row.cells, text_row[1:])),
        )
    return table


def legend_markup() -> str:
    """Legende der Slot-Typen als Rich-Markup."""
    parts = []
    for value, label in SLOT_TYPE_LABELS.items():
        style = SLOT_TYPE_STYLES.get(value, "")
        parts.append(f"[{style}]■[/{style}] {label}" if style else f"■ {label}")
    return "   ".join(parts)
