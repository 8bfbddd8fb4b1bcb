"""Excel-Export für den Wochenplan (openpyxl)."""

from pathlib import Path

from config.schema import TimeGridConfig
from export.helpers import COLORS, format_slots, slot_color, today_str
from grid.renderer import GridRenderer
from grid.slot_index import ALL_COACHES, SlotIndex
from grid.week_range import format_week_label
from models.coach import Coach
from models.slot import Slot


class ExcelExporter:
    """Exportiert eine Woche in eine Excel-Datei: Übersicht + ein Blatt pro Coach."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_ZEIT_W = 15
    COL_DAY_W  = 22

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 30
    ROW_SLOT_H   = 48

    def __init__(self, time_grid: TimeGridConfig, week_start, slots: list[Slot],
                 coaches: list[Coach], business_name: str = ""):
        self.tg = time_grid
        self.week_start = week_start
        self.slots = list(slots)
        self.coaches = list(coaches)
        self.business_name = business_name
        self.renderer = GridRenderer(time_grid)

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, hide_empty_rows: bool = True) -> None:
        """Erstellt die Excel-Datei mit allen Blättern."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_week(wb, "Übersicht", SlotIndex(self.slots), hide_empty_rows)

        used = {s.coach_id for s in self.slots}
        for coach in sorted(self.coaches, key=lambda c: c.name):
            if coach.id in used:
                index = SlotIndex(self.slots, coach.id)
                self._sheet_week(wb, coach.abbreviation[:31], index, hide_empty_rows)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    # ─── Blätter ──────────────────────────────────────────────────────────────

    def _sheet_week(self, wb, title: str, index: SlotIndex,
                    hide_empty_rows: bool) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet(title=title)
        ws.column_dimensions["A"].width = self.COL_ZEIT_W
        for col in range(2, 2 + len(self.tg.days)):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_DAY_W

        # Titelzeile
        heading = format_week_label(self.week_start)
        if self.business_name:
            heading = f"{self.business_name} – {heading}"
        ws.cell(row=1, column=1, value=heading).font = Font(bold=True, size=12)
        if index.coach_filter != ALL_COACHES:
            ws.cell(row=1, column=3, value=title).font = Font(italic=True)
        ws.cell(row=1, column=1 + len(self.tg.days),
                value=f"Stand: {today_str()}").font = Font(size=8, color="888888")

        # Kopfzeile
        border = self._thin_border()
        header_fill = self._fill(COLORS["header"])
        for col, text in enumerate(self.renderer.header(self.week_start), 1):
            cell = ws.cell(row=2, column=col, value=text)
            cell.fill = header_fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align()
            cell.border = border
        ws.row_dimensions[2].height = self.ROW_HEADER_H

        # Raster
        excel_row = 3
        for grid_row in self.renderer.build(index):
            if hide_empty_rows and all(c.is_empty for c in grid_row.cells):
                continue
            label = ws.cell(row=excel_row, column=1, value=grid_row.row.label)
            label.fill = self._fill(COLORS["time"])
            label.alignment = self._center_align(wrap=False)
            label.border = border
            for col, cell in enumerate(grid_row.cells, 2):
                slots = list(cell.slots)
                xc = ws.cell(row=excel_row, column=col, value=format_slots(slots))
                xc.fill = self._fill(slot_color(slots))
                xc.alignment = self._center_align()
                xc.border = border
                xc.font = Font(size=8 if cell.compact else 9)
            ws.row_dimensions[excel_row].height = self.ROW_SLOT_H
            excel_row += 1

        ws.freeze_panes = "B3"
