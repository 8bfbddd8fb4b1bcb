"""Export-Modul: Terminal (Rich) und Excel (openpyxl) für den Wochenplan."""

from export.excel_export import ExcelExporter

__all__ = ["ExcelExporter"]
