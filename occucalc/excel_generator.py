# occucalc/excel_generator.py
# Spreadsheet exports: occupancy data sheet and the import template.

from io import BytesIO
from typing import Dict, List

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from occucalc.derivation import parse_number
from occucalc.row_model import (
    COL_AREA, COL_LOAD, COL_NAME, COL_NUMBER, COL_TYPE, EXPORT_COLUMNS, row_to_export_record
)

DATA_SHEET_TITLE = "Occupancy"
TEMPLATE_SHEET_TITLE = "Template"
TEMPLATE_COLUMNS = [COL_NUMBER, COL_NAME, COL_AREA, COL_TYPE]
TEMPLATE_ROWS = [
    {COL_NUMBER: "101", COL_NAME: "Open Office", COL_AREA: 186, COL_TYPE: "Business/Office"},
    {COL_NUMBER: "102", COL_NAME: "Sales Floor", COL_AREA: 140, COL_TYPE: "Retail / Mercantile – sales floor"},
    {COL_NUMBER: "103", COL_NAME: "Lab 1", COL_AREA: 56, COL_TYPE: "Laboratory"},
]
COLUMN_WIDTHS = {COL_NUMBER: 12, COL_NAME: 32, COL_AREA: 14, COL_TYPE: 38, COL_LOAD: 16}


# ==================== STYLE DEFINITIONS ====================
def _define_styles():
    thin_border_side = Side(style='thin')
    thin_border = Border(
        left=thin_border_side,
        right=thin_border_side,
        top=thin_border_side,
        bottom=thin_border_side
    )
    return {
        "table_header_blue_fill": PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid"),
        "header_font": Font(bold=True, color="FFFFFF"),
        "thin_border": thin_border,
    }


def _area_cell_value(area):
    """Areas that parse as numbers are written as numbers, anything else as typed."""
    if area is None or area == '':
        return None
    number = parse_number(area)
    if number is None:
        return area
    # integral values beyond float precision stay floats
    return int(number) if number.is_integer() and abs(number) < 1e15 else number


def _write_table(sheet, headers: List[str], records: List[Dict], styles):
    sheet.append(headers)
    for cell in sheet[1]:
        cell.fill, cell.font, cell.border = styles["table_header_blue_fill"], styles["header_font"], styles["thin_border"]
        cell.alignment = Alignment(horizontal='center', vertical='center')

    for record in records:
        values = []
        for header in headers:
            value = record.get(header)
            values.append(_area_cell_value(value) if header == COL_AREA else value)
        sheet.append(values)

    for row in sheet.iter_rows(min_row=2, max_col=len(headers)):
        for cell in row:
            cell.border = styles["thin_border"]
            # keep text such as "=Lobby" a literal string, never a formula
            if isinstance(cell.value, str):
                cell.data_type = 's'

    for col_idx, header in enumerate(headers, 1):
        sheet.column_dimensions[get_column_letter(col_idx)].width = COLUMN_WIDTHS.get(header, 15)
    sheet.freeze_panes = "A2"


def _workbook_bytes(workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


# ==================== MAIN ENTRY POINTS ====================
def generate_occupancy_excel(rows, factors: Dict[str, float]) -> bytes:
    """Active rows in the canonical 5-column layout, loads recomputed at export time."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = DATA_SHEET_TITLE
    records = [row_to_export_record(row, factors) for row in rows]
    _write_table(sheet, EXPORT_COLUMNS, records, _define_styles())
    return _workbook_bytes(workbook)


def generate_template_excel() -> bytes:
    """Three example rows showing the headers the importer understands."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = TEMPLATE_SHEET_TITLE
    _write_table(sheet, TEMPLATE_COLUMNS, TEMPLATE_ROWS, _define_styles())
    return _workbook_bytes(workbook)
