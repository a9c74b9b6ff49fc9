# occucalc/pdf_generator.py
# Summary (per type) and detailed (per row) occupancy reports.

import html as _html
from io import BytesIO
from typing import Dict

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from occucalc.derivation import totals_by_type
from occucalc.row_model import COL_AREA, COL_LOAD, COL_NAME, COL_NUMBER, COL_TYPE, row_to_export_record

THEME = {
    "heading": colors.HexColor("#1a365d"),
    "header_bg": colors.HexColor("#4472C4"),
    "header_fg": colors.white,
    "border": colors.HexColor("#cbd5e1"),
    "row_alt": colors.HexColor("#f8fafc"),
}
DETAIL_HEADERS = ["Room #", "Room Name", "Area (m²)", "Type", "Load"]
DETAIL_COL_WIDTHS = [0.9*inch, 2.1*inch, 0.9*inch, 2.4*inch, 0.7*inch]


def make_styles():
    ss = getSampleStyleSheet()
    H1 = ParagraphStyle("H1", parent=ss["Heading1"], fontSize=18, spaceAfter=14, textColor=THEME["heading"])
    BODY = ParagraphStyle("BODY", parent=ss["Normal"], fontSize=12, leading=16)
    TOTAL = ParagraphStyle("TOTAL", parent=ss["Normal"], fontSize=14, leading=18, spaceBefore=10)
    return H1, BODY, TOTAL


def doc_template(buffer, title: str):
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=0.55*inch, rightMargin=0.55*inch,
        topMargin=0.75*inch, bottomMargin=0.75*inch
    )


def _build(title: str, flow) -> bytes:
    buffer = BytesIO()
    doc_template(buffer, title).build(flow)
    return buffer.getvalue()


def _grand_total_line(total: int) -> str:
    return f"Grand Total: {total} occupants"


def generate_summary_pdf(rows, factors: Dict[str, float], code_label: str) -> bytes:
    """One line per occupancy type with its summed load, then the grand total."""
    H1, BODY, TOTAL = make_styles()
    totals, grand_total = totals_by_type(rows, factors)
    title = f"Occupancy Summary – {code_label}"

    flow = [Paragraph(_html.escape(title), H1)]
    for occupancy_type, load in totals.items():
        flow.append(Paragraph(_html.escape(f"{occupancy_type}: {load} occupants"), BODY))
    flow.append(Spacer(1, 6))
    flow.append(Paragraph(_grand_total_line(grand_total), TOTAL))
    return _build(title, flow)


def generate_detailed_pdf(rows, factors: Dict[str, float], code_label: str) -> bytes:
    """
    One table line per row. The table splits across pages on its own and the
    header row is repeated on every page; the grand total follows the table.
    """
    H1, _, TOTAL = make_styles()
    title = f"Occupancy Detailed Report – {code_label}"
    records = [row_to_export_record(row, factors) for row in rows]

    matrix = [DETAIL_HEADERS]
    for record in records:
        matrix.append([
            str(record[COL_NUMBER]), str(record[COL_NAME]), str(record[COL_AREA]),
            str(record[COL_TYPE]), str(record[COL_LOAD]),
        ])

    tbl = Table(matrix, colWidths=DETAIL_COL_WIDTHS, repeatRows=1)
    cmds = [
        ("BACKGROUND", (0, 0), (-1, 0), THEME["header_bg"]),
        ("TEXTCOLOR", (0, 0), (-1, 0), THEME["header_fg"]),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("LINEBELOW", (0, 0), (-1, 0), 1, THEME["heading"]),
        ("LINEBELOW", (0, 1), (-1, -1), 0.25, THEME["border"]),
        ("ALIGN", (-1, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for i in range(2, len(matrix), 2):
        cmds.append(("BACKGROUND", (0, i), (-1, i), THEME["row_alt"]))
    tbl.setStyle(TableStyle(cmds))

    grand_total = sum(record[COL_LOAD] for record in records)
    flow = [Paragraph(_html.escape(title), H1), tbl, Spacer(1, 12), Paragraph(_grand_total_line(grand_total), TOTAL)]
    return _build(title, flow)
