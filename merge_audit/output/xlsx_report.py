"""XLSX rendering of a CSV report."""

import csv
import logging

SHEET_TITLE = 'PR Audit'
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 60
COLUMN_MARGIN = 2


def column_width(values) -> int:
    """Width for a column holding values: longest value plus margin, clamped."""
    longest = max([MIN_COLUMN_WIDTH] + [len('' if v is None else str(v)) for v in values])
    return min(longest + COLUMN_MARGIN, MAX_COLUMN_WIDTH)


def render_xlsx(csv_path: str, xlsx_path: str, sheet_title: str = SHEET_TITLE) -> bool:
    """Regenerate the XLSX workbook from the full CSV report.

    The header row is frozen, an auto-filter covers the used range and each
    column is sized to its content.

    Args:
        csv_path: Source CSV report
        xlsx_path: Workbook to (over)write
        sheet_title: Name of the single worksheet

    Returns:
        True if the workbook was written, False if rendering was skipped
    """
    try:
        from openpyxl import Workbook
        from openpyxl.utils import get_column_letter
    except ImportError:
        logging.warning("XLSX conversion skipped; install openpyxl (pip install openpyxl)")
        return False

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    with open(csv_path, newline='', encoding='utf-8') as f:
        for row in csv.reader(f):
            ws.append(row)

    ws.auto_filter.ref = ws.dimensions
    ws.freeze_panes = 'A2'

    for col_idx in range(1, ws.max_column + 1):
        values = [row[0].value for row in ws.iter_rows(min_col=col_idx, max_col=col_idx)]
        ws.column_dimensions[get_column_letter(col_idx)].width = column_width(values)

    wb.save(xlsx_path)
    logging.info(f"Wrote XLSX: {xlsx_path}")
    return True
