"""Report output: the authoritative CSV and its XLSX rendering."""

from .csv_report import ReportWriter
from .xlsx_report import render_xlsx

__all__ = ['ReportWriter', 'render_xlsx']
