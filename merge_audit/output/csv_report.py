"""CSV report file: creation, appending, sorting."""

import csv
import logging
import os
from typing import List

from ..models import REPORT_HEADER


class ReportWriter:
    """Owns one repository's CSV report.

    Data rows are written with every field quoted and embedded quotes doubled;
    the header line is written bare.
    """

    def __init__(self, path: str):
        self.path = path

    def _writer(self, f):
        return csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator='\n')

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def ensure_header(self) -> None:
        """Create the report with just the header row unless it already has data."""
        if self.exists() and self.row_count() > 0:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', newline='', encoding='utf-8') as f:
            f.write(','.join(REPORT_HEADER) + '\n')

    def append_row(self, row: List[str]) -> None:
        """Append a single row and flush it to disk."""
        with open(self.path, 'a', newline='', encoding='utf-8') as f:
            self._writer(f).writerow(row)
            f.flush()

    def read_rows(self) -> List[List[str]]:
        """All data rows (header excluded)."""
        if not self.exists():
            return []
        with open(self.path, newline='', encoding='utf-8') as f:
            reader = csv.reader(f)
            next(reader, None)
            return [row for row in reader if row]

    def row_count(self) -> int:
        return len(self.read_rows())

    def sort_rows(self) -> int:
        """Rewrite the report with data rows ordered by merge timestamp.

        ISO-8601 timestamps sort chronologically as strings. The sort is
        stable, so rows merged in the same second keep their relative order.

        Returns:
            Number of data rows in the rewritten file
        """
        rows = sorted(self.read_rows(), key=lambda row: row[0])
        tmp_path = self.path + '.tmp'
        with open(tmp_path, 'w', newline='', encoding='utf-8') as f:
            f.write(','.join(REPORT_HEADER) + '\n')
            self._writer(f).writerows(rows)
        os.replace(tmp_path, self.path)
        logging.debug(f"Sorted {len(rows)} rows in {self.path}")
        return len(rows)
