"""Resume support: find PRs already recorded in an existing report."""

import csv
import logging
import os
import re
from typing import Set

from ..models import REPORT_HEADER

PR_URL_RE = re.compile(r'^https?://[^"\s]+/pull/[0-9]+$')
URL_COLUMN = REPORT_HEADER.index('PR URL')


def load_processed_urls(csv_path: str) -> Set[str]:
    """Return the PR URLs already present in the report at csv_path.

    Only the PR URL column is read, so a ticket link that happens to look like
    a PR URL is never taken as a processed marker. A missing or header-only
    file yields an empty set.
    """
    if not os.path.exists(csv_path):
        return set()

    urls = set()
    with open(csv_path, newline='', encoding='utf-8') as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            if len(row) <= URL_COLUMN:
                continue
            url = row[URL_COLUMN].strip()
            if PR_URL_RE.match(url):
                urls.add(url)

    if urls:
        logging.info(f"Resuming: found {len(urls)} existing rows in {csv_path}")
    return urls
