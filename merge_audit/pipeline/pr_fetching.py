"""Fetching merged PRs within the audit window."""

import logging
from typing import Iterator

from ..api_client import GitHubAPIClient
from ..models import PullRequestRecord


def in_window(merged_date: str, start_date: str, end_date: str) -> bool:
    """True when merged_date (YYYY-MM-DD) lies in [start_date, end_date]."""
    return start_date <= merged_date <= end_date


def fetch_merged_prs(client: GitHubAPIClient, org: str, repo: str, base_branch: str,
                     start_date: str, end_date: str) -> Iterator[PullRequestRecord]:
    """Yield merged PRs against base_branch whose merge day is inside the window.

    Args:
        client: API client used for the paginated pulls request
        org: Organization or user owning the repository
        repo: Repository name
        base_branch: Only PRs targeting this branch are requested
        start_date: First day of the window, YYYY-MM-DD (inclusive)
        end_date: Last day of the window, YYYY-MM-DD (inclusive)

    Yields:
        PullRequestRecord skeletons in API order
    """
    logging.info(f"Querying merged PRs for {org}/{repo} (base={base_branch})...")
    pulls = client.get_paginated(
        f"/repos/{org}/{repo}/pulls",
        {'state': 'closed', 'base': base_branch},
    )
    merged = [pr for pr in pulls if pr.get('merged_at')]
    logging.info(f"Found {len(merged)} merged PR(s) out of {len(pulls)} closed")

    for pr in merged:
        record = PullRequestRecord.from_api(pr)
        if in_window(record.merged_date, start_date, end_date):
            yield record
