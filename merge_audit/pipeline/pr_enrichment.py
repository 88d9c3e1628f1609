"""Enrichment of merged PRs with tickets, approvers and commit subjects."""

import logging
import re
from typing import List, Optional, Set

from ..api_client import GitHubAPIClient
from ..errors import ApiError
from ..models import DataQualityCounters, PullRequestRecord
from ..repo_sync import RepositorySync


def first_line(message: Optional[str]) -> str:
    """Return the first line of a commit message."""
    if not message:
        return ''
    return message.splitlines()[0].strip()


class PREnricher:
    """Fills in the audit fields of a PullRequestRecord."""

    def __init__(self, client: GitHubAPIClient, org: str, repo: str, base_branch: str,
                 ticket_pattern: str, ticket_url: str = '', repo_sync: RepositorySync = None):
        """Initialize the enricher.

        Args:
            client: API client for reviews and commits
            org: Organization owning the repository
            repo: Repository name
            base_branch: Branch the merge commit must be reachable from
            ticket_pattern: Regex matched against PR title and body
            ticket_url: Optional base URL prepended to each ticket id
            repo_sync: Local clone used for ancestry checks (skipped when None)
        """
        self.client = client
        self.org = org
        self.repo = repo
        self.base_branch = base_branch
        self.ticket_re = re.compile(ticket_pattern)
        self.ticket_url = ticket_url
        self.repo_sync = repo_sync

    def extract_tickets(self, title: str, body: str) -> List[str]:
        """Find distinct ticket ids in the PR text, sorted, optionally as URLs."""
        text = f"{title} {body or ''}"
        ids = sorted({m.group(0) for m in self.ticket_re.finditer(text) if m.group(0)})
        if self.ticket_url:
            return [f"{self.ticket_url}{ticket}" for ticket in ids]
        return ids

    def fetch_approvers(self, pr_number: int) -> Set[str]:
        """Logins of everyone who left an APPROVED review on the PR."""
        reviews = self.client.get_paginated(f"/repos/{self.org}/{self.repo}/pulls/{pr_number}/reviews")
        return {
            review['user']['login']
            for review in reviews
            if review.get('state') == 'APPROVED' and (review.get('user') or {}).get('login')
        }

    def fetch_commit_subject(self, sha: str) -> str:
        """First line of the commit message for sha, or '' if it cannot be fetched."""
        try:
            commit = self.client.get_json(f"/repos/{self.org}/{self.repo}/commits/{sha}")
        except ApiError as e:
            logging.warning(f"Could not fetch commit {sha}: {e}")
            return ''
        return first_line((commit.get('commit') or {}).get('message'))

    def enrich(self, record: PullRequestRecord, counters: DataQualityCounters) -> PullRequestRecord:
        """Populate tickets, approvers and commit subject on record.

        Missing data never drops the row: the field is left empty (or the
        title is used as subject) and the matching counter is incremented.
        """
        record.ticket_ids = self.extract_tickets(record.title, record.body)
        if not record.ticket_ids:
            counters.missing_tickets += 1
            logging.warning(f"Missing ticket for PR #{record.number} ({record.url})")

        record.approvers = self.fetch_approvers(record.number)
        if not record.approvers:
            counters.missing_approvers += 1
            logging.warning(f"No APPROVED reviews for PR #{record.number} ({record.url})")

        subject = ''
        if record.merge_commit_sha:
            subject = self.fetch_commit_subject(record.merge_commit_sha)
            self._check_ancestry(record, counters)

        if not subject:
            subject = record.title
            counters.subject_from_title += 1
            logging.warning(f"Using PR title as commit subject for PR #{record.number}; "
                            f"merge_commit_sha missing/unavailable")
        record.commit_subject = subject
        return record

    def _check_ancestry(self, record: PullRequestRecord, counters: DataQualityCounters):
        if self.repo_sync is None:
            return
        if not self.repo_sync.is_ancestor(record.merge_commit_sha, self.base_branch):
            counters.non_ancestor_commits += 1
            logging.warning(f"merge_commit_sha {record.merge_commit_sha} for PR #{record.number} "
                            f"is not an ancestor of origin/{self.base_branch}")
