"""Data models for merged PR audit reports."""

from dataclasses import dataclass, field
from typing import List, Optional, Set

REPORT_HEADER = ['Merged Date', 'Commit Subject', 'PR URL', 'Author', 'Approvers', 'Ticket']
JOIN_SEPARATOR = ';'


@dataclass
class PullRequestRecord:
    """A merged PR as it moves through enrichment."""
    number: int
    url: str
    merged_at: str
    author: str
    title: str
    body: str = ''
    merge_commit_sha: Optional[str] = None
    approvers: Set[str] = field(default_factory=set)
    ticket_ids: List[str] = field(default_factory=list)  # already prefixed when TICKET_URL is set
    commit_subject: str = ''

    @classmethod
    def from_api(cls, pr: dict) -> 'PullRequestRecord':
        """Build a skeleton record from a GitHub pulls API object."""
        return cls(
            number=pr['number'],
            url=pr['html_url'],
            merged_at=pr['merged_at'],
            author=(pr.get('user') or {}).get('login') or '',
            title=pr.get('title') or '',
            body=pr.get('body') or '',
            merge_commit_sha=pr.get('merge_commit_sha') or None,
        )

    @property
    def merged_date(self) -> str:
        """Calendar day (UTC) of the merge, YYYY-MM-DD."""
        return self.merged_at[:10]

    def to_row(self) -> List[str]:
        """Flatten into the six report columns."""
        return [
            self.merged_at,
            self.commit_subject,
            self.url,
            self.author,
            JOIN_SEPARATOR.join(sorted(self.approvers)),
            JOIN_SEPARATOR.join(self.ticket_ids),
        ]


@dataclass
class DataQualityCounters:
    """Per-repository tallies of rows written and data-quality warnings."""
    new_rows: int = 0
    skipped: int = 0
    missing_tickets: int = 0
    missing_approvers: int = 0
    subject_from_title: int = 0
    non_ancestor_commits: int = 0

    def summary(self) -> str:
        return (f"missing_tickets={self.missing_tickets}, "
                f"missing_approvals={self.missing_approvers}, "
                f"subject_from_title={self.subject_from_title}, "
                f"non_ancestor_commits={self.non_ancestor_commits}")
