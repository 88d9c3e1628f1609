"""GitHub merged-PR audit report generator."""

from .models import PullRequestRecord, DataQualityCounters, REPORT_HEADER
from .api_client import GitHubAPIClient
from .config import AuditConfig
from .retry import RetryPolicy, classify_error
from .repo_sync import RepositorySync
from .pipeline import MergeAuditor

__all__ = [
    'PullRequestRecord',
    'DataQualityCounters',
    'REPORT_HEADER',
    'GitHubAPIClient',
    'AuditConfig',
    'RetryPolicy',
    'classify_error',
    'RepositorySync',
    'MergeAuditor',
]
