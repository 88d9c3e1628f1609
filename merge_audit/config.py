"""
Configuration for the merge audit.

All settings come from environment variables (optionally seeded from a
``.env`` file by the CLI). Validation happens up front so that a bad date or
regex aborts the run before any repository is touched.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidInputError

DEFAULT_START_DATE = '2024-10-01'
DEFAULT_END_DATE = '2025-08-31'
DEFAULT_MAIN_BRANCH = 'main'
DEFAULT_TICKET_PATTERN = r'[A-Z]+-[0-9]+'
DEFAULT_REPORT_PREFIX = 'audit'
DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_CLONE_URL_TEMPLATE = 'https://github.com/{org}/{repo}.git'

DATE_RE = re.compile(r'^[0-9]{4}-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])$')

TRUE_VALUES = ('true', '1', 'yes')


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, 'false').strip().lower() in TRUE_VALUES


def validate_date(value: str, label: str) -> str:
    """Check that value is a YYYY-MM-DD date.

    Args:
        value: The date string to check
        label: Variable name used in the error message

    Returns:
        The validated date string

    Raises:
        InvalidInputError: If the value is not a valid date
    """
    if not DATE_RE.match(value):
        raise InvalidInputError(f"{label}='{value}' is not a valid YYYY-MM-DD date.")
    return value


@dataclass
class AuditConfig:
    """Validated settings for one audit run."""
    org: str
    start_date: str = DEFAULT_START_DATE
    end_date: str = DEFAULT_END_DATE
    main_branch: str = DEFAULT_MAIN_BRANCH
    ticket_pattern: str = DEFAULT_TICKET_PATTERN
    ticket_url: str = ''
    report_prefix: str = DEFAULT_REPORT_PREFIX
    repo_root: str = os.path.join('~', 'Projects')
    out_dir: str = 'reports'
    strict: bool = False
    strict_approvers: bool = False
    token: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    clone_url_template: str = DEFAULT_CLONE_URL_TEMPLATE

    def __post_init__(self):
        self.repo_root = os.path.expanduser(self.repo_root)
        self.out_dir = os.path.expanduser(self.out_dir)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> 'AuditConfig':
        """Read and validate configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            A validated AuditConfig

        Raises:
            InvalidInputError: If ORG is missing or any value is malformed
        """
        environ = os.environ if environ is None else environ

        org = environ.get('ORG', '').strip()
        if not org:
            raise InvalidInputError("ORG is required. Set it to your GitHub organization or username.")

        config = cls(
            org=org,
            start_date=environ.get('START_DATE') or DEFAULT_START_DATE,
            end_date=environ.get('END_DATE') or DEFAULT_END_DATE,
            main_branch=environ.get('MAIN_BRANCH') or DEFAULT_MAIN_BRANCH,
            ticket_pattern=environ.get('TICKET_PATTERN') or DEFAULT_TICKET_PATTERN,
            ticket_url=environ.get('TICKET_URL', ''),
            report_prefix=environ.get('REPORT_PREFIX') or DEFAULT_REPORT_PREFIX,
            repo_root=environ.get('REPO_ROOT') or os.path.join('~', 'Projects'),
            out_dir=environ.get('OUT_DIR') or 'reports',
            strict=_env_flag(environ, 'STRICT'),
            strict_approvers=_env_flag(environ, 'STRICT_APPROVERS'),
            token=environ.get('GITHUB_TOKEN') or None,
            api_url=(environ.get('GITHUB_API_URL') or DEFAULT_API_URL).rstrip('/'),
            clone_url_template=environ.get('CLONE_URL_TEMPLATE') or DEFAULT_CLONE_URL_TEMPLATE,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise InvalidInputError for malformed dates or ticket pattern."""
        validate_date(self.start_date, 'START_DATE')
        validate_date(self.end_date, 'END_DATE')
        # YYYY-MM-DD compares chronologically as a string
        if self.start_date > self.end_date:
            raise InvalidInputError(
                f"START_DATE ({self.start_date}) is after END_DATE ({self.end_date})."
            )
        try:
            re.compile(self.ticket_pattern)
        except re.error as e:
            raise InvalidInputError(f"TICKET_PATTERN '{self.ticket_pattern}' is not a valid regex: {e}")

        if self.strict:
            logging.info("STRICT enabled: missing tickets or subjects will fail the run")
        if self.strict_approvers:
            logging.info("STRICT_APPROVERS enabled: PRs without approvals will fail the run")

    def report_basename(self, repo: str) -> str:
        """File name (without extension) of the report for repo."""
        return f"{self.report_prefix}-{repo}-{self.start_date}-to-{self.end_date}"

    def csv_path(self, repo: str) -> str:
        return os.path.join(self.out_dir, self.report_basename(repo) + '.csv')

    def xlsx_path(self, repo: str) -> str:
        return os.path.join(self.out_dir, self.report_basename(repo) + '.xlsx')
