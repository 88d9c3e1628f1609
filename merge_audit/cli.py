"""Command-line entry point for the merged-PR audit."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .api_client import GitHubAPIClient
from .config import AuditConfig
from .errors import AuthenticationError, InvalidInputError, MissingPrerequisiteError, StrictModeViolation
from .pipeline import MergeAuditor
from .repo_sync import require_git

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_NO_REPOS = 2

DESCRIPTION = """\
PR Audit Report Generator: produces CSV/XLSX reports of merged pull requests
for SOC2-style compliance auditing. Supports resume on re-run.
"""

EPILOG = """\
Required environment:
  ORG                GitHub organization or username that owns the repos
  GITHUB_TOKEN       Token used for the GitHub API

Optional environment variables:
  START_DATE         Audit window start, YYYY-MM-DD          (default: 2024-10-01)
  END_DATE           Audit window end, YYYY-MM-DD            (default: 2025-08-31)
  MAIN_BRANCH        Base branch to query                    (default: main)
  TICKET_PATTERN     Regex for ticket IDs in PR title/body   (default: [A-Z]+-[0-9]+)
  TICKET_URL         Base URL prepended to ticket IDs        (default: empty)
  REPORT_PREFIX      Prefix for output filenames             (default: audit)
  REPO_ROOT          Directory where repos are cloned        (default: ~/Projects)
  OUT_DIR            Directory where reports are written     (default: ./reports)
  STRICT             Fail if missing tickets or subjects     (default: false)
  STRICT_APPROVERS   Fail if any PR has no approved reviews  (default: false)
  GITHUB_API_URL     REST API root                           (default: https://api.github.com)
  CLONE_URL_TEMPLATE Clone URL with {org} and {repo}         (default: https://github.com/{org}/{repo}.git)
  LOG_LEVEL          Logging level                           (default: INFO)

Exit codes: 0 ok, 1 setup error or failed repository, 2 no repositories,
10/11/12 strict violations (tickets/subjects/approvers).
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gh-merge-audit',
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('repos', nargs='*', metavar='repo', help='Repository names inside ORG')
    return parser


def configure_logging():
    # Can be overridden by LOG_LEVEL environment variable
    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%m/%d/%Y %I:%M:%S %p'
    )


def run(argv: Optional[List[str]] = None, api_client: GitHubAPIClient = None) -> int:
    """Parse arguments, validate the environment and audit every repository.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        require_git()
        config = AuditConfig.from_env()
    except (MissingPrerequisiteError, InvalidInputError) as e:
        logging.error(str(e))
        return EXIT_SETUP_ERROR

    os.makedirs(config.out_dir, exist_ok=True)
    os.makedirs(config.repo_root, exist_ok=True)

    api_client = api_client or GitHubAPIClient(config.token, config.api_url)
    try:
        api_client.check_authentication()
    except AuthenticationError as e:
        logging.error(f"GitHub authentication failed: {e}")
        return EXIT_SETUP_ERROR

    if not args.repos:
        logging.error("Usage: ORG=<github-org> gh-merge-audit <repo1> [repo2 ...] (see --help)")
        return EXIT_NO_REPOS

    auditor = MergeAuditor(config, api_client)
    try:
        return auditor.run(args.repos)
    except StrictModeViolation as e:
        logging.error(str(e))
        return e.exit_code


def main():
    """Console script entry point."""
    # Load environment variables from .env file if it exists
    load_dotenv()
    configure_logging()
    sys.exit(run())


if __name__ == '__main__':
    main()
