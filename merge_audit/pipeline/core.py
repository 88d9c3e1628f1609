"""Per-repository audit pipeline."""

import logging
from typing import Callable, List

from ..api_client import LOW_RATE_LIMIT_THRESHOLD, GitHubAPIClient
from ..config import AuditConfig
from ..errors import MergeAuditError, StrictModeViolation
from ..models import DataQualityCounters
from ..output import ReportWriter, render_xlsx
from ..repo_sync import RepositorySync
from .pr_enrichment import PREnricher
from .pr_fetching import fetch_merged_prs
from .resume import load_processed_urls

EXIT_STRICT_TICKETS = 10
EXIT_STRICT_SUBJECTS = 11
EXIT_STRICT_APPROVERS = 12


def check_strict(config: AuditConfig, counters: DataQualityCounters) -> None:
    """Raise StrictModeViolation if a strict flag is set and its counter is nonzero.

    Checked in priority order: tickets, subjects, approvers.
    """
    if config.strict:
        if counters.missing_tickets > 0:
            raise StrictModeViolation(
                EXIT_STRICT_TICKETS,
                f"STRICT: {counters.missing_tickets} PR(s) missing tickets")
        if counters.subject_from_title > 0:
            raise StrictModeViolation(
                EXIT_STRICT_SUBJECTS,
                f"STRICT: {counters.subject_from_title} PR(s) missing explicit commit subjects "
                f"(used PR title fallback)")
    if config.strict_approvers and counters.missing_approvers > 0:
        raise StrictModeViolation(
            EXIT_STRICT_APPROVERS,
            f"STRICT_APPROVERS: {counters.missing_approvers} PR(s) missing APPROVED reviews")


class MergeAuditor:
    """Produces merged-PR audit reports for the repositories of one organization."""

    def __init__(self, config: AuditConfig, api_client: GitHubAPIClient = None,
                 repo_sync_factory: Callable[..., RepositorySync] = RepositorySync):
        """Initialize the auditor.

        Args:
            config: Validated run configuration
            api_client: Client for the GitHub API (built from config when omitted)
            repo_sync_factory: Called as factory(org, repo, root, clone_url_template)
        """
        self.config = config
        self.api_client = api_client or GitHubAPIClient(config.token, config.api_url)
        self.repo_sync_factory = repo_sync_factory

    def _warn_if_rate_limit_low(self):
        remaining = self.api_client.rate_limit_remaining()
        if remaining is not None and remaining < LOW_RATE_LIMIT_THRESHOLD:
            logging.warning(f"GitHub API rate limit is low: {remaining} requests remaining.")

    def audit_repository(self, repo: str) -> DataQualityCounters:
        """Run the full pipeline for one repository.

        Rows are appended one at a time, so an interrupted run can resume.

        Args:
            repo: Repository name inside config.org

        Returns:
            The repository's DataQualityCounters

        Raises:
            ApiError: On a permanent or exhausted API failure
            RepositorySyncError: If the local clone cannot be updated
            StrictModeViolation: If a strict flag trips after the report is written
        """
        config = self.config
        logging.info("=" * 60)
        logging.info(f"Running audit for repo: {config.org}/{repo}")
        logging.info(f"Date window: {config.start_date} .. {config.end_date}")
        logging.info("=" * 60)

        self._warn_if_rate_limit_low()

        csv_path = config.csv_path(repo)
        writer = ReportWriter(csv_path)
        processed_urls = load_processed_urls(csv_path)
        writer.ensure_header()

        repo_sync = self.repo_sync_factory(config.org, repo, config.repo_root, config.clone_url_template)
        repo_sync.sync()

        enricher = PREnricher(
            self.api_client, config.org, repo, config.main_branch,
            config.ticket_pattern, config.ticket_url, repo_sync,
        )
        counters = DataQualityCounters()

        for record in fetch_merged_prs(self.api_client, config.org, repo, config.main_branch,
                                       config.start_date, config.end_date):
            if record.url in processed_urls:
                counters.skipped += 1
                continue

            logging.debug(f"Processing PR #{record.number} ({record.url})")
            enricher.enrich(record, counters)
            writer.append_row(record.to_row())
            processed_urls.add(record.url)
            counters.new_rows += 1

            if counters.new_rows % 25 == 0:
                logging.info(f"  Progress: {counters.new_rows} new PR(s) written")

        total_rows = writer.sort_rows()
        logging.info(f"Completed CSV: {csv_path} (rows: {total_rows}, new: {counters.new_rows}, "
                     f"skipped/resumed: {counters.skipped})")
        logging.info(f"Data quality (new PRs): {counters.summary()}")

        try:
            render_xlsx(csv_path, config.xlsx_path(repo))
        except Exception as e:
            logging.warning(f"XLSX conversion failed ({e}); keeping CSV.")

        check_strict(config, counters)
        return counters

    def run(self, repos: List[str]) -> int:
        """Audit every repository in turn.

        A fatal API or git error, or a malformed API payload, abandons that
        repository only; the others are still processed. Strict-mode
        violations propagate and stop the run.

        Returns:
            0 if every repository completed, 1 if any of them failed
        """
        failed = []
        for repo in repos:
            try:
                self.audit_repository(repo)
            except StrictModeViolation:
                raise
            except (MergeAuditError, KeyError, TypeError, ValueError) as e:
                logging.error(f"Error auditing {self.config.org}/{repo}: {e}", exc_info=True)
                failed.append(repo)

        if failed:
            logging.error(f"{len(failed)} repository/repositories failed: {', '.join(failed)}")
            return 1
        logging.info("All reports finished.")
        return 0
