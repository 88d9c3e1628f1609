"""Audit pipeline stages: fetch, resume filter, enrich, report."""

from .core import MergeAuditor, check_strict
from .pr_enrichment import PREnricher
from .pr_fetching import fetch_merged_prs
from .resume import load_processed_urls

__all__ = [
    'MergeAuditor',
    'check_strict',
    'PREnricher',
    'fetch_merged_prs',
    'load_processed_urls',
]
