#!/usr/bin/env python3
"""
GitHub Merged PR Audit
Generates CSV/XLSX compliance reports of merged pull requests.
"""

from merge_audit.cli import main


if __name__ == "__main__":
    main()
