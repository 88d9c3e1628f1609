"""
Unit tests for PullRequestRecord and DataQualityCounters
"""

import pytest
from merge_audit.models import DataQualityCounters, PullRequestRecord, REPORT_HEADER


class TestPullRequestRecord:
    """Test cases for PullRequestRecord."""

    def test_from_api(self):
        record = PullRequestRecord.from_api({
            'number': 9,
            'html_url': 'https://github.com/acme/api/pull/9',
            'merged_at': '2025-05-06T07:08:09Z',
            'user': {'login': 'dev'},
            'title': 'Add audit',
            'body': None,
            'merge_commit_sha': '',
        })

        assert record.number == 9
        assert record.author == 'dev'
        assert record.body == ''
        assert record.merge_commit_sha is None
        assert record.merged_date == '2025-05-06'

    def test_to_row_has_header_order(self):
        record = PullRequestRecord(
            number=1,
            url='https://github.com/acme/api/pull/1',
            merged_at='2025-01-01T00:00:00Z',
            author='dev',
            title='t',
            approvers={'zed', 'amy'},
            ticket_ids=['ABC-1', 'ABC-2'],
            commit_subject='subject',
        )

        row = record.to_row()

        assert len(row) == len(REPORT_HEADER)
        assert row == ['2025-01-01T00:00:00Z', 'subject', 'https://github.com/acme/api/pull/1',
                       'dev', 'amy;zed', 'ABC-1;ABC-2']


class TestDataQualityCounters:
    """Test cases for DataQualityCounters."""

    def test_initialization(self):
        counters = DataQualityCounters()
        assert counters.new_rows == 0
        assert counters.skipped == 0
        assert counters.missing_tickets == 0

    def test_summary(self):
        counters = DataQualityCounters(missing_tickets=2, missing_approvers=1, subject_from_title=3)
        assert counters.summary() == ('missing_tickets=2, missing_approvals=1, '
                                      'subject_from_title=3, non_ancestor_commits=0')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
