"""
Unit tests for the retry policy and error classification
"""

import pytest
from unittest.mock import Mock

from merge_audit.errors import (
    ApiError,
    PermanentApiError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientNetworkError,
)
from merge_audit.retry import (
    PERMANENT,
    RATE_LIMITED,
    TRANSIENT,
    RetryPolicy,
    classify_error,
    error_from_text,
)


class TestClassifyError:
    """Test cases for mapping error text to a retry decision."""

    @pytest.mark.parametrize('text', [
        'HTTP 403 Forbidden: API rate limit exceeded for user ID 1.',
        'You have exceeded a secondary rate limit',
        'abuse detection mechanism triggered',
        'HTTP 429 Too Many Requests: ',
    ])
    def test_rate_limit_phrases(self, text):
        assert classify_error(text) == RATE_LIMITED

    @pytest.mark.parametrize('text', [
        'ConnectionError: Connection reset by peer',
        'connection refused',
        'ReadTimeout: read timed out',
        'HTTP 502 Bad Gateway: ',
        'HTTP 503 Service Unavailable: ',
        'net/http: TLS handshake timeout',
        'unexpected EOF',
        'write: broken pipe',
    ])
    def test_network_phrases(self, text):
        assert classify_error(text) == TRANSIENT

    def test_anything_else_is_permanent(self):
        assert classify_error('HTTP 404 Not Found: Not Found') == PERMANENT
        assert classify_error('') == PERMANENT

    def test_error_from_text_picks_subclass(self):
        assert isinstance(error_from_text('rate limit'), RateLimitedError)
        assert isinstance(error_from_text('Bad Gateway'), TransientNetworkError)
        assert isinstance(error_from_text('HTTP 422'), PermanentApiError)


class TestRetryPolicy:
    """Test cases for RetryPolicy.call with a fake clock."""

    @pytest.fixture
    def sleeps(self):
        return []

    @pytest.fixture
    def policy(self, sleeps):
        return RetryPolicy(sleep=sleeps.append)

    def test_immediate_success(self, policy, sleeps):
        assert policy.call(lambda: {'ok': True}) == {'ok': True}
        assert sleeps == []

    def test_succeeds_after_two_rate_limits(self, policy, sleeps):
        """Two rate-limit failures then success look like a plain success."""
        operation = Mock(side_effect=[
            RateLimitedError('API rate limit exceeded'),
            RateLimitedError('API rate limit exceeded'),
            [{'number': 1}],
        ])

        result = policy.call(operation, 'GET /pulls')

        assert result == [{'number': 1}]
        assert operation.call_count == 3
        assert sleeps == [5, 10]

    def test_transient_errors_are_retried(self, policy, sleeps):
        operation = Mock(side_effect=[TransientNetworkError('connection reset'), 'done'])
        assert policy.call(operation) == 'done'
        assert sleeps == [5]

    def test_classification_uses_text_not_type(self, policy, sleeps):
        operation = Mock(side_effect=[ApiError('HTTP 503 Service Unavailable'), 'done'])
        assert policy.call(operation) == 'done'
        assert sleeps == [5]

    def test_permanent_error_fails_immediately(self, policy, sleeps):
        operation = Mock(side_effect=PermanentApiError('HTTP 404 Not Found: Not Found'))

        with pytest.raises(PermanentApiError, match='404'):
            policy.call(operation)

        assert operation.call_count == 1
        assert sleeps == []

    def test_exhausted_after_max_attempts(self, policy, sleeps):
        operation = Mock(side_effect=RateLimitedError('rate limit'))

        with pytest.raises(RetriesExhaustedError):
            policy.call(operation)

        assert operation.call_count == 5
        assert sleeps == [5, 10, 20, 40]

    def test_custom_attempts_and_delay(self, sleeps):
        policy = RetryPolicy(max_attempts=3, base_delay=1, sleep=sleeps.append)
        operation = Mock(side_effect=TransientNetworkError('timeout'))

        with pytest.raises(RetriesExhaustedError):
            policy.call(operation)

        assert operation.call_count == 3
        assert sleeps == [1, 2]

    def test_non_api_errors_propagate(self, policy, sleeps):
        operation = Mock(side_effect=KeyError('merged_at'))

        with pytest.raises(KeyError):
            policy.call(operation)

        assert sleeps == []


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
