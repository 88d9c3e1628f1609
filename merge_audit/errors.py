"""Exception types raised while producing merge audit reports."""


class MergeAuditError(Exception):
    """Base class for all audit errors."""


class MissingPrerequisiteError(MergeAuditError):
    """A required external tool (e.g. git) is not available."""


class AuthenticationError(MergeAuditError):
    """The GitHub token is missing or was rejected."""


class InvalidInputError(MergeAuditError):
    """Bad user input: malformed dates, empty organization, bad regex."""


class ApiError(MergeAuditError):
    """Base class for GitHub API failures."""


class RateLimitedError(ApiError):
    """GitHub reported a primary or secondary rate limit."""


class TransientNetworkError(ApiError):
    """A network or gateway failure that is worth retrying."""


class PermanentApiError(ApiError):
    """A failure that retrying will not fix (404, 422, bad request...)."""


class RetriesExhaustedError(ApiError):
    """A retryable failure persisted through every attempt."""


class RepositorySyncError(MergeAuditError):
    """Cloning or fetching the local repository failed."""


class StrictModeViolation(MergeAuditError):
    """A data-quality counter is nonzero while its strict flag is set."""

    def __init__(self, exit_code: int, message: str):
        super().__init__(message)
        self.exit_code = exit_code
