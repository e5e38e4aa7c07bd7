"""Bus factor exception classes."""


class BusFactorError(Exception):
    """Base exception for all bus factor errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(BusFactorError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class RemoteError(BusFactorError):
    """Base exception for failures talking to the remote API."""

    code = "REMOTE_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(type(self).code, message)


class TransientError(RemoteError):
    """Raised on server errors (5xx), timeouts and connection failures."""

    code = "TRANSIENT"


class RateLimitedError(RemoteError):
    """Raised when the remote API reports an exhausted rate limit."""

    code = "RATE_LIMITED"

    def __init__(
        self,
        message: str,
        retry_after: float,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.retry_after = retry_after


class NotFoundError(RemoteError):
    """Raised when a resource is not found."""

    code = "NOT_FOUND"


class ClientError(RemoteError):
    """Raised on 4xx responses that are not retryable."""

    code = "CLIENT_ERROR"


class MalformedResponseError(RemoteError):
    """Raised when a payload cannot be decoded into the expected shape."""

    code = "MALFORMED"


class StatsUnavailableError(BusFactorError):
    """Raised when contributor statistics stay deferred past the attempt limit."""

    def __init__(self, message: str) -> None:
        super().__init__("STATS_UNAVAILABLE", message)


class PaginationLimitError(BusFactorError):
    """Raised when a page walk runs past its page bound."""

    def __init__(self, message: str) -> None:
        super().__init__("PAGINATION_LIMIT", message)
