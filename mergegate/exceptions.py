"""mergegate exception classes."""



class MergeGateError(Exception):
    """Base exception for all mergegate errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MergeGateError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(MergeGateError):
    """Raised when the API token is missing, invalid or expired."""

    pass


class AuthorizationError(MergeGateError):
    """Raised when access is denied."""

    pass


class NotFoundError(MergeGateError):
    """Raised when a resource is not found."""

    pass


class ConflictError(MergeGateError):
    """Raised on conflicts (head moved, merge conflicts, etc.)."""

    pass


class RateLimitedError(MergeGateError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(MergeGateError):
    """Raised on validation errors, including malformed API responses."""

    pass


class ServerError(MergeGateError):
    """Raised on server errors (5xx) and exhausted network retries."""

    pass


class RequestTimeoutError(ServerError):
    """Raised when a request keeps timing out after all retries."""

    def __init__(self, message: str, request_id: str | None = None) -> None:
        super().__init__("TIMEOUT", message, request_id)


class RebaseError(MergeGateError):
    """Raised when updating a pull request branch fails for a reason other than conflicts."""

    def __init__(self, message: str) -> None:
        super().__init__("REBASE_FAILED", message)
