"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    code = "app_error"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "invalid_input"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class NotAuthenticated(AppError):
    """Raised when an operation is attempted without an identity."""

    code = "not_authenticated"

    def __init__(self, message="User not authenticated."):
        """Initialize the error."""
        super().__init__(message, 401)


class AccessDenied(AppError):
    """Raised when an identity may not read or change a resource."""

    code = "access_denied"

    def __init__(self, message="Access denied."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "not_found"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class AlreadyMember(AppError):
    """Raised when joining a group the user already belongs to."""

    code = "already_member"

    def __init__(self, message="Already a member of this group."):
        """Initialize the error."""
        super().__init__(message, 409)


class RemoteFailure(AppError):
    """Raised when the document store or the network fails.

    The upstream message is kept as-is so callers can surface it.
    """

    code = "remote_failure"

    def __init__(self, message="Remote service failure."):
        """Initialize the error."""
        super().__init__(message, 502)


class ExhaustedRetries(AppError):
    """Raised when no unused group code was found within the attempt cap."""

    code = "exhausted_retries"

    def __init__(self, message="Could not allocate a unique group code."):
        """Initialize the error."""
        super().__init__(message, 503)


ERROR_STATUS_CODES = {
    error_class.code: error_class().status_code
    for error_class in (
        ValidationError,
        NotAuthenticated,
        AccessDenied,
        NotFoundError,
        AlreadyMember,
        RemoteFailure,
        ExhaustedRetries,
    )
}
