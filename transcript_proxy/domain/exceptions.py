from __future__ import annotations


class RelayError(Exception):
    """Base for request-terminating errors that are safe to show to the client."""

    status_code: int = 400

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MalformedBodyError(RelayError):
    """Raised when the request body is not a JSON object."""

    def __init__(self, message: str = "Request body must be a JSON object"):
        super().__init__(message)


class PayloadTooLargeError(RelayError):
    status_code = 413

    def __init__(self, message: str = "Request body is too large"):
        super().__init__(message)


class MissingFieldError(RelayError):
    """Raised when a required request field is absent or empty."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidFieldError(RelayError):
    """Raised when a required field is present but unusable (e.g. an API key that
    cannot be sent as an HTTP header value). The value itself is never echoed."""

    def __init__(self, field: str):
        super().__init__(f"Invalid value for field: {field}")
        self.field = field


class TranscriptTooShortError(RelayError):
    def __init__(self, message: str = "Transcript is too short or invalid"):
        super().__init__(message)


class UpstreamUnreachableError(RelayError):
    """Raised when the upstream call could not be completed (network/transport).

    `cause` holds only the transport exception type name; transport messages can
    quote request headers and must not reach logs.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Failed to reach the language model service",
        *,
        cause: str | None = None,
    ):
        super().__init__(message)
        self.cause = cause


class UpstreamError(RelayError):
    """Raised when upstream answers with a non-success status.

    The upstream status code is surfaced to the client verbatim.
    """

    def __init__(self, message: str, *, status_code: int):
        super().__init__(message, status_code=status_code)
