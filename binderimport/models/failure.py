"""
Failure classification for the import pipeline.

Data problems inside an upload (bad rows, unknown card names) are never
raised: parsers report them as ParseError records and the preview marks
unresolved rows. Exceptions are reserved for failures of the pipeline
itself:

- ImportApiError: the binder API answered with an error or was unreachable
- UnsupportedUrlError: a deck URL no importer recognizes
- InvalidOverrideError: a manual card selection on a row that cannot take one
- ImportSessionBusyError / ImportStateError: session misuse

All of them derive from KnownError, which carries a FailureKind so callers
can react to the class of failure without matching on messages.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    UNSUPPORTED_SOURCE = "unsupported_source"

    # Resource failures
    NOT_FOUND = "not_found"

    # Session misuse
    SESSION_BUSY = "session_busy"
    INVALID_STATE = "invalid_state"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    # Unknown
    UNKNOWN = "unknown"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)


class ImportApiError(KnownError):
    """
    The binder API rejected a request or could not be reached.

    status_code mirrors the HTTP status; transport failures use 503.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        detail: str | None = None,
    ):
        if status_code == 404:
            kind = FailureKind.NOT_FOUND
        elif status_code >= 500:
            kind = FailureKind.SERVICE_UNAVAILABLE
        elif status_code >= 400:
            kind = FailureKind.INVALID_INPUT
        else:
            kind = FailureKind.EXTERNAL_API_ERROR
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion="Check the import data and try again." if status_code < 500 else None,
            status_code=status_code,
        )


class UnsupportedUrlError(KnownError):
    """Raised when a deck URL does not belong to a supported site."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            kind=FailureKind.UNSUPPORTED_SOURCE,
            message="Unsupported URL. Supported sites: Archidekt, Moxfield, MTGGoldfish",
            detail=url[:200],
            suggestion="Paste the deck list as text instead.",
        )


class InvalidOverrideError(KnownError):
    """Raised when a manual printing selection targets an ineligible row."""

    def __init__(self, row_index: int, reason: str):
        self.row_index = row_index
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Cannot override row {row_index}: {reason}",
        )


class ImportSessionBusyError(KnownError):
    """
    Raised when a session operation starts while another is still running.

    A session runs exactly one pipeline step at a time; the caller must wait
    for the in-flight step to settle.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            kind=FailureKind.SESSION_BUSY,
            message=f"Cannot {operation} while another import step is in progress.",
            status_code=409,
        )


class ImportStateError(KnownError):
    """Raised when a session step runs before its prerequisites."""

    def __init__(self, message: str):
        super().__init__(kind=FailureKind.INVALID_STATE, message=message, status_code=409)
