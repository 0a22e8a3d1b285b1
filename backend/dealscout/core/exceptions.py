"""Custom exception classes and error rendering for the tool layer."""

import json
from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories reported back to the calling agent."""

    INPUT_MISSING = "input_missing"
    PARSE_FAILURE = "parse_failure"
    UNKNOWN_RETAILER = "unknown_retailer"
    PARTIAL_WRITE_FAILURE = "partial_write_failure"
    FETCH_FAILURE = "fetch_failure"
    UNKNOWN_FUNCTION = "unknown_function"
    UNHANDLED = "unhandled"


class DealScoutException(Exception):
    """Base exception for all DealScout errors."""

    kind: ErrorKind = ErrorKind.UNHANDLED

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class InputMissingError(DealScoutException):
    """Raised when a required tool parameter is absent."""

    kind = ErrorKind.INPUT_MISSING

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} parameter is required")


class ParseFailureError(DealScoutException):
    """Raised when content is not the JSON (or markup) a tool expected."""

    kind = ErrorKind.PARSE_FAILURE


class FetchError(DealScoutException):
    """Raised when a page or feed could not be fetched."""

    kind = ErrorKind.FETCH_FAILURE

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to fetch {url}: {message}")


def error_response(message: str, kind: ErrorKind = ErrorKind.UNHANDLED) -> str:
    """Render a failed tool result as the JSON body the agent expects."""
    return json.dumps({"success": False, "error": message, "errorKind": str(kind)})
