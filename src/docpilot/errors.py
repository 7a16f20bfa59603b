from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    PAGE_NOT_INDEXED = "PAGE_NOT_INDEXED"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    URL_NOT_ALLOWED = "URL_NOT_ALLOWED"
    PROVIDER_FAILED = "PROVIDER_FAILED"
    ITERATION_CAP_REACHED = "ITERATION_CAP_REACHED"


class DocPilotError(Exception):
    """Raised for all expected failure conditions.

    Tool handlers raise it for bad arguments and failed fetches; the tool
    executor turns it into an ``{"error": message}`` result for the model.
    Provider failures raised while streaming abort the chat loop instead.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
