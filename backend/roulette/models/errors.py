"""Error types for Restaurant Roulette.

``RouletteError`` and its subclasses are raised by the services. The API layer
converts them to ``AppError`` so every failed pick cycle produces exactly one
user-visible message.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes sent to the client."""

    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"
    LOCATION_DENIED = "LOCATION_DENIED"
    SEARCH_FAILED = "SEARCH_FAILED"
    NO_RESULTS_FOUND = "NO_RESULTS_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload returned in API responses."""

    code: ErrorCode = Field(..., description="Error code")
    message: str = Field(..., description="Technical error message")
    user_message: str = Field(..., description="Message to show the user")


class RouletteError(Exception):
    """Base class for non-fatal pick cycle failures."""

    code: ErrorCode = ErrorCode.API_ERROR
    default_user_message = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or self.default_user_message

    def to_app_error(self) -> AppError:
        return AppError(code=self.code, message=self.message, user_message=self.user_message)


class LocationUnavailableError(RouletteError):
    """The location provider could not produce a position."""

    code = ErrorCode.LOCATION_UNAVAILABLE
    default_user_message = "Failed to get your location."

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        denied: bool = False,
    ) -> None:
        super().__init__(message, user_message)
        self.denied = denied
        if denied:
            self.code = ErrorCode.LOCATION_DENIED


class SearchFailedError(RouletteError):
    """The places provider errored or returned an unusable response."""

    code = ErrorCode.SEARCH_FAILED

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message, f"Failed to fetch restaurant. {message}")
        self.status = status


class NoResultsFoundError(RouletteError):
    """The first search page had no open restaurants or a non-OK status."""

    code = ErrorCode.NO_RESULTS_FOUND
    default_user_message = "No open restaurants found."
