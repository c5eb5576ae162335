"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Not found errors (404)
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_GROUP_NAME = "INVALID_GROUP_NAME"
    INVALID_SORT = "INVALID_SORT"
    INVALID_GROUP_ENTRY = "INVALID_GROUP_ENTRY"

    # Conflict errors (409)
    GROUP_ALREADY_EXISTS = "GROUP_ALREADY_EXISTS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SEARCH_INDEX_ERROR = "SEARCH_INDEX_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group {group_id} does not exist.",
            status_code=404,
            details={"group_id": group_id},
        )


class InvalidGroupNameError(AppException):
    """Group name is blank or exceeds the allowed length."""

    def __init__(self, max_length: int) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_GROUP_NAME,
            message=f"Group name must be between 1 and {max_length} characters",
            status_code=400,
            details={"max_length": max_length},
        )


class InvalidGroupEntryError(AppException):
    """A role or member entry exceeds the allowed length."""

    def __init__(self, field: str, max_length: int) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_GROUP_ENTRY,
            message=f"Every entry of {field} must be at most {max_length} characters",
            status_code=400,
            details={"field": field, "max_length": max_length},
        )


class InvalidSortError(AppException):
    """Sort parameter names an unknown field."""

    def __init__(self, sort: str, allowed: list[str]) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_SORT,
            message=f"Unknown sort order: {sort}",
            status_code=400,
            details={"sort": sort, "allowed": allowed},
        )


class GroupAlreadyExistsError(AppException):
    """A group with the same identifier already exists."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_ALREADY_EXISTS,
            message="A group with this name already exists.",
            status_code=409,
            details={"group_id": group_id},
        )


class SearchIndexError(AppException):
    """The search index could not answer a query.

    The message is deliberately generic; the underlying cause is chained
    and only logged server side.
    """

    def __init__(self, message: str = "The search index was not able to process the query") -> None:
        super().__init__(
            error_code=ErrorCode.SEARCH_INDEX_ERROR,
            message=message,
            status_code=500,
        )
