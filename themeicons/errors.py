"""Error codes and error handling utilities for icon theme lookups."""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for icon theme operations."""

    # File system errors
    PATH_NOT_FOUND = auto()
    PATH_ACCESS_DENIED = auto()
    PATH_UNREADABLE = auto()

    # Descriptor errors
    DESCRIPTOR_PARSE_FAILED = auto()
    DESCRIPTOR_MISSING_FIELD = auto()
    DESCRIPTOR_INVALID_VALUE = auto()

    # Lookup errors
    ICON_NOT_FOUND = auto()
    NO_MATCHING_DIRECTORY = auto()

    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.PATH_NOT_FOUND: "The path does not exist.",
    ErrorCode.PATH_ACCESS_DENIED: "Access denied while reading the path.",
    ErrorCode.PATH_UNREADABLE: "The path could not be read.",

    ErrorCode.DESCRIPTOR_PARSE_FAILED: "The theme descriptor is malformed.",
    ErrorCode.DESCRIPTOR_MISSING_FIELD: "A required theme descriptor field is missing.",
    ErrorCode.DESCRIPTOR_INVALID_VALUE: "A theme descriptor field has an invalid value.",

    ErrorCode.ICON_NOT_FOUND: "No icon matched the search.",
    ErrorCode.NO_MATCHING_DIRECTORY: "No theme directory matches the requested size and context.",

    ErrorCode.OPERATION_FAILED: "The operation failed.",
}


@dataclass
class IconThemeError(Exception):
    """Base exception carrying an error code and lookup context."""

    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    code: ErrorCode = ErrorCode.OPERATION_FAILED

    def __post_init__(self) -> None:
        if self.path is not None and not isinstance(self.path, Path):
            self.path = Path(self.path)
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f" [{self.path}]")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f" ({details_str})")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
        }


@dataclass
class ThemeValidationError(IconThemeError, ValueError):
    """Raised when a theme or directory descriptor is missing required data."""

    code: ErrorCode = ErrorCode.DESCRIPTOR_MISSING_FIELD


@dataclass
class DescriptorParseError(IconThemeError):
    """Raised when descriptor text cannot be parsed."""

    code: ErrorCode = ErrorCode.DESCRIPTOR_PARSE_FAILED


@dataclass
class IconNotFoundError(IconThemeError, LookupError):
    """Raised when no icon file matches the search."""

    code: ErrorCode = ErrorCode.ICON_NOT_FOUND


@dataclass
class NoMatchingDirectoryError(IconNotFoundError):
    """Raised when no theme directory satisfies the size/context filter."""

    code: ErrorCode = ErrorCode.NO_MATCHING_DIRECTORY


@dataclass
class ThemeIOError(IconThemeError):
    """Raised when a theme path cannot be listed or read."""

    code: ErrorCode = ErrorCode.PATH_UNREADABLE


def classify_exception(exc: Exception, path: Path | str | None = None) -> IconThemeError:
    """Classify a generic exception into an IconThemeError with appropriate code."""
    if isinstance(exc, IconThemeError):
        return exc
    details = {"original": f"{type(exc).__name__}: {exc}"}
    if isinstance(exc, FileNotFoundError) or getattr(exc, "errno", None) == errno.ENOENT:
        return ThemeIOError(path=path, details=details, code=ErrorCode.PATH_NOT_FOUND)
    if isinstance(exc, PermissionError):
        return ThemeIOError(path=path, details=details, code=ErrorCode.PATH_ACCESS_DENIED)
    if isinstance(exc, (OSError, UnicodeDecodeError)):
        return ThemeIOError(path=path, details=details)
    return IconThemeError(
        message=f"{type(exc).__name__}: {exc}",
        path=path,
        details=details,
    )
