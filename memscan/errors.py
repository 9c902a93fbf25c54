"""Errors raised while inspecting other processes."""

from __future__ import annotations

import errno as errno_codes
import os


class AppError(Exception):
    """Base class for every error the scanner reports."""

    @classmethod
    def from_errno(cls, errno: int) -> "AppError":
        """Build the error that matches an operating-system error number."""
        if errno == errno_codes.EPERM:
            return PermissionDeniedError()
        if errno == errno_codes.ESRCH:
            return ProcessNotFoundError()
        return ErrnoError(errno)


class PermissionDeniedError(AppError):
    """The target process may not be read."""

    def __init__(self) -> None:
        super().__init__("Permission Denied")


class ProcessNotFoundError(AppError):
    """The target process does not exist."""

    def __init__(self) -> None:
        super().__init__("Process Not Found")


class DataTypeParseError(AppError):
    """A value could not be parsed or decoded as the requested data type."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ErrnoError(AppError):
    """Any other operating-system error."""

    def __init__(self, errno: int) -> None:
        name = errno_codes.errorcode.get(errno, "UNKNOWN")
        super().__init__(f"{name}: {os.strerror(errno)}")
        self.errno = errno