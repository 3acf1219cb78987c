"""Exceptions that carry the process exit code for the yearfill CLI."""

from __future__ import annotations


class YearfillError(Exception):
    """Base class; `exit_code` is what the CLI returns when this escapes."""

    exit_code: int = 1


class ValidationError(YearfillError):
    """Invalid user input or configuration."""

    exit_code = 2


class RuntimeFailure(YearfillError):
    """Unexpected runtime failure."""

    exit_code = 1


class IOFailure(YearfillError):
    """Filesystem or I/O failure."""

    exit_code = 3


class PreconditionFailure(YearfillError):
    """A required external tool is missing; raised before any file is touched."""

    exit_code = 4


def exit_code_for_exception(exc: BaseException) -> int:
    """Map any exception escaping a command to a process exit code."""
    if isinstance(exc, YearfillError):
        return exc.exit_code
    if isinstance(exc, OSError):
        return IOFailure.exit_code
    return RuntimeFailure.exit_code
