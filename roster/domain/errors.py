"""Typed failures raised by the data layer."""

from __future__ import annotations


class RosterError(Exception):
    """Base class for every failure the API turns into an error response."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(RosterError):
    """The caller supplied malformed or incomplete input."""


class NotFoundError(RosterError):
    """The operation targeted an id that does not exist."""


class StoreError(RosterError):
    """The storage engine reported a failure."""
