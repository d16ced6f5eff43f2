"""Errors raised by the optimization engine."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Input rejected before any computation starts.

    Subclasses ``ValueError`` so API handlers can keep mapping value errors to
    HTTP 400 responses.
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def to_dict(self) -> dict:
        return {"error": "invalid_input", "field": self.field, "reason": self.reason}
