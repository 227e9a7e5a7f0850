from __future__ import annotations


class MatchingError(ValueError):
    """Base class for queries the matching engine refuses to run."""


class EmptyQueryError(MatchingError):
    """The query carries no usable ingredient tokens."""

    def __init__(self, message: str = "At least one ingredient is required") -> None:
        super().__init__(message)


class InvalidConstraintError(MatchingError):
    """A constraint value is structurally invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
