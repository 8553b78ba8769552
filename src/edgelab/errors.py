"""Exception taxonomy for the analysis core."""

from __future__ import annotations


class EdgeLabError(Exception):
    """Base class for analysis errors."""


class MissingMarketError(EdgeLabError):
    """A market group has an absent, zero or invalid odd."""

    def __init__(self, group: str, reason: str) -> None:
        super().__init__(f"{group}: {reason}")
        self.group = group
        self.reason = reason


class InvalidLegSetError(EdgeLabError):
    """An accumulator request cannot be composed from the given legs."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class DegenerateProbabilityError(EdgeLabError):
    """An estimate fell outside (0, 1) before clamping."""

    def __init__(self, value: float, outcome: str = "") -> None:
        super().__init__(f"degenerate probability {value!r} for {outcome or 'outcome'}")
        self.value = value
        self.outcome = outcome
