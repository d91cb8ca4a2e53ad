from __future__ import annotations


class FuzzyBrowseError(Exception):
    """Base class for errors raised by fuzzy-browse."""


class ConfigurationError(FuzzyBrowseError, ValueError):
    """A score model was constructed with invalid weights."""


class KeyDerivationError(FuzzyBrowseError):
    """The sort key of a single candidate could not be produced."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"could not derive sort key for candidate {index}: {reason}")
        self.index = index
        self.reason = reason


class RankingCancelled(FuzzyBrowseError):
    """Ranking was abandoned because the caller set the cancel signal."""


class CatalogError(FuzzyBrowseError):
    """The workflow catalog could not be loaded."""
