from __future__ import annotations

from fuzzy_browse.exceptions import (
    ConfigurationError,
    KeyDerivationError,
    RankingCancelled,
)
from fuzzy_browse.ranking import (
    KeyedCollection,
    MatchResult,
    Sortable,
    fuzzy_filter,
    rank,
    select,
    select_results,
)
from fuzzy_browse.scoring import DEFAULT_SCORE_MODEL, ScoreModel
from fuzzy_browse.search import Match, Matcher, fuzzy_score

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SCORE_MODEL",
    "ConfigurationError",
    "KeyDerivationError",
    "KeyedCollection",
    "Match",
    "MatchResult",
    "Matcher",
    "RankingCancelled",
    "ScoreModel",
    "Sortable",
    "__version__",
    "fuzzy_filter",
    "fuzzy_score",
    "rank",
    "select",
    "select_results",
]
