from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any

from fuzzy_browse.exceptions import ConfigurationError


@dataclass(frozen=True)
class ScoreModel:
    """Weights controlling the bonuses and penalties of a fuzzy match.

    Bonuses are added for every matched character that qualifies, penalties
    are negative numbers added for unmatched characters. The leading-letter
    penalty accumulates per character before the first match and is floored
    at ``max_leading_letter_penalty``.
    """

    adjacency_bonus: float = 5.0
    camel_bonus: float = 10.0
    separator_bonus: float = 20.0
    leading_letter_penalty: float = -3.0
    max_leading_letter_penalty: float = -9.0
    unmatched_letter_penalty: float = -1.0

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"{field.name} must be a number, got {value!r}"
                )
            if not math.isfinite(value):
                raise ConfigurationError(f"{field.name} must be finite, got {value}")
            object.__setattr__(self, field.name, float(value))

        if self.max_leading_letter_penalty > self.leading_letter_penalty:
            raise ConfigurationError(
                "max_leading_letter_penalty "
                f"({self.max_leading_letter_penalty}) must not be weaker than "
                f"leading_letter_penalty ({self.leading_letter_penalty})"
            )

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        return tuple(field.name for field in fields(cls))

    @classmethod
    def from_options(cls, **options: Any) -> ScoreModel:
        """Build a model from named options, keeping defaults for ``None``."""
        known = set(cls.option_names())
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"unknown score option(s): {', '.join(unknown)}")
        return cls(**{name: value for name, value in options.items() if value is not None})

    def leading_penalty(self, count: int) -> float:
        if count <= 0:
            return 0.0
        return max(self.leading_letter_penalty * count, self.max_leading_letter_penalty)


DEFAULT_SCORE_MODEL = ScoreModel()
