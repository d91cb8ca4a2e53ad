"""Fuzzy subsequence matching with optimal-alignment scoring.

A query matches a key when every query character appears in the key in the
same order, ignoring case. Among all alignments of the query within the key
the one with the highest score is chosen, so repeated characters in the key
never cost a candidate its adjacency or word-boundary credit.
"""

from __future__ import annotations

from dataclasses import dataclass

from fuzzy_browse.scoring import DEFAULT_SCORE_MODEL, ScoreModel

_UNREACHABLE = float("-inf")


@dataclass(frozen=True)
class Match:
    matched: bool
    score: float = 0.0
    positions: tuple[int, ...] = ()


NO_MATCH = Match(matched=False)


def _fold(text: str) -> list[str]:
    # Fold per character so key indices stay aligned with the original text.
    return [char.lower() for char in text]


def is_subsequence(query: list[str], key: list[str]) -> bool:
    remaining = iter(key)
    return all(char in remaining for char in query)


class Matcher:
    """Evaluates a query against candidate keys under one score model."""

    def __init__(self, model: ScoreModel | None = None) -> None:
        self.model = model if model is not None else DEFAULT_SCORE_MODEL

    def evaluate(self, query: str, key: str) -> Match:
        if not query:
            return Match(matched=True)
        if not key:
            return NO_MATCH

        folded_query = _fold(query)
        folded_key = _fold(key)
        if not is_subsequence(folded_query, folded_key):
            return NO_MATCH
        return self._align(folded_query, folded_key, self._position_bonuses(key))

    def _position_bonuses(self, key: str) -> list[float]:
        """Word-boundary bonus earned by matching at each key position."""
        bonuses = [0.0] * len(key)
        for index in range(1, len(key)):
            previous = key[index - 1]
            if not previous.isalnum():
                bonuses[index] += self.model.separator_bonus
            elif previous.islower() and key[index].isupper():
                bonuses[index] += self.model.camel_bonus
        return bonuses

    def _align(self, query: list[str], key: list[str], bonuses: list[float]) -> Match:
        model = self.model
        unmatched = model.unmatched_letter_penalty
        adjacency = model.adjacency_bonus
        query_length = len(query)
        key_length = len(key)

        # free[i][j]: best score for query[i:] within key[j:].
        # follow[i][j]: the same, when query[i - 1] was matched at key[j - 1].
        free = [[_UNREACHABLE] * (key_length + 1) for _ in range(query_length + 1)]
        follow = [[_UNREACHABLE] * (key_length + 1) for _ in range(query_length + 1)]
        for position in range(key_length + 1):
            trailing = unmatched * (key_length - position)
            free[query_length][position] = trailing
            follow[query_length][position] = trailing

        for query_index in range(query_length - 1, 0, -1):
            char = query[query_index]
            free_row = free[query_index]
            follow_row = follow[query_index]
            next_follow = follow[query_index + 1]
            for position in range(key_length - 1, -1, -1):
                skip = free_row[position + 1] + unmatched
                rest = next_follow[position + 1]
                if key[position] == char and rest != _UNREACHABLE:
                    take = bonuses[position] + rest
                    free_row[position] = max(take, skip)
                    follow_row[position] = max(take + adjacency, skip)
                else:
                    free_row[position] = skip
                    follow_row[position] = skip

        # The first query character also pays for everything skipped before it.
        best_score = _UNREACHABLE
        best_start = -1
        first = query[0]
        after_first = follow[1]
        for position, char in enumerate(key):
            if char != first or after_first[position + 1] == _UNREACHABLE:
                continue
            score = (
                model.leading_penalty(position)
                + unmatched * position
                + bonuses[position]
                + after_first[position + 1]
            )
            if score > best_score:
                best_score = score
                best_start = position

        if best_start < 0:
            return NO_MATCH

        positions = self._trace(query, key, bonuses, free, follow, best_start)
        return Match(matched=True, score=best_score, positions=positions)

    def _trace(
        self,
        query: list[str],
        key: list[str],
        bonuses: list[float],
        free: list[list[float]],
        follow: list[list[float]],
        start: int,
    ) -> tuple[int, ...]:
        unmatched = self.model.unmatched_letter_penalty
        adjacency = self.model.adjacency_bonus
        positions = [start]
        query_index = 1
        position = start + 1
        adjacent = True
        while query_index < len(query):
            rest = follow[query_index + 1][position + 1]
            if key[position] == query[query_index] and rest != _UNREACHABLE:
                take = bonuses[position] + rest
                if adjacent:
                    take += adjacency
                skip = free[query_index][position + 1] + unmatched
                if take >= skip:
                    positions.append(position)
                    query_index += 1
                    position += 1
                    adjacent = True
                    continue
            position += 1
            adjacent = False
        return tuple(positions)


def fuzzy_score(
    query: str, candidate: str, model: ScoreModel | None = None
) -> float | None:
    """Score a candidate using subsequence matching; higher scores are better."""
    result = Matcher(model).evaluate(query, candidate)
    return result.score if result.matched else None
