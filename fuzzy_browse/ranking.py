from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from fuzzy_browse.exceptions import KeyDerivationError, RankingCancelled
from fuzzy_browse.search import Matcher

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Sortable(Protocol[T_co]):
    """A collection whose elements can be fuzzy-ranked by a derived key."""

    def __len__(self) -> int: ...

    def __getitem__(self, index: int) -> T_co: ...

    def sort_key(self, index: int) -> str: ...


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class KeyedCollection(Generic[T]):
    """Adapts any sequence plus a key function to the ``Sortable`` protocol."""

    def __init__(self, items: Sequence[T], key: Callable[[T], str] = str) -> None:
        self._items = items
        self._key = key

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def sort_key(self, index: int) -> str:
        return self._key(self._items[index])


@dataclass(frozen=True)
class MatchResult:
    index: int
    score: float
    match: bool
    positions: tuple[int, ...] = ()
    error: KeyDerivationError | None = None


def _evaluate_candidate(
    matcher: Matcher, query: str, collection: Sortable[object], index: int
) -> MatchResult:
    try:
        key = collection.sort_key(index)
    except Exception as exc:
        error = KeyDerivationError(index, str(exc) or type(exc).__name__)
        error.__cause__ = exc
        logger.warning("%s", error)
        return MatchResult(index=index, score=0.0, match=False, error=error)

    result = matcher.evaluate(query, key)
    if not result.matched:
        return MatchResult(index=index, score=0.0, match=False)
    return MatchResult(
        index=index,
        score=result.score,
        match=True,
        positions=result.positions,
    )


def _rank_range(
    matcher: Matcher,
    query: str,
    collection: Sortable[object],
    results: list[MatchResult | None],
    start: int,
    stop: int,
    cancel: CancelSignal | None,
) -> None:
    for index in range(start, stop):
        if cancel is not None and cancel.is_set():
            raise RankingCancelled(f"ranking for {query!r} was cancelled")
        results[index] = _evaluate_candidate(matcher, query, collection, index)


def _chunk_bounds(total: int, chunks: int) -> list[tuple[int, int]]:
    size, remainder = divmod(total, chunks)
    bounds: list[tuple[int, int]] = []
    start = 0
    for chunk in range(chunks):
        stop = start + size + (1 if chunk < remainder else 0)
        if stop > start:
            bounds.append((start, stop))
        start = stop
    return bounds


def rank(
    query: str,
    collection: Sortable[object],
    *,
    matcher: Matcher | None = None,
    workers: int = 1,
    cancel: CancelSignal | None = None,
) -> list[MatchResult]:
    """Evaluate ``query`` against every candidate, in collection order.

    The returned list always has one result per candidate, and
    ``results[i].index == i``. With ``workers > 1`` candidates are split into
    contiguous index ranges evaluated on a thread pool; ``workers=0`` uses one
    worker per CPU. The output never depends on the number of workers.

    Raises:
        RankingCancelled: ``cancel`` was set before every candidate was ranked.
    """
    matcher = matcher if matcher is not None else Matcher()
    total = len(collection)
    if workers <= 0:
        workers = os.cpu_count() or 1
    workers = max(1, min(workers, total))

    start = time.perf_counter()
    results: list[MatchResult | None] = [None] * total
    if workers == 1:
        _rank_range(matcher, query, collection, results, 0, total, cancel)
    else:
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="fuzzy-rank"
        ) as executor:
            futures = [
                executor.submit(
                    _rank_range, matcher, query, collection, results, lo, hi, cancel
                )
                for lo, hi in _chunk_bounds(total, workers)
            ]
            for future in futures:
                future.result()

    logger.debug(
        "ranked %d candidates for %r in %.2f ms (workers=%d)",
        total,
        query,
        (time.perf_counter() - start) * 1000,
        workers,
    )
    return [result for result in results if result is not None]


def select_results(
    ranking: Sequence[MatchResult], max_results: int = 0
) -> list[MatchResult]:
    """Matching results ordered best-first; ties keep collection order."""
    hits = sorted(
        (result for result in ranking if result.match),
        key=lambda result: -result.score,
    )
    if max_results > 0:
        del hits[max_results:]
    return hits


def select(
    collection: Sortable[T], ranking: Sequence[MatchResult], max_results: int = 0
) -> list[T]:
    """Return a new list of matching candidates, best match first.

    ``max_results <= 0`` means unbounded.
    """
    return [collection[result.index] for result in select_results(ranking, max_results)]


def fuzzy_filter(
    query: str,
    collection: Sortable[T],
    *,
    max_results: int = 0,
    matcher: Matcher | None = None,
    workers: int = 1,
    cancel: CancelSignal | None = None,
) -> list[tuple[T, MatchResult]]:
    ranking = rank(query, collection, matcher=matcher, workers=workers, cancel=cancel)
    return [
        (collection[result.index], result)
        for result in select_results(ranking, max_results)
    ]
