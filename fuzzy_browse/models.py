from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Literal, overload

ViewMode = Literal["workflows", "details"]


@dataclass(frozen=True)
class Workflow:
    name: str
    owner: str
    description: str = ""
    stars: int = 0
    topics: tuple[str, ...] = field(default_factory=tuple)
    url: str = ""

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.name}"


class Workflows:
    """An ordered, immutable list of workflows ranked by ``"owner name"``."""

    def __init__(self, workflows: Iterable[Workflow] = ()) -> None:
        self._workflows = tuple(workflows)

    def __len__(self) -> int:
        return len(self._workflows)

    @overload
    def __getitem__(self, index: int) -> Workflow: ...

    @overload
    def __getitem__(self, index: slice) -> Workflows: ...

    def __getitem__(self, index: int | slice) -> Workflow | Workflows:
        if isinstance(index, slice):
            return Workflows(self._workflows[index])
        return self._workflows[index]

    def __iter__(self) -> Iterator[Workflow]:
        return iter(self._workflows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workflows):
            return NotImplemented
        return self._workflows == other._workflows

    def __hash__(self) -> int:
        return hash(self._workflows)

    def __repr__(self) -> str:
        return f"Workflows({len(self._workflows)} workflows)"

    def sort_key(self, index: int) -> str:
        workflow = self._workflows[index]
        return f"{workflow.owner} {workflow.name}"

    def sorted_by_repo(self) -> Workflows:
        return Workflows(sorted(self._workflows, key=lambda workflow: workflow.repo))


@dataclass(frozen=True)
class ResultRow:
    workflow: Workflow
    score: float = 0.0
    positions: tuple[int, ...] = ()
