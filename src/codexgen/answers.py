"""
AnswerSet: the accumulating, ordered result of resolving the question graph.

ARCHITECTURAL RULE:
    An AnswerSet is never mutated in place.
    Every resolution step produces a new AnswerSet, so any earlier
    snapshot can be handed to a predicate and replayed later.

Insertion order is traversal order. Re-assigning an existing id keeps the
id at its original position.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Tuple, Union


class AnswerSet(Mapping):
    """Immutable, insertion-ordered mapping of question id to accepted value."""

    __slots__ = ("_items",)

    def __init__(self, items: Union[Mapping, Iterable[Tuple[str, Any]]] = ()):
        self._items: Dict[str, Any] = dict(items)

    def __getitem__(self, question_id: str) -> Any:
        return self._items[question_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"AnswerSet({self._items!r})"

    def with_answer(self, question_id: str, value: Any) -> AnswerSet:
        """Return a new AnswerSet with one more (or one replaced) answer."""
        items = dict(self._items)
        items[question_id] = value
        return AnswerSet(items)

    def replace(self, **changes: Any) -> AnswerSet:
        items = dict(self._items)
        items.update(changes)
        return AnswerSet(items)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._items)
