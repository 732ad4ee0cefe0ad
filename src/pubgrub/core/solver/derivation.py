"""Derivation graph: the arena of every incompatibility built during a solve.

Incompatibilities are stored in creation order and addressed by integer id.
Learned incompatibilities carry their two parent ids in a ``ConflictDerived``
cause, making the graph a DAG whose leaves are the external facts
(dependencies and registry gaps). The arena only grows.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator

from pubgrub.core.solver.incompatibility import (
    Cause,
    ConflictDerived,
    Incompatibility,
    normalize_terms,
)
from pubgrub.core.solver.term import Term


class DerivationGraph:
    """Append-only store of incompatibilities for one solve.

    Args:
        root: Name of the root package, used to drop redundant root terms
            from learned incompatibilities.
    """

    def __init__(self, root: str) -> None:
        self._root = root
        self._incompatibilities: list[Incompatibility] = []

    @property
    def root(self) -> str:
        return self._root

    def add(self, terms: Iterable[Term], cause: Cause) -> Incompatibility:
        """Create, store and return a new incompatibility."""
        for parent in _parent_ids(cause):
            if not 0 <= parent < len(self._incompatibilities):
                raise ValueError(f"Unknown parent incompatibility #{parent}")
        incompatibility = Incompatibility(
            id=len(self._incompatibilities),
            terms=normalize_terms(
                terms, self._root, derived=isinstance(cause, ConflictDerived)
            ),
            cause=cause,
        )
        self._incompatibilities.append(incompatibility)
        return incompatibility

    def get(self, incompatibility_id: int) -> Incompatibility:
        return self._incompatibilities[incompatibility_id]

    def parents(self, incompatibility: Incompatibility) -> tuple[Incompatibility, ...]:
        cause = incompatibility.cause
        if isinstance(cause, ConflictDerived):
            return (self.get(cause.left), self.get(cause.right))
        return ()

    def ancestors(self, incompatibility: Incompatibility) -> list[Incompatibility]:
        """Every incompatibility *incompatibility* was derived from, itself included.

        Returned in breadth-first order from *incompatibility*, each once.
        """
        seen = {incompatibility.id}
        order = [incompatibility]
        queue = deque([incompatibility])
        while queue:
            current = queue.popleft()
            for parent in self.parents(current):
                if parent.id not in seen:
                    seen.add(parent.id)
                    order.append(parent)
                    queue.append(parent)
        return order

    def external_causes(self, incompatibility: Incompatibility) -> list[Incompatibility]:
        """The leaves (non-derived incompatibilities) behind *incompatibility*."""
        leaves = [i for i in self.ancestors(incompatibility) if not i.is_derived]
        return sorted(leaves, key=lambda i: i.id)

    def derivation(self, incompatibility: Incompatibility) -> list[Incompatibility]:
        """Ancestors ordered so that every parent precedes its children.

        Ids are assigned in creation order, so sorting by id is a valid
        topological order.
        """
        return sorted(self.ancestors(incompatibility), key=lambda i: i.id)

    def __len__(self) -> int:
        return len(self._incompatibilities)

    def __iter__(self) -> Iterator[Incompatibility]:
        return iter(list(self._incompatibilities))


def _parent_ids(cause: Cause) -> tuple[int, ...]:
    if isinstance(cause, ConflictDerived):
        return (cause.left, cause.right)
    return ()
