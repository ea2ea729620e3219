"""Descending top-N selection over node metric vectors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

log = logging.getLogger(__name__)

TValue = TypeVar("TValue", int, float)


@dataclass(frozen=True)
class RankedNode(Generic[TValue]):
    """A node id paired with its metric value."""

    node: int
    value: TValue

    def as_tuple(self) -> tuple[int, TValue]:
        """
        Return the pair as a plain tuple.

        Returns
        -------
        tuple[int, TValue]
            ``(node, value)``.
        """
        return self.node, self.value


def top_n(
    values: Mapping[int, TValue], n: int
) -> list[RankedNode[TValue]]:
    """
    Return the `n` highest-valued nodes.

    Ties are broken by ascending node id so results are reproducible. A request
    larger than the population returns every node; a negative request is
    rejected with a warning and treated as zero.

    Parameters
    ----------
    values : Mapping[int, TValue]
        Node id to metric value.
    n : int
        Number of entries requested.

    Returns
    -------
    list[RankedNode[TValue]]
        Entries sorted by value descending.
    """
    if n < 0:
        log.warning("Ignoring negative top-N request n=%d; returning no nodes", n)
        return []
    ordered = sorted(values.items(), key=lambda item: (-item[1], item[0]))
    return [RankedNode(node=node, value=value) for node, value in ordered[:n]]


__all__ = ["RankedNode", "top_n"]
