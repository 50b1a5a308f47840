"""Parentage capability contract for objects organised into forests."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ParentageCapable(Protocol):
    """An object that can tell whether it is the immediate parent of another.

    ``is_parent_of`` must be total, deterministic and free of side effects. It
    should return ``True`` only for the one-level parent relation; objects are
    expected not to be their own parent, although nothing enforces this.
    Implementations handed a value of an incompatible shape should raise
    :class:`treeweave.exceptions.InvalidInputError`.
    """

    def is_parent_of(self, other: Any) -> bool:
        ...


__all__ = ["ParentageCapable"]
