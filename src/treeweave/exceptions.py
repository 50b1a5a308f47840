"""Error taxonomy shared across treeweave."""

from __future__ import annotations

from typing import List, Sequence


class TreeweaveError(Exception):
    """Base class for every error raised by treeweave itself."""


class InvalidInputError(TreeweaveError, TypeError):
    """Raised when a value does not satisfy the parentage capability contract."""


class CyclicParentageError(TreeweaveError):
    """Raised when parent links form one or more closed loops."""

    def __init__(self, cycles: Sequence[Sequence[int]], message: str | None = None) -> None:
        self.cycles: List[List[int]] = [list(cycle) for cycle in cycles]
        if message is None:
            message = f"parentage relation contains {len(self.cycles)} cycle(s): {self.cycles}"
        super().__init__(message)


__all__ = ["TreeweaveError", "InvalidInputError", "CyclicParentageError"]
