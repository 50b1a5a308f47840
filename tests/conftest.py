"""Shared fixtures for the treeweave test suite."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

import pytest
from loguru import logger

from treeweave.exceptions import InvalidInputError


@dataclass(eq=False)
class TreeObjectStub:
    """Domain object naming its parent by id."""

    id: int
    parent_id: int | None

    def is_parent_of(self, other: Any) -> bool:
        if not isinstance(other, TreeObjectStub):
            raise InvalidInputError(f"cannot compare with {type(other).__name__}")
        return other.parent_id == self.id


@dataclass(eq=False)
class ClaimStub:
    """Domain object listing the names of the objects it claims as children."""

    name: str
    claims: frozenset[str] = frozenset()

    def is_parent_of(self, other: Any) -> bool:
        return other.name in self.claims


def claim(name: str, *children: str) -> ClaimStub:
    return ClaimStub(name, frozenset(children))


@pytest.fixture()
def tree_objects() -> List[TreeObjectStub]:
    """Two roots: a three-level tree under 1 and an orphan 7 whose parent 44 is absent."""

    return [
        TreeObjectStub(1, None),
        TreeObjectStub(2, 1),
        TreeObjectStub(3, 1),
        TreeObjectStub(4, 2),
        TreeObjectStub(5, 2),
        TreeObjectStub(6, 3),
        TreeObjectStub(7, 44),
    ]


@pytest.fixture(autouse=True)
def _reset_log_sinks():
    """Drop sinks the CLI attaches to streams that the runner closes afterwards."""

    yield
    logger.remove()
