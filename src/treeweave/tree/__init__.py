"""Forest assembly public API."""

from __future__ import annotations

from .builder import (
    ForestAssemblyResult,
    ForestBuilder,
    NodeFactory,
    build_forest,
    find_cycles,
    trapped_indices,
)
from .node import TreeNode
from .protocols import ParentageCapable
from .validator import ForestValidator, LinkChecker, ValidationReport

__all__ = [
    "build_forest",
    "find_cycles",
    "trapped_indices",
    "ForestBuilder",
    "ForestAssemblyResult",
    "NodeFactory",
    "TreeNode",
    "ParentageCapable",
    "ForestValidator",
    "LinkChecker",
    "ValidationReport",
]
