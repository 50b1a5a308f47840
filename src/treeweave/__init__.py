"""Rebuild forests from flat collections of objects that know their parents."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("treeweave")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .exceptions import CyclicParentageError, InvalidInputError, TreeweaveError
from .records import Record, load_records
from .tree import (
    ForestAssemblyResult,
    ForestBuilder,
    ForestValidator,
    ParentageCapable,
    TreeNode,
    ValidationReport,
    build_forest,
)

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "TreeNode",
    "ParentageCapable",
    "build_forest",
    "ForestBuilder",
    "ForestAssemblyResult",
    "ForestValidator",
    "ValidationReport",
    "Record",
    "load_records",
    "TreeweaveError",
    "InvalidInputError",
    "CyclicParentageError",
]
