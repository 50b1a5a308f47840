"""Structural validation helpers for assembled forests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from treeweave.utils.logging import get_logger

from .builder import find_cycles, trapped_indices
from .node import TreeNode

_LOGGER = get_logger(module=__name__)


@dataclass(slots=True)
class ValidationReport:
    """Structured validation output."""

    passed: bool
    violations: List[dict] = field(default_factory=list)
    statistics: dict = field(default_factory=dict)
    generated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def codes(self) -> set[str]:
        return {violation["code"] for violation in self.violations}

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "violations": list(self.violations),
            "statistics": dict(self.statistics),
            "generated_at": self.generated_at,
        }


class LinkChecker:
    """Checks that sit on individual parent/child links."""

    def check_links(self, nodes: Sequence[TreeNode]) -> List[dict]:
        violations: List[dict] = []
        for index, node in enumerate(nodes):
            parent = node.parent
            if parent is node:
                violations.append(
                    {
                        "code": "self-parent",
                        "index": index,
                        "detail": "node is its own parent",
                    }
                )
            if parent is not None and not any(child is node for child in parent.children):
                violations.append(
                    {
                        "code": "child-missing-from-parent",
                        "index": index,
                        "detail": "parent link is not mirrored in the parent's children",
                    }
                )
            seen: set[int] = set()
            for child in node.children:
                if id(child) in seen:
                    violations.append(
                        {
                            "code": "duplicate-child",
                            "index": index,
                            "detail": "the same node is listed twice among children",
                        }
                    )
                    continue
                seen.add(id(child))
                if child.parent is not node:
                    violations.append(
                        {
                            "code": "parent-link-mismatch",
                            "index": index,
                            "detail": "child does not point back at this node",
                        }
                    )
        return violations

    def check_cycles(self, nodes: Sequence[TreeNode]) -> List[dict]:
        return [
            {
                "code": "cycle-detected",
                "indices": cycle,
                "detail": f"parent links form a loop through {len(cycle)} node(s)",
            }
            for cycle in find_cycles(nodes)
        ]

    def check_reachability(self, nodes: Sequence[TreeNode]) -> List[dict]:
        return [
            {
                "code": "unreachable-node",
                "index": index,
                "detail": "node cannot be reached from any root",
            }
            for index in trapped_indices(nodes)
        ]


class ForestValidator:
    """Combines link, cycle and reachability checks into a report."""

    def __init__(self, checker: LinkChecker | None = None) -> None:
        self._checker = checker or LinkChecker()

    def run(self, nodes: Sequence[TreeNode]) -> ValidationReport:
        violations: List[dict] = []
        violations.extend(self._checker.check_links(nodes))
        violations.extend(self._checker.check_cycles(nodes))
        violations.extend(self._checker.check_reachability(nodes))

        counts: Dict[str, int] = {}
        for violation in violations:
            counts[violation["code"]] = counts.get(violation["code"], 0) + 1
        report = ValidationReport(
            passed=not violations,
            violations=violations,
            statistics={
                "node_count": len(nodes),
                "root_count": sum(1 for node in nodes if node.is_root()),
                "violation_counts": counts,
            },
        )
        _LOGGER.info(
            "Forest validation completed",
            passed=report.passed,
            violations=len(report.violations),
        )
        return report


__all__ = ["ForestValidator", "LinkChecker", "ValidationReport"]
