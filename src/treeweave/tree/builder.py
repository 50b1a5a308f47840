"""Forest assembly from objects that can tell whether they are the parent of another."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from treeweave.config.policies import ForestAssemblyPolicy
from treeweave.exceptions import CyclicParentageError, InvalidInputError
from treeweave.utils.logging import get_logger, log_timing

from .node import TreeNode

_LOGGER = get_logger(module=__name__)

NodeFactory = Callable[[Any], TreeNode]


def _wrap(objects: Iterable[Any], node_factory: NodeFactory) -> List[TreeNode]:
    return [node_factory(obj) for obj in objects]


def _link(
    nodes: Sequence[TreeNode],
    *,
    track_ambiguity: bool = False,
) -> Dict[int, List[int]]:
    """Attach every node to the first node claiming to be its parent.

    Returns, when ``track_ambiguity`` is set, the candidate indices for every
    node that more than one node claimed.
    """

    ambiguous: Dict[int, List[int]] = {}
    for child_index, node in enumerate(nodes):
        payload = node.payload
        matches: List[int] = []
        for parent_index, candidate in enumerate(nodes):
            if not candidate.payload.is_parent_of(payload):
                continue
            if not matches:
                node.set_parent(candidate)
                candidate.add_child(node)
            matches.append(parent_index)
            if not track_ambiguity:
                break
        if len(matches) > 1:
            ambiguous[child_index] = matches
    return ambiguous


def _roots(nodes: Sequence[TreeNode]) -> List[TreeNode]:
    return [node for node in nodes if node.is_root()]


def build_forest(
    objects: Iterable[Any],
    *,
    node_factory: NodeFactory = TreeNode,
) -> List[TreeNode]:
    """Build a forest and return its roots in input order.

    Every object is wrapped by ``node_factory``. Each node is then attached to
    the first node, in input order, whose payload reports
    ``is_parent_of(child_payload)``. Objects whose parent is absent become
    roots. Nodes caught in a parentage cycle never lose their parent link and
    are therefore missing from the returned roots.

    Errors raised by ``is_parent_of`` propagate unchanged.
    """

    nodes = _wrap(objects, node_factory)
    _link(nodes)
    return _roots(nodes)


def find_cycles(nodes: Sequence[TreeNode]) -> List[List[int]]:
    """Return every parent-link cycle as a list of node indices.

    Each cycle is listed once, starting from its lowest index and following
    parent links upwards.
    """

    index_of = {id(node): index for index, node in enumerate(nodes)}
    parent_index: List[Optional[int]] = []
    for node in nodes:
        parent = node.parent
        parent_index.append(None if parent is None else index_of.get(id(parent)))

    state = [0] * len(nodes)  # 0 unvisited, 1 on current walk, 2 settled
    cycles: List[List[int]] = []
    for start in range(len(nodes)):
        if state[start]:
            continue
        walk: List[int] = []
        cursor: Optional[int] = start
        while cursor is not None and state[cursor] == 0:
            state[cursor] = 1
            walk.append(cursor)
            cursor = parent_index[cursor]
        if cursor is not None and state[cursor] == 1:
            loop = walk[walk.index(cursor) :]
            pivot = loop.index(min(loop))
            cycles.append(loop[pivot:] + loop[:pivot])
        for index in walk:
            state[index] = 2
    cycles.sort(key=lambda cycle: cycle[0])
    return cycles


def trapped_indices(nodes: Sequence[TreeNode]) -> List[int]:
    """Indices of nodes that cannot reach a root by following parent links."""

    index_of = {id(node): index for index, node in enumerate(nodes)}
    reachable = [False] * len(nodes)
    for index, node in enumerate(nodes):
        if node.is_root():
            reachable[index] = True
    changed = True
    while changed:
        changed = False
        for index, node in enumerate(nodes):
            if reachable[index]:
                continue
            parent_index = index_of.get(id(node.parent))
            if parent_index is not None and reachable[parent_index]:
                reachable[index] = True
                changed = True
    return [index for index, ok in enumerate(reachable) if not ok]


@dataclass(slots=True)
class ForestAssemblyResult:
    """Materialised output of :class:`ForestBuilder`."""

    roots: List[TreeNode]
    nodes: List[TreeNode]
    cycles: List[List[int]] = field(default_factory=list)
    ambiguous: Dict[int, List[int]] = field(default_factory=dict)

    def index_of(self, node: TreeNode) -> int:
        for index, candidate in enumerate(self.nodes):
            if candidate is node:
                return index
        raise ValueError(f"{node!r} does not belong to this forest")

    def statistics(self) -> Dict[str, int]:
        """Return structural statistics for reporting."""

        trapped = set(trapped_indices(self.nodes))
        max_depth = 0
        for index, node in enumerate(self.nodes):
            if index not in trapped:
                max_depth = max(max_depth, node.depth())
        return {
            "node_count": len(self.nodes),
            "root_count": len(self.roots),
            "edge_count": sum(1 for node in self.nodes if not node.is_root()),
            "leaf_count": sum(1 for node in self.nodes if node.is_leaf()),
            "max_depth": max_depth,
            "max_fan_out": max((len(node.children) for node in self.nodes), default=0),
            "cycle_count": len(self.cycles),
            "unreachable_count": len(trapped),
            "ambiguous_count": len(self.ambiguous),
        }


class ForestBuilder:
    """Policy-aware forest assembly.

    Linking follows exactly the same first-match rule as :func:`build_forest`;
    the builder adds input limits, cycle reporting and optional ambiguity
    tracking on top.
    """

    def __init__(
        self,
        policy: ForestAssemblyPolicy | None = None,
        *,
        node_factory: NodeFactory = TreeNode,
    ) -> None:
        self._policy = policy or ForestAssemblyPolicy()
        self._node_factory = node_factory

    @property
    def policy(self) -> ForestAssemblyPolicy:
        return self._policy

    def run(self, objects: Iterable[Any]) -> ForestAssemblyResult:
        items = list(objects)
        if len(items) > self._policy.max_nodes:
            raise InvalidInputError(
                f"max_nodes={self._policy.max_nodes} exceeded by input of {len(items)} objects"
            )

        with log_timing("forest-assembly", logger_=_LOGGER):
            nodes = _wrap(items, self._node_factory)
            ambiguous = _link(nodes, track_ambiguity=self._policy.track_ambiguity)
            cycles = find_cycles(nodes)

        if ambiguous:
            _LOGGER.warning(
                "Ambiguous parentage resolved by first match",
                children=sorted(ambiguous),
            )
        if cycles:
            if self._policy.cycle_strategy == "raise":
                raise CyclicParentageError(cycles)
            _LOGGER.warning(
                "Cyclic parentage left out of roots",
                cycles=cycles,
            )

        result = ForestAssemblyResult(
            roots=_roots(nodes),
            nodes=nodes,
            cycles=cycles,
            ambiguous=ambiguous,
        )
        _LOGGER.debug(
            "Forest assembled",
            nodes=len(nodes),
            roots=len(result.roots),
        )
        return result


__all__ = [
    "build_forest",
    "find_cycles",
    "trapped_indices",
    "ForestBuilder",
    "ForestAssemblyResult",
    "NodeFactory",
]
