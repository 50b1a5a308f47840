"""Tree node wrapping a single domain object."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, List, Optional, TypeVar

from treeweave.exceptions import CyclicParentageError

T = TypeVar("T")


class TreeNode(Generic[T]):
    """A node in a tree structure.

    The node owns its children and keeps a non-owning back reference to its
    parent. ``set_parent`` and ``add_child`` each touch one side of the link
    only; keeping both sides consistent is up to whoever assembles the tree.
    """

    def __init__(self, payload: T) -> None:
        self._payload = payload
        self._parent: Optional[TreeNode[T]] = None
        self._children: List[TreeNode[T]] = []

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(payload={self._payload!r}, "
            f"children={len(self._children)}, root={self.is_root()})"
        )

    # ------------------------------------------------------------------
    # Payload
    # ------------------------------------------------------------------
    @property
    def payload(self) -> T:
        return self._payload

    @payload.setter
    def payload(self, value: T) -> None:
        self._payload = value

    def set_payload(self, value: T) -> "TreeNode[T]":
        self._payload = value
        return self

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------
    @property
    def parent(self) -> Optional["TreeNode[T]"]:
        return self._parent

    def set_parent(self, parent: Optional["TreeNode[T]"]) -> "TreeNode[T]":
        """Replace the parent link without touching any child list."""

        self._parent = parent
        return self

    @property
    def children(self) -> List["TreeNode[T]"]:
        return list(self._children)

    def set_children(self, children: Iterable["TreeNode[T]"]) -> "TreeNode[T]":
        """Replace the child list wholesale; parent links are left untouched."""

        self._children = list(children)
        return self

    def add_child(self, child: "TreeNode[T]") -> "TreeNode[T]":
        """Append ``child`` without setting its parent link."""

        self._children.append(child)
        return self

    def is_root(self) -> bool:
        return self._parent is None

    def is_leaf(self) -> bool:
        return not self._children

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def path(self) -> List["TreeNode[T]"]:
        """Return the nodes from the root down to this node.

        Raises:
            CyclicParentageError: If the upward walk revisits a node.
        """

        seen: set[int] = set()
        chain: List[TreeNode[T]] = []
        cursor: Optional[TreeNode[T]] = self
        while cursor is not None:
            if id(cursor) in seen:
                raise CyclicParentageError(
                    [],
                    message=f"parent links starting at {self!r} loop back on themselves",
                )
            seen.add(id(cursor))
            chain.append(cursor)
            cursor = cursor._parent
        chain.reverse()
        return chain

    def depth(self) -> int:
        """Number of edges between this node and its root."""

        return len(self.path()) - 1

    def iter_descendants(self) -> Iterator["TreeNode[T]"]:
        """Yield every node below this one in pre-order."""

        seen: set[int] = {id(self)}
        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(node._children))

    def iter_leaves(self) -> Iterator["TreeNode[T]"]:
        if self.is_leaf():
            yield self
            return
        for node in self.iter_descendants():
            if node.is_leaf():
                yield node

    @classmethod
    def build_forest(cls, objects: Iterable[Any]) -> List["TreeNode[Any]"]:
        """Build a forest whose nodes are instances of the calling class."""

        from .builder import build_forest

        return build_forest(objects, node_factory=cls)


__all__ = ["TreeNode"]
