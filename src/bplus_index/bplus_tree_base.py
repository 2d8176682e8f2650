"""B+-tree base implementation"""

from __future__ import annotations
from abc import ABC, abstractmethod
from bisect import bisect_left
from typing import Any, Iterator, List, Optional, Tuple, Type

from bplus_index.base import (
    AbstractOrderedIndex,
    COMPARATORS,
    GE,
    LE,
    debug_log,
    matches,
)


class NodeBase(ABC):
    """
    Shared contract of the two node kinds of a B+-tree. Factory will set:
      - BRANCHING_FACTOR : maximum leaf occupancy and maximum internal fan-out

    Every node keeps a reference to the tree that owns it, so that an
    insertion reaching the root can replace ``tree.root`` in place.
    """
    __slots__ = ("keys", "tree")

    # set by factory
    BRANCHING_FACTOR: int = 3

    def __init__(self, tree: BPlusTreeBase) -> None:
        self.keys: List[Any] = []
        self.tree = tree

    def key_number(self) -> int:
        return len(self.keys)

    @abstractmethod
    def insert(self, key: Any, value: Any) -> None:
        """
        Inserts key and value into the appropriate leaf below this node and
        rebalances by splitting where required.
        """

    @abstractmethod
    def first_leaf_key(self) -> Any:
        """Returns the smallest key stored in the subtree rooted at this node."""

    @abstractmethod
    def get_value(self, key: Any) -> Optional[Any]:
        pass

    @abstractmethod
    def split(self) -> NodeBase:
        """
        Moves the upper half of this node into a new sibling and returns it.
        The caller is responsible for wiring the sibling into a parent.
        """

    @abstractmethod
    def range_search(self, key: Any, comparator: str) -> List[Any]:
        pass

    @abstractmethod
    def is_overflow(self) -> bool:
        pass

    def __str__(self) -> str:
        return "[" + ", ".join(str(k) for k in self.keys) + "]"

    __repr__ = __str__


class InternalNodeBase(NodeBase):
    """
    Routing node holding separator keys and child pointers. Never holds values.

    Child ``i`` holds keys in ``[keys[i-1], keys[i]]``; a key equal to a
    separator is routed to the child right of it.
    """
    __slots__ = ("children",)

    def __init__(self, tree: BPlusTreeBase) -> None:
        super().__init__(tree)
        self.children: List[NodeBase] = []

    def first_leaf_key(self) -> Any:
        return self.children[0].first_leaf_key()

    def is_overflow(self) -> bool:
        return len(self.children) > self.BRANCHING_FACTOR

    def child_index(self, key: Any) -> int:
        """Index of the child a search for ``key`` descends into."""
        keys = self.keys
        pos = bisect_left(keys, key)
        if pos < len(keys) and keys[pos] == key:
            return pos + 1
        return pos

    def get_child_of_node(self, key: Any) -> NodeBase:
        return self.children[self.child_index(key)]

    def insert(self, key: Any, value: Any) -> None:
        if key is None:
            raise ValueError("insert(): key must not be None")
        index = self.child_index(key)
        child = self.children[index]
        child.insert(key, value)
        if child.is_overflow():
            sibling = child.split()
            self.insert_child(sibling.first_leaf_key(), sibling, split_index=index)
        self.tree._resolve_root_overflow()

    def insert_child(
        self,
        key: Any,
        child: NodeBase,
        split_index: Optional[int] = None
    ) -> None:
        """
        Inserts a separator key and the child to its right.

        Without ``split_index`` the position is found by binary search on
        ``key``: on an exact match the child lands directly right of the
        matching separator, otherwise at the insertion point.

        Args:
            key: The separator (first leaf key of ``child``).
            child: The node to insert.
            split_index: Index of the child ``child`` was split off from. The
                new child is then placed directly right of it, which keeps
                runs of equal separators in the same order as the leaf chain.
        """
        keys = self.keys
        if split_index is None:
            pos = bisect_left(keys, key)
        else:
            pos = split_index
        keys.insert(pos, key)
        self.children.insert(pos + 1, child)

    def split(self) -> InternalNodeBase:
        keys = self.keys
        children = self.children
        start = len(keys) // 2 + 1
        sibling = type(self)(self.tree)
        sibling.keys = keys[start:]
        sibling.children = children[start:]

        # keys[start - 1] is dropped; the caller promotes the sibling's first leaf key
        del keys[start - 1:]
        del children[start:]

        debug_log("Split internal node: kept %s, sibling %s", self, sibling)
        return sibling

    def range_search(self, key: Any, comparator: str) -> List[Any]:
        return self.get_child_of_node(key).range_search(key, comparator)

    def get_value(self, key: Any) -> Optional[Any]:
        return self.get_child_of_node(key).get_value(key)


class LeafNodeBase(NodeBase):
    """
    Leaf node holding sorted keys and their values. Leaves are linked into a
    doubly linked chain in ascending key order.
    """
    __slots__ = ("values", "next", "previous")

    def __init__(self, tree: BPlusTreeBase) -> None:
        super().__init__(tree)
        self.values: List[Any] = []
        self.next: Optional[LeafNodeBase] = None
        self.previous: Optional[LeafNodeBase] = None

    def first_leaf_key(self) -> Any:
        return self.keys[0]

    def is_overflow(self) -> bool:
        return len(self.values) > self.BRANCHING_FACTOR

    def insert(self, key: Any, value: Any) -> None:
        if key is None:
            raise ValueError("insert(): key must not be None")
        if value is None:
            raise ValueError("insert(): value must not be None")

        # Equal keys go in front of the existing run
        pos = bisect_left(self.keys, key)
        self.keys.insert(pos, key)
        self.values.insert(pos, value)

        # A leaf is the root while the tree has height 1
        self.tree._resolve_root_overflow()

    def split(self) -> LeafNodeBase:
        keys = self.keys
        values = self.values
        mid = (len(keys) + 1) // 2
        sibling = type(self)(self.tree)
        sibling.keys = keys[mid:]
        sibling.values = values[mid:]
        del keys[mid:]
        del values[mid:]

        old_next = self.next
        sibling.previous = self
        sibling.next = old_next
        if old_next is not None:
            old_next.previous = sibling
        self.next = sibling

        debug_log("Split leaf node: kept %s, sibling %s", self, sibling)
        return sibling

    def head(self) -> LeafNodeBase:
        """Walks ``previous`` links to the first leaf of the chain."""
        node = self
        while node.previous is not None:
            node = node.previous
        return node

    def range_search(self, key: Any, comparator: str) -> List[Any]:
        """
        Collects the values of all entries in the leaf chain whose key
        satisfies ``entry_key <comparator> key``, in chain order.

        The scan for ">=" and "==" starts at the first leaf that can hold a
        match, walking back from this leaf while the previous leaf still ends
        in a key >= ``key``. Scans for "<=" start at the head. Scans for "<="
        and "==" stop at the first key greater than ``key``.
        """
        if key is None:
            raise ValueError("range_search(): key must not be None")
        if comparator not in COMPARATORS:
            return []

        if comparator == LE:
            node = self.head()
        else:
            node = self
            prev = node.previous
            while prev is not None and prev.keys and prev.keys[-1] >= key:
                node = prev
                prev = node.previous

        result = []
        append = result.append
        bounded = comparator != GE
        while node is not None:
            for entry_key, entry_value in zip(node.keys, node.values):
                if bounded and entry_key > key:
                    return result
                if matches(entry_key, key, comparator):
                    append(entry_value)
            node = node.next
        return result

    def get_value(self, key: Any) -> Optional[Any]:
        keys = self.keys
        pos = bisect_left(keys, key)
        if pos < len(keys) and keys[pos] == key:
            return self.values[pos]
        return None


class BPlusTreeBase(AbstractOrderedIndex):
    """
    An in-memory B+-tree supporting insertion, exact lookup and range search.
    Duplicate keys are stored as separate entries.

    Attributes:
        root (NodeBase): The root node; an empty leaf for an empty tree.
        count (int): Number of successful insertions.
    """
    __slots__ = ("root", "count")

    # set by factory
    BRANCHING_FACTOR: int
    InternalNodeClass: Type[InternalNodeBase]
    LeafNodeClass: Type[LeafNodeBase]

    def __init__(self) -> None:
        branching_factor = self.BRANCHING_FACTOR
        if branching_factor <= 2:
            raise ValueError(f"Illegal branching factor: {branching_factor}")
        self.root: NodeBase = self.LeafNodeClass(self)
        self.count = 0

    @property
    def branching_factor(self) -> int:
        return self.BRANCHING_FACTOR

    def is_empty(self) -> bool:
        return self.count == 0

    # Public API
    def insert(self, key: Any, value: Any) -> None:
        """
        Public method (O(log n)): Insert a key-value pair into the B+-tree.
        Inserting an existing key adds another entry next to the existing ones.

        Args:
            key: The key. Must be comparable with the keys already stored.
            value: The value to store under the key.

        Raises:
            ValueError: If key or value is None. The tree is left unchanged.
        """
        if key is None:
            raise ValueError("insert(): key must not be None")
        self.root.insert(key, value)
        self.count += 1

    def get(self, key: Any) -> Optional[Any]:
        """
        Looks up ``key`` and returns its value, or None if the key is absent.
        For duplicate keys the entry found first by binary search in the
        routed leaf is returned.
        """
        if key is None:
            return None
        return self.root.get_value(key)

    def range_search(self, key: Any, comparator: str) -> List[Any]:
        """
        Returns the values of all entries whose key compares to ``key`` as
        ``comparator`` (">=", "==" or "<=") says, in ascending key order.
        Any other comparator returns an empty list.

        Raises:
            ValueError: If key is None and the comparator is valid.
        """
        if comparator not in COMPARATORS:
            return []
        if key is None:
            raise ValueError("range_search(): key must not be None")
        return self.root.range_search(key, comparator)

    def size(self) -> int:
        return self.count

    def __len__(self) -> int:
        return self.count

    def _resolve_root_overflow(self) -> None:
        """Splits an overflowing root under a new internal root (height + 1)."""
        root = self.root
        if not root.is_overflow():
            return
        sibling = root.split()
        new_root = self.InternalNodeClass(self)
        new_root.keys.append(sibling.first_leaf_key())
        new_root.children.append(root)
        new_root.children.append(sibling)
        self.root = new_root
        debug_log("Promoted new root %s, height is now %d", new_root, self.height())

    def iter_leaf_nodes(self) -> Iterator[LeafNodeBase]:
        """
        Iterates over all leaf nodes in the tree, starting from the leftmost
        leaf and following ``next`` pointers.

        Yields:
            LeafNodeBase: Each leaf in ascending key order.
        """
        node = self.root
        while isinstance(node, InternalNodeBase):
            node = node.children[0]
        while node is not None:
            yield node
            node = node.next

    def items(self) -> Iterator[Tuple[Any, Any]]:
        """Yields all (key, value) pairs in leaf chain order."""
        for leaf in self.iter_leaf_nodes():
            yield from zip(leaf.keys, leaf.values)

    def height(self) -> int:
        """Number of node levels; 1 for a tree whose root is a leaf."""
        height = 1
        node = self.root
        while isinstance(node, InternalNodeBase):
            node = node.children[0]
            height += 1
        return height

    def print_structure(self) -> str:
        from bplus_index.display import print_structure
        return print_structure(self)

    def __str__(self) -> str:
        from bplus_index.display import print_pretty
        return print_pretty(self)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(branching_factor={self.BRANCHING_FACTOR}, "
                f"size={self.count}, height={self.height()})")
