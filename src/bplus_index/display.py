"""Pretty-printing and display utilities for B+-tree structures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from bplus_index.bplus_tree_base import BPlusTreeBase, NodeBase


def print_pretty(tree: BPlusTreeBase) -> str:
    """
    Level-order dump of a B+-tree:
      • One line per level, root first.
      • Children of the same parent are grouped in braces.
      • Each node is printed as its key list.

    Example for branching factor 3 after inserting 5, 10, 15, 20::

        {[15]}
        {[5, 10], [15, 20]}
    """
    from bplus_index.bplus_tree_base import BPlusTreeBase, InternalNodeBase

    if tree is None:
        return f"{type(tree).__name__}: None"

    if not isinstance(tree, BPlusTreeBase):
        raise TypeError(f"print_pretty() expects BPlusTreeBase, got {type(tree).__name__}")

    lines = []
    level: List[List[NodeBase]] = [[tree.root]]
    while level:
        next_level = []
        groups = []
        for group in level:
            groups.append("{" + ", ".join(str(node) for node in group) + "}")
            for node in group:
                if isinstance(node, InternalNodeBase):
                    next_level.append(node.children)
        lines.append(", ".join(groups))
        level = next_level

    return "".join(line + "\n" for line in lines)


def collect_leaf_keys(tree: BPlusTreeBase) -> List[Any]:
    """Collect all leaf keys of a B+-tree in leaf chain order."""
    out = []
    for leaf in tree.iter_leaf_nodes():
        out.extend(leaf.keys)
    return out


def print_structure(
    tree: BPlusTreeBase,
    max_depth: int = 8,
) -> str:
    """Return a debugging-oriented structural dump of a B+-tree.

    Recursively prints each node's kind and keys; leaves additionally show
    their values and the keys of their chain neighbours.
    """
    from bplus_index.bplus_tree_base import InternalNodeBase

    header = (f"{tree.__class__.__name__}(branching_factor={tree.BRANCHING_FACTOR}, "
              f"size={tree.size()}, height={tree.height()})")
    result = [header]

    def neighbour(leaf) -> str:
        return "None" if leaf is None else str(leaf)

    def walk(node: NodeBase, indent: int, depth: int) -> None:
        prefix = ' ' * indent
        if depth > max_depth:
            result.append(f"{prefix}... (max depth reached)")
            return
        if isinstance(node, InternalNodeBase):
            result.append(f"{prefix}{node.__class__.__name__}(keys={node}, children={len(node.children)})")
            for child in node.children:
                walk(child, indent + 4, depth + 1)
        else:
            result.append(f"{prefix}{node.__class__.__name__}(keys={node}, values={node.values!r})")
            result.append(f"{prefix}    Previous: {neighbour(node.previous)}")
            result.append(f"{prefix}    Next: {neighbour(node.next)}")

    walk(tree.root, 4, 0)
    return "\n".join(result)
