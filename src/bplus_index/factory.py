"""Factory for the creation of B+-trees with a fixed branching factor"""

from typing import Dict, Tuple, Type

from bplus_index.bplus_tree_base import (
    BPlusTreeBase,
    InternalNodeBase,
    LeafNodeBase,
)
from bplus_index.logging_config import get_logger

logger = get_logger(__name__)

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[int, Tuple[Type, Type, Type]] = {}


def make_bplustree_classes(branching_factor: int) -> Tuple[
    Type[BPlusTreeBase],
    Type[InternalNodeBase],
    Type[LeafNodeBase]
]:
    """
    Factory function to generate B+-tree classes specialized for a given branching factor.

    Returns:
        BPlusTreeB     - subclass of BPlusTreeBase with InternalNodeClass and LeafNodeClass set.
        InternalNodeB  - subclass of InternalNodeBase with BRANCHING_FACTOR=B.
        LeafNodeB      - subclass of LeafNodeBase with BRANCHING_FACTOR=B.

    Raises:
        ValueError: If the branching factor is not an int greater than 2.
    """
    if not isinstance(branching_factor, int) or isinstance(branching_factor, bool):
        raise ValueError(f"Illegal branching factor: {branching_factor!r}")
    if branching_factor <= 2:
        raise ValueError(f"Illegal branching factor: {branching_factor}")

    if branching_factor in _class_cache:
        logger.debug(f"Using cached classes for B={branching_factor}")
        return _class_cache[branching_factor]

    logger.debug(f"Creating new classes for B={branching_factor}")

    # 1) Node classes carry the occupancy bound
    InternalNodeB = type(
        f"InternalNode_B{branching_factor}",
        (InternalNodeBase,),
        {
            "BRANCHING_FACTOR": branching_factor,
            "__slots__": (),
        }
    )
    LeafNodeB = type(
        f"LeafNode_B{branching_factor}",
        (LeafNodeBase,),
        {
            "BRANCHING_FACTOR": branching_factor,
            "__slots__": (),
        }
    )

    # 2) Tree class points at both node classes
    BPlusTreeB = type(
        f"BPlusTree_B{branching_factor}",
        (BPlusTreeBase,),
        {
            "BRANCHING_FACTOR": branching_factor,
            "InternalNodeClass": InternalNodeB,
            "LeafNodeClass": LeafNodeB,
            "__slots__": (),
        }
    )
    logger.debug(f"Created {BPlusTreeB.__name__} with InternalNodeClass={InternalNodeB.__name__}, "
                 f"LeafNodeClass={LeafNodeB.__name__}")

    _class_cache[branching_factor] = (BPlusTreeB, InternalNodeB, LeafNodeB)
    return BPlusTreeB, InternalNodeB, LeafNodeB


def create_bplustree(branching_factor: int) -> BPlusTreeBase:
    """
    Create a new empty B+-tree with the specified branching factor.

    Args:
        branching_factor (int): Maximum number of entries per leaf and
            children per internal node. Must be greater than 2.

    Returns:
        A new empty B+-tree.
    """
    BPlusTreeB, _, _ = make_bplustree_classes(branching_factor)
    tree = BPlusTreeB()
    logger.debug(f"Created tree instance of type {type(tree).__name__}")
    return tree
