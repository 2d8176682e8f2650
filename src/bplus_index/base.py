from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar
import logging

from bplus_index.logging_config import get_logger

logger = get_logger("BPlusTree")

# Range search comparators
GE = ">="
EQ = "=="
LE = "<="
COMPARATORS = (GE, EQ, LE)

K = TypeVar("K")
V = TypeVar("V")


class AbstractOrderedIndex(ABC, Generic[K, V]):
    """
    Abstract base class for an ordered index mapping comparable keys to values.
    Duplicate keys are allowed and stored as separate entries.
    """

    @abstractmethod
    def insert(self, key: K, value: V) -> None:
        """
        Insert a key-value pair into the index.

        Parameters:
            key (K): The key to insert. Must not be None.
            value (V): The value associated with the key. Must not be None.

        Raises:
            ValueError: If key or value is None.
        """
        pass

    @abstractmethod
    def get(self, key: K) -> Optional[V]:
        """
        Return the value stored under the given key.

        Parameters:
            key (K): The key to look up.

        Returns:
            Optional[V]: The value if the key is present; otherwise, None.
                If the key was inserted several times, any one of its values.
        """
        pass

    @abstractmethod
    def range_search(self, key: K, comparator: str) -> List[V]:
        """
        Return the values whose keys satisfy ``stored_key <comparator> key``.

        Parameters:
            key (K): The key to compare against. Must not be None.
            comparator (str): One of ">=", "==" or "<=". Any other string
                yields an empty list.

        Returns:
            List[V]: Matching values in ascending key order.
        """
        pass

    @abstractmethod
    def size(self) -> int:
        """Return the number of entries inserted so far."""
        pass


def matches(stored_key: Any, key: Any, comparator: str) -> bool:
    """Evaluate ``stored_key <comparator> key`` for one of the range comparators."""
    if comparator == GE:
        return stored_key >= key
    if comparator == LE:
        return stored_key <= key
    if comparator == EQ:
        return stored_key == key
    return False


def debug_log(message, *args, **kwargs):
    """Log a debug message only if debug logging is enabled"""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(message, *args, **kwargs)
