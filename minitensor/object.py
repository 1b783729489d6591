"""Identity counters and the base class of graph objects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import count

_guid_counter = count(1)
_fuid_counter = count(1)


def new_guid() -> int:
    """Return a fresh globally unique id; every object gets its own."""
    return next(_guid_counter)


def new_fuid() -> int:
    """Return a fresh family id; clones of a tensor share one."""
    return next(_fuid_counter)


class Object(ABC):
    """Base of tensors and operators: carries a unique id and a text form."""

    def __init__(self) -> None:
        self._guid = new_guid()

    @property
    def guid(self) -> int:
        """The object's globally unique id."""
        return self._guid

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable description of the object."""

    def print(self) -> None:
        """Write the object's description to standard output."""
        print(str(self))