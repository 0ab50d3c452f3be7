"""Store configuration — capacity policy and buffer sizing.

A store is either **growable** (slot capacity and entry buffers expand
on demand) or **fixed** (an arena sized once at construction; overflow
is an error).  ``StoreConfig`` bundles the policy with its sizes so a
store, a loader, and a hot-reload handle can all share one description.
"""

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_INITIAL_CAPACITY = 20
DEFAULT_GROW_BY = 10
DEFAULT_LINE_SIZE = 50
DEFAULT_MAX_ENTRIES = 20


class CapacityPolicy(StrEnum):
    """How a store reacts when it runs out of room."""

    GROWABLE = "growable"
    FIXED = "fixed"


@dataclass(frozen=True)
class StoreConfig:
    """Sizing parameters for an ``EntryStore``.

    Attributes:
        policy: Growable or fixed-capacity behaviour.
        initial_capacity: Entry slots available before the first growth
            (growable only).
        grow_by: Slots added each time a growable store fills up.
        line_size: Bytes per entry buffer.  In growable mode this is the
            initial allocation, doubled as needed; in fixed mode it is
            the hard per-entry limit (``key=value`` plus terminator).
        max_entries: Entry limit for fixed mode.
        max_line_size: Optional per-entry byte limit in growable mode.
        memory_limit: Optional budget, in bytes, for all entry buffers
            of a growable store.

    """

    policy: CapacityPolicy = CapacityPolicy.GROWABLE
    initial_capacity: int = DEFAULT_INITIAL_CAPACITY
    grow_by: int = DEFAULT_GROW_BY
    line_size: int = DEFAULT_LINE_SIZE
    max_entries: int = DEFAULT_MAX_ENTRIES
    max_line_size: int | None = None
    memory_limit: int | None = None

    def __post_init__(self) -> None:
        """Reject sizes that could never hold an entry."""
        for name in ("initial_capacity", "grow_by", "line_size", "max_entries"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)
        if self.max_line_size is not None and self.max_line_size <= 0:
            msg = f"max_line_size must be positive, got {self.max_line_size}"
            raise ValueError(msg)
        if self.memory_limit is not None and self.memory_limit < 0:
            msg = f"memory_limit must not be negative, got {self.memory_limit}"
            raise ValueError(msg)

    @classmethod
    def growable(
        cls,
        *,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        grow_by: int = DEFAULT_GROW_BY,
        line_size: int = DEFAULT_LINE_SIZE,
        max_line_size: int | None = None,
        memory_limit: int | None = None,
    ) -> "StoreConfig":
        """Return a growable configuration."""
        return cls(
            policy=CapacityPolicy.GROWABLE,
            initial_capacity=initial_capacity,
            grow_by=grow_by,
            line_size=line_size,
            max_line_size=max_line_size,
            memory_limit=memory_limit,
        )

    @classmethod
    def fixed(
        cls,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        line_size: int = DEFAULT_LINE_SIZE,
    ) -> "StoreConfig":
        """Return a fixed-capacity (arena) configuration."""
        return cls(policy=CapacityPolicy.FIXED, max_entries=max_entries, line_size=line_size)

    @property
    def is_fixed(self) -> bool:
        """Return True for the arena policy."""
        return self.policy is CapacityPolicy.FIXED
