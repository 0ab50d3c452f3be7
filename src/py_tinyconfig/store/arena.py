"""Arena — one store-owned buffer divided into equal-sized entry slots.

A fixed-capacity store never allocates per entry.  It reserves a single
``bytearray`` of ``slot_count * slot_size`` bytes up front and hands out
slots from it, giving O(1) allocation and release with no growth and no
fragmentation.

Each slot is exposed as a writable ``memoryview`` window onto the arena,
so an entry writes its ``key=value`` line straight into the shared
buffer.  The arena is never resized, which keeps those windows valid
for the arena's whole lifetime.
"""

from typing import Any

from py_tinyconfig.errors import CapacityExceededError, OutOfMemoryError


class Arena:
    """A fixed pool of equal-sized byte slots.

    Free slots are tracked with a stack: allocation pops (O(1)),
    release pushes (O(1)).  The lowest free index is handed out first so
    a freshly filled arena lays entries out in insertion order.
    """

    def __init__(self, *, slot_count: int, slot_size: int) -> None:
        """Reserve the arena's storage.

        Args:
            slot_count: Number of entries the arena can hold.
            slot_size: Bytes per entry slot.

        Raises:
            OutOfMemoryError: If the storage cannot be allocated.

        """
        self._slot_count = slot_count
        self._slot_size = slot_size
        try:
            self._storage = bytearray(slot_count * slot_size)
        except MemoryError as e:
            msg = f"Cannot reserve arena of {slot_count} x {slot_size} bytes"
            raise OutOfMemoryError(msg) from e
        self._free: list[int] = list(range(slot_count - 1, -1, -1))
        self._allocated: set[int] = set()

    @property
    def slot_count(self) -> int:
        """Return the total number of slots."""
        return self._slot_count

    @property
    def slot_size(self) -> int:
        """Return the size of each slot in bytes."""
        return self._slot_size

    @property
    def used_count(self) -> int:
        """Return the number of allocated slots."""
        return len(self._allocated)

    @property
    def is_full(self) -> bool:
        """Return True if no slot is free."""
        return not self._free

    def allocate(self) -> int:
        """Pop a free slot index and mark it as allocated.

        Raises:
            CapacityExceededError: If every slot is in use.

        """
        if not self._free:
            msg = f"Arena is full ({self._slot_count} entries)"
            raise CapacityExceededError(msg)
        slot = self._free.pop()
        self._allocated.add(slot)
        return slot

    def free(self, slot: int) -> None:
        """Return *slot* to the free list and zero its bytes.

        Raises:
            ValueError: If the slot is not currently allocated.

        """
        if slot not in self._allocated:
            msg = f"Slot {slot} is not allocated"
            raise ValueError(msg)
        start = slot * self._slot_size
        self._storage[start : start + self._slot_size] = bytes(self._slot_size)
        self._allocated.discard(slot)
        self._free.append(slot)

    def window(self, slot: int) -> memoryview:
        """Return a writable view of exactly one slot's bytes.

        Raises:
            ValueError: If the slot is not currently allocated.

        """
        if slot not in self._allocated:
            msg = f"Slot {slot} is not allocated"
            raise ValueError(msg)
        start = slot * self._slot_size
        return memoryview(self._storage)[start : start + self._slot_size]

    def stats(self) -> dict[str, Any]:
        """Return usage statistics for this arena."""
        return {
            "slot_count": self._slot_count,
            "slot_size": self._slot_size,
            "used_slots": len(self._allocated),
            "free_slots": len(self._free),
            "total_bytes": len(self._storage),
        }
