"""
Arithmetic over the circular identifier space of a chord ring.

Every key handled here is a plain int in [0, size). The ring size is carried by a
RingSpace value rather than a module level constant, so different ring sizes can
live side by side (tests use tiny rings).
"""

import secrets
from dataclasses import dataclass

from ringcount import constants as rcst


@dataclass(frozen=True)
class RingSpace:
    bits: int = rcst.RING_BITS

    def __post_init__(self) -> None:
        if self.bits < 1:
            raise ValueError(f"Ring must have at least 1 bit, got {self.bits}")

    @property
    def size(self) -> int:
        return 1 << self.bits

    def reduce(self, key: int) -> int:
        return key % self.size

    def random_key(self) -> int:
        """Uniform key from a cryptographically strong source, so start points can't be predicted."""
        return secrets.randbelow(self.size)

    def offset(self, base: int, index: int, total_partitions: int) -> int:
        if total_partitions < 1:
            raise ValueError(f"total_partitions must be positive, got {total_partitions}")
        return (base + self.size * index // total_partitions) % self.size

    def start_keys(self, count: int, base: int | None = None) -> list[int]:
        """
        Spread `count` keys evenly around the ring from one shared base.

        Args:
            count (int): Number of keys (one per walk).
            base (int | None): Shared base key. A random one is drawn if not given.

        Returns:
            list[int]: Keys `offset(base, i, count)` for i in range(count).
        """
        if base is None:
            base = self.random_key()
        base = self.reduce(base)
        return [self.offset(base, index, count) for index in range(count)]

    def forward_distance(self, from_key: int, to_key: int) -> int:
        from_key = self.reduce(from_key)
        to_key = self.reduce(to_key)
        if to_key >= from_key:
            return to_key - from_key
        return (self.size - from_key) + to_key

    def to_hex(self, key: int) -> str:
        return format(self.reduce(key), "x")
