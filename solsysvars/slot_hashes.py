"""Read-only access to the slot hashes sysvar data."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

from solsysvars.sysvar import ErrorCode, ProgramError, SysvarCache

SLOTHASHES_ID = bytes(
    [
        6, 167, 213, 23, 25, 47, 10, 175, 198, 242, 101, 227, 251, 119, 204, 122,
        218, 130, 197, 41, 208, 190, 59, 19, 110, 45, 0, 85, 32, 0, 0, 0,
    ]
)
"""Slot hashes sysvar id ``SysvarS1otHashes111111111111111111111111111``."""

HASH_BYTES = 32
"""Number of bytes in a hash."""

NUM_ENTRIES_SIZE = 8
"""Size of the little-endian entry count at the start of the data."""

SLOT_SIZE = 8
"""Size of a slot number in bytes."""

ENTRY_SIZE = SLOT_SIZE + HASH_BYTES
"""Size of a single ``(slot, hash)`` entry."""

MAX_ENTRIES = 512
"""Maximum number of entries the sysvar holds."""

MAX_SIZE = NUM_ENTRIES_SIZE + MAX_ENTRIES * ENTRY_SIZE
"""Full size of the sysvar data in bytes."""

_COUNT = struct.Struct("<Q")
_ENTRY = struct.Struct(f"<Q{HASH_BYTES}s")


def read_entry_count_from_bytes(data) -> int | None:
    """The entry count in the first 8 bytes, or ``None`` if the data is shorter."""
    head = bytes(data[:NUM_ENTRIES_SIZE])
    if len(head) < NUM_ENTRIES_SIZE:
        return None
    return _COUNT.unpack(head)[0]


def _validate(data: bytes) -> None:
    count = read_entry_count_from_bytes(data)
    if count is None:
        raise ProgramError(
            ErrorCode.ACCOUNT_DATA_TOO_SMALL,
            f"slot hashes data needs {NUM_ENTRIES_SIZE} header bytes, got {len(data)}",
        )
    min_size = NUM_ENTRIES_SIZE + count * ENTRY_SIZE
    if len(data) < min_size:
        raise ProgramError(
            ErrorCode.ACCOUNT_DATA_TOO_SMALL,
            f"{count} entries need {min_size} bytes, got {len(data)}",
        )


@dataclass(frozen=True)
class SlotHashEntry:
    """A slot and the hash of its bank."""

    slot: int
    hash: bytes

    LEN: ClassVar[int] = ENTRY_SIZE

    @classmethod
    def from_bytes(cls, data) -> SlotHashEntry:
        """Decode an entry from at least ``ENTRY_SIZE`` bytes."""
        raw = bytes(data[:ENTRY_SIZE])
        if len(raw) < ENTRY_SIZE:
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT,
                f"slot hash entry needs {ENTRY_SIZE} bytes, got {len(raw)}",
            )
        return cls(*_ENTRY.unpack(raw))


class SlotHashes:
    """A validated view over slot hashes sysvar data.

    Entries are expected in descending slot order; that order is not checked.
    """

    __slots__ = ("_data",)

    def __init__(self, data) -> None:
        raw = bytes(data)
        _validate(raw)
        self._data = raw

    @property
    def data(self) -> bytes:
        """The raw sysvar data."""
        return self._data

    def __len__(self) -> int:
        return _COUNT.unpack_from(self._data)[0]

    def __iter__(self) -> Iterator[SlotHashEntry]:
        end = NUM_ENTRIES_SIZE + len(self) * ENTRY_SIZE
        for slot, hash_ in _ENTRY.iter_unpack(self._data[NUM_ENTRIES_SIZE:end]):
            yield SlotHashEntry(slot, hash_)

    def __repr__(self) -> str:
        return f"SlotHashes(len={len(self)})"

    def is_empty(self) -> bool:
        """Whether the sysvar holds no entries."""
        return len(self) == 0

    def entries(self) -> tuple[SlotHashEntry, ...]:
        """All entries, in stored order."""
        return tuple(self)

    def _slot_at(self, index: int) -> int:
        return _COUNT.unpack_from(self._data, NUM_ENTRIES_SIZE + index * ENTRY_SIZE)[0]

    def get_entry(self, index: int) -> SlotHashEntry | None:
        """The entry at ``index``, or ``None`` when out of range."""
        if index < 0 or index >= len(self):
            return None
        start = NUM_ENTRIES_SIZE + index * ENTRY_SIZE
        return SlotHashEntry(*_ENTRY.unpack_from(self._data, start))

    def get_hash(self, target_slot: int) -> bytes | None:
        """The hash recorded for ``target_slot``, or ``None`` if absent."""
        index = self.position(target_slot)
        if index is None:
            return None
        entry = self.get_entry(index)
        return None if entry is None else entry.hash

    def position(self, target_slot: int) -> int | None:
        """Index of ``target_slot`` by binary search over descending slots."""
        low, high = 0, len(self)
        while low < high:
            middle = (low + high) // 2
            slot = self._slot_at(middle)
            if slot == target_slot:
                return middle
            if slot > target_slot:
                low = middle + 1
            else:
                high = middle
        return None

    @classmethod
    def fetch(cls, cache: SysvarCache) -> SlotHashes:
        """Copy the full ``MAX_SIZE`` bytes of the sysvar from the runtime."""
        buffer = bytearray(MAX_SIZE)
        cache.get_sysvar(buffer, SLOTHASHES_ID, 0)
        return cls(buffer)