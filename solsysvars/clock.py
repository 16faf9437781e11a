"""Information about the network's clock, ticks, slots and epochs."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from solsysvars.sysvar import ErrorCode, ProgramError, SysvarCache

CLOCK_ID = bytes(
    [
        6, 167, 213, 23, 24, 199, 116, 201, 40, 86, 99, 152, 105, 29, 94, 182,
        139, 94, 184, 163, 155, 75, 109, 92, 115, 85, 91, 33, 0, 0, 0, 0,
    ]
)

DEFAULT_TICKS_PER_SLOT = 64
"""Ticks per slot; at 160 ticks/s leaders rotate every 400 ms."""

DEFAULT_TICKS_PER_SECOND = 160
"""Tick rate the cluster attempts to achieve."""

DEFAULT_MS_PER_SLOT = 1_000 * DEFAULT_TICKS_PER_SLOT // DEFAULT_TICKS_PER_SECOND
"""Expected duration of a slot in milliseconds."""

_LAYOUT = struct.Struct("<QqQQq")


@dataclass(frozen=True)
class Clock:
    """A representation of network time."""

    slot: int
    epoch_start_timestamp: int
    epoch: int
    leader_schedule_epoch: int
    unix_timestamp: int

    LEN: ClassVar[int] = _LAYOUT.size

    @classmethod
    def from_bytes(cls, data) -> Clock:
        """Decode a clock from sysvar data of at least ``LEN`` bytes."""
        raw = bytes(data)
        if len(raw) < cls.LEN:
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT,
                f"clock data needs {cls.LEN} bytes, got {len(raw)}",
            )
        return cls(*_LAYOUT.unpack_from(raw))

    def to_bytes(self) -> bytes:
        """Encode the clock in its sysvar account layout."""
        return _LAYOUT.pack(
            self.slot,
            self.epoch_start_timestamp,
            self.epoch,
            self.leader_schedule_epoch,
            self.unix_timestamp,
        )

    @classmethod
    def from_sysvar(cls, cache: SysvarCache) -> Clock:
        """Load the clock from the runtime; any failure is ``UNSUPPORTED_SYSVAR``."""
        buffer = bytearray(cls.LEN)
        try:
            cache.get_sysvar(buffer, CLOCK_ID, 0)
        except ProgramError as exc:
            raise ProgramError(ErrorCode.UNSUPPORTED_SYSVAR) from exc
        return cls.from_bytes(buffer)