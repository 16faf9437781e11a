"""The cluster rent sysvar."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import ClassVar

from solsysvars.sysvar import ErrorCode, ProgramError

RENT_ID = bytes(
    [
        6, 167, 213, 23, 25, 44, 92, 81, 33, 140, 201, 76, 61, 74, 241, 127,
        88, 218, 238, 8, 155, 161, 253, 68, 227, 219, 217, 138, 0, 0, 0, 0,
    ]
)

DEFAULT_LAMPORTS_PER_BYTE_YEAR = 1_000_000_000 // 100 * 365 // (1024 * 1024)
"""Default rental rate in lamports per byte-year."""

DEFAULT_EXEMPTION_THRESHOLD = 2.0
"""Years of rent a balance must cover to be rent exempt."""

DEFAULT_BURN_PERCENT = 50
"""Default percentage of collected rent that is burned."""

ACCOUNT_STORAGE_OVERHEAD = 128
"""Bytes charged for an account in addition to its data."""

_DEFAULT_EXEMPTION_THRESHOLD_AS_INT = 2
_F64_EXEMPTION_THRESHOLD_BITS = 4611686018427387904
_U64_MAX = 2**64 - 1
_LAYOUT = struct.Struct("<QdB")


def _f64_as_u64(value: float) -> int:
    """Convert a float to an unsigned 64-bit integer, saturating at the bounds."""
    if math.isnan(value) or value <= 0:
        return 0
    if value >= 2**64:
        return _U64_MAX
    return int(value)


@dataclass(frozen=True)
class RentDue:
    """Rent owed by an account: ``paying`` is ``None`` when it is exempt."""

    paying: int | None = None

    EXEMPT: ClassVar[RentDue]

    def lamports(self) -> int:
        """The lamports due for rent."""
        return 0 if self.paying is None else self.paying

    def is_exempt(self) -> bool:
        """Whether the account is rent exempt."""
        return self.paying is None


RentDue.EXEMPT = RentDue()


@dataclass(frozen=True)
class Rent:
    """Rent sysvar data."""

    lamports_per_byte_year: int
    exemption_threshold: float
    burn_percent: int

    LEN: ClassVar[int] = _LAYOUT.size

    @classmethod
    def from_bytes(cls, data) -> Rent:
        """Decode rent parameters from sysvar data of at least ``LEN`` bytes."""
        raw = bytes(data)
        if len(raw) < cls.LEN:
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT,
                f"rent data needs {cls.LEN} bytes, got {len(raw)}",
            )
        return cls(*_LAYOUT.unpack_from(raw))

    def to_bytes(self) -> bytes:
        """Encode the rent parameters in their sysvar account layout."""
        return _LAYOUT.pack(
            self.lamports_per_byte_year, self.exemption_threshold, self.burn_percent
        )

    def calculate_burn(self, rent_collected: int) -> tuple[int, int]:
        """Split collected rent into ``(burned, distributed to validators)``."""
        burned = rent_collected * self.burn_percent // 100
        return burned, rent_collected - burned

    def due(self, balance: int, data_len: int, years_elapsed: float) -> RentDue:
        """Rent due on an account with the given balance and data length."""
        if self.is_exempt(balance, data_len):
            return RentDue.EXEMPT
        return RentDue(self.due_amount(data_len, years_elapsed))

    def due_amount(self, data_len: int, years_elapsed: float) -> int:
        """Rent due by an account that is known not to be exempt."""
        lamports_per_year = self.lamports_per_byte_year * (
            data_len + ACCOUNT_STORAGE_OVERHEAD
        )
        return _f64_as_u64(float(lamports_per_year) * years_elapsed)

    def minimum_balance(self, data_len: int) -> int:
        """The minimum balance for an account of ``data_len`` bytes to be exempt."""
        base = (ACCOUNT_STORAGE_OVERHEAD + data_len) * self.lamports_per_byte_year
        if self._is_default_rent_threshold():
            return base * _DEFAULT_EXEMPTION_THRESHOLD_AS_INT
        return _f64_as_u64(float(base) * self.exemption_threshold)

    def is_exempt(self, lamports: int, data_len: int) -> bool:
        """Whether an account with this balance and size is rent exempt."""
        return lamports >= self.minimum_balance(data_len)

    def _is_default_rent_threshold(self) -> bool:
        bits = struct.unpack("<Q", struct.pack("<d", float(self.exemption_threshold)))[0]
        return bits == _F64_EXEMPTION_THRESHOLD_BITS