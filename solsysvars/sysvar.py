"""Errors and runtime access shared by all cluster sysvars."""

from __future__ import annotations

import enum
from collections.abc import Mapping

PUBKEY_BYTES = 32


class ErrorCode(enum.Enum):
    """Reasons a sysvar operation can fail."""

    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_INSTRUCTION_DATA = "InvalidInstructionData"
    ACCOUNT_DATA_TOO_SMALL = "AccountDataTooSmall"
    ACCOUNT_BORROW_FAILED = "AccountBorrowFailed"
    UNSUPPORTED_SYSVAR = "UnsupportedSysvar"


class ProgramError(Exception):
    """Raised when a sysvar operation fails; ``code`` tells why."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or code.value)


def _sysvar_key(sysvar_id: bytes) -> bytes:
    key = bytes(sysvar_id)
    if len(key) != PUBKEY_BYTES:
        raise ValueError(f"sysvar id must be {PUBKEY_BYTES} bytes, got {len(key)}")
    return key


class SysvarCache:
    """The runtime's view of sysvar account data, keyed by sysvar id."""

    def __init__(self, sysvars: Mapping[bytes, bytes] | None = None) -> None:
        self._data: dict[bytes, bytes] = {}
        for sysvar_id, data in (sysvars or {}).items():
            self.set(sysvar_id, data)

    def __contains__(self, sysvar_id: object) -> bool:
        try:
            return _sysvar_key(sysvar_id) in self._data  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def set(self, sysvar_id: bytes, data: bytes) -> None:
        """Store the data of the sysvar with the given id."""
        self._data[_sysvar_key(sysvar_id)] = bytes(data)

    def get_sysvar(self, dst, sysvar_id: bytes, offset: int) -> None:
        """Copy ``len(dst)`` bytes of the sysvar, starting at ``offset``, into ``dst``.

        Raises ``UNSUPPORTED_SYSVAR`` when the sysvar is unknown and
        ``INVALID_ARGUMENT`` when ``offset + len(dst)`` exceeds its data.
        """
        view = memoryview(dst).cast("B")
        if view.readonly:
            raise TypeError("destination buffer is read-only")
        data = self._data.get(_sysvar_key(sysvar_id))
        if data is None:
            raise ProgramError(ErrorCode.UNSUPPORTED_SYSVAR)
        end = offset + view.nbytes
        if offset < 0 or end > len(data):
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT,
                f"offset {offset} + length {view.nbytes} exceeds sysvar size {len(data)}",
            )
        view[:] = data[offset:end]