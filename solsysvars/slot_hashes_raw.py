"""Copying slot hashes sysvar bytes into caller-supplied buffers."""

from __future__ import annotations

from solsysvars.slot_hashes import (
    ENTRY_SIZE,
    MAX_ENTRIES,
    MAX_SIZE,
    NUM_ENTRIES_SIZE,
    SLOTHASHES_ID,
    read_entry_count_from_bytes,
)
from solsysvars.sysvar import ErrorCode, ProgramError, SysvarCache


def get_valid_buffer_capacity(buffer_len: int, offset: int) -> int:
    """The number of entries a buffer of ``buffer_len`` bytes holds.

    At offset 0 the buffer must be a header followed by whole entries;
    elsewhere it must hold whole entries only. Whether ``offset + buffer_len``
    fits in the sysvar is checked by :func:`validate_fetch_offset`.
    """
    if offset == 0:
        if buffer_len == MAX_SIZE:
            return MAX_ENTRIES
        if buffer_len < NUM_ENTRIES_SIZE:
            raise ProgramError(
                ErrorCode.ACCOUNT_DATA_TOO_SMALL,
                f"buffer of {buffer_len} bytes cannot hold the entry count",
            )
        entry_data_len = buffer_len - NUM_ENTRIES_SIZE
        if entry_data_len % ENTRY_SIZE:
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT,
                f"entry data of {entry_data_len} bytes is not a multiple of {ENTRY_SIZE}",
            )
        return entry_data_len // ENTRY_SIZE
    if buffer_len % ENTRY_SIZE:
        raise ProgramError(
            ErrorCode.INVALID_ARGUMENT,
            f"buffer of {buffer_len} bytes is not a multiple of {ENTRY_SIZE}",
        )
    return buffer_len // ENTRY_SIZE


def validate_fetch_offset(offset: int, buffer_len: int) -> None:
    """Check that ``offset`` starts the data or an entry and the range fits."""
    if offset < 0 or offset >= MAX_SIZE:
        raise ProgramError(
            ErrorCode.INVALID_ARGUMENT, f"offset {offset} outside sysvar data"
        )
    if offset != 0 and (
        offset < NUM_ENTRIES_SIZE or (offset - NUM_ENTRIES_SIZE) % ENTRY_SIZE
    ):
        raise ProgramError(
            ErrorCode.INVALID_ARGUMENT, f"offset {offset} is not at an entry boundary"
        )
    if offset + buffer_len > MAX_SIZE:
        raise ProgramError(
            ErrorCode.INVALID_ARGUMENT,
            f"offset {offset} + length {buffer_len} exceeds {MAX_SIZE}",
        )


def fetch_into(buffer, offset: int, cache: SysvarCache) -> int:
    """Copy sysvar bytes into ``buffer`` after validating its layout.

    Returns the entry count from the sysvar header when ``offset`` is 0,
    otherwise the number of entries the buffer holds.
    """
    length = memoryview(buffer).nbytes
    capacity = get_valid_buffer_capacity(length, offset)
    validate_fetch_offset(offset, length)
    fetch_into_unchecked(buffer, offset, cache)
    if offset == 0:
        return read_entry_count_from_bytes(buffer) or 0
    return capacity


def fetch_into_unchecked(buffer, offset: int, cache: SysvarCache) -> None:
    """Copy sysvar bytes into ``buffer`` without checking its layout."""
    cache.get_sysvar(buffer, SLOTHASHES_ID, offset)