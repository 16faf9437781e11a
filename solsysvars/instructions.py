"""Introspection of the instructions sysvar of the executing transaction."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from solsysvars.sysvar import PUBKEY_BYTES, ErrorCode, ProgramError

INSTRUCTIONS_ID = bytes(
    [
        0x06, 0xA7, 0xD5, 0x17, 0x18, 0x7B, 0xD1, 0x66, 0x35, 0xDA, 0xD4, 0x04,
        0x55, 0xFD, 0xC2, 0xC0, 0xC1, 0x24, 0xC6, 0x8F, 0x21, 0x56, 0x75, 0xA5,
        0xDB, 0xBA, 0xCB, 0x5F, 0x08, 0x00, 0x00, 0x00,
    ]
)
"""Instructions sysvar id ``Sysvar1nstructions1111111111111111111111111``."""

IS_SIGNER = 0b01
IS_WRITABLE = 0b10

_U16 = struct.Struct("<H")


def _read_u16(data: bytes, offset: int) -> int:
    if offset < 0 or offset + _U16.size > len(data):
        raise ProgramError(
            ErrorCode.ACCOUNT_DATA_TOO_SMALL,
            f"cannot read 2 bytes at offset {offset} of {len(data)}",
        )
    return _U16.unpack_from(data, offset)[0]


def _read_bytes(data: bytes, offset: int, length: int) -> bytes:
    end = offset + length
    if offset < 0 or end > len(data):
        raise ProgramError(
            ErrorCode.ACCOUNT_DATA_TOO_SMALL,
            f"cannot read {length} bytes at offset {offset} of {len(data)}",
        )
    return data[offset:end]


@dataclass(frozen=True)
class IntrospectedAccountMeta:
    """An account referenced by an introspected instruction."""

    flags: int
    key: bytes

    LEN: ClassVar[int] = 1 + PUBKEY_BYTES

    def is_writable(self) -> bool:
        """Whether the account is writable."""
        return bool(self.flags & IS_WRITABLE)

    def is_signer(self) -> bool:
        """Whether the account is a signer."""
        return bool(self.flags & IS_SIGNER)


@dataclass(frozen=True)
class IntrospectedInstruction:
    """A serialized instruction; ``raw`` starts at its account count."""

    raw: bytes

    def _num_accounts(self) -> int:
        return _read_u16(self.raw, 0)

    def get_account_meta_at(self, index: int) -> IntrospectedAccountMeta:
        """The account at ``index``; raises ``INVALID_ARGUMENT`` when out of range."""
        if index < 0 or index >= self._num_accounts():
            raise ProgramError(
                ErrorCode.INVALID_ARGUMENT, f"account index {index} out of range"
            )
        start = _U16.size + index * IntrospectedAccountMeta.LEN
        entry = _read_bytes(self.raw, start, IntrospectedAccountMeta.LEN)
        return IntrospectedAccountMeta(entry[0], entry[1:])

    def get_program_id(self) -> bytes:
        """The id of the program the instruction calls."""
        start = _U16.size + self._num_accounts() * IntrospectedAccountMeta.LEN
        return _read_bytes(self.raw, start, PUBKEY_BYTES)

    def get_instruction_data(self) -> bytes:
        """The instruction's data bytes."""
        length_at = (
            _U16.size
            + self._num_accounts() * IntrospectedAccountMeta.LEN
            + PUBKEY_BYTES
        )
        data_len = _read_u16(self.raw, length_at)
        return _read_bytes(self.raw, length_at + _U16.size, data_len)


class Instructions:
    """A view over instructions sysvar account data."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        """The raw sysvar data."""
        return self._data

    def num_instructions(self) -> int:
        """Number of instructions in the executing transaction."""
        return _read_u16(self._data, 0)

    def load_current_index(self) -> int:
        """Index of the currently executing instruction."""
        return _read_u16(self._data, len(self._data) - _U16.size)

    def load_instruction_at(self, index: int) -> IntrospectedInstruction:
        """The instruction at ``index``; raises ``INVALID_INSTRUCTION_DATA`` if absent."""
        if index < 0 or index >= self.num_instructions():
            raise ProgramError(
                ErrorCode.INVALID_INSTRUCTION_DATA,
                f"instruction index {index} out of range",
            )
        offset = _read_u16(self._data, _U16.size + index * _U16.size)
        if offset > len(self._data):
            raise ProgramError(
                ErrorCode.ACCOUNT_DATA_TOO_SMALL,
                f"instruction offset {offset} beyond data of {len(self._data)}",
            )
        return IntrospectedInstruction(self._data[offset:])

    def get_instruction_relative(
        self, index_relative_to_current: int
    ) -> IntrospectedInstruction:
        """The instruction at an offset from the current one."""
        index = self.load_current_index() + index_relative_to_current
        if index < 0:
            raise ProgramError(
                ErrorCode.INVALID_INSTRUCTION_DATA,
                f"relative index {index_relative_to_current} is before the first",
            )
        return self.load_instruction_at(index)