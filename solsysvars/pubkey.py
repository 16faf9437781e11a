"""Public key helpers: base58 parsing, program ids and address derivation."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from solsysvars.sysvar import PUBKEY_BYTES

MAX_SEEDS = 16
"""Maximum number of seeds a program address may be derived from."""

PDA_MARKER = b"ProgramDerivedAddress"
"""Marker appended to the seeds when hashing a program derived address."""

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_DIGITS = {char: value for value, char in enumerate(_ALPHABET)}


def _as_pubkey(value: bytes, what: str) -> bytes:
    key = bytes(value)
    if len(key) != PUBKEY_BYTES:
        raise ValueError(f"{what} must be {PUBKEY_BYTES} bytes, got {len(key)}")
    return key


def from_str(value: str) -> bytes:
    """Decode a base58 string into a 32-byte public key."""
    number = 0
    for char in value:
        try:
            number = number * 58 + _DIGITS[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    leading_zeros = len(value) - len(value.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    decoded = b"\x00" * leading_zeros + body
    if len(decoded) != PUBKEY_BYTES:
        raise ValueError(
            f"base58 string decodes to {len(decoded)} bytes, expected {PUBKEY_BYTES}"
        )
    return decoded


def derive_address(
    seeds: Sequence[bytes], bump: int | None, program_id: bytes
) -> bytes:
    """Hash seeds, optional bump, program id and marker into a program address.

    The result is not checked to lie off the curve; the caller must know the
    seeds and bump describe a valid program derived address.
    """
    if len(seeds) >= MAX_SEEDS:
        raise ValueError(f"number of seeds must be less than {MAX_SEEDS}")
    program_key = _as_pubkey(program_id, "program id")
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(bytes(seed))
    if bump is not None:
        if not 0 <= bump <= 0xFF:
            raise ValueError(f"bump must fit in a byte, got {bump}")
        hasher.update(bytes([bump]))
    hasher.update(program_key)
    hasher.update(PDA_MARKER)
    return hasher.digest()


class ProgramId:
    """A program's id, with a check for whether a key is that program."""

    __slots__ = ("_key",)

    def __init__(self, value: str | bytes) -> None:
        if isinstance(value, str):
            self._key = from_str(value)
        else:
            self._key = _as_pubkey(value, "program id")

    @property
    def id(self) -> bytes:
        """The program id as 32 bytes."""
        return self._key

    def __bytes__(self) -> bytes:
        return self._key

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ProgramId):
            return self._key == other._key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"ProgramId({self._key.hex()})"

    def check_id(self, key: bytes) -> bool:
        """Whether ``key`` is this program id."""
        return bytes(key) == self._key