"""Parse and query Solana sysvar account data: clock, fees, rent, instructions and slot hashes."""

__version__ = "0.9.1"

__all__ = [
    "clock",
    "fees",
    "instructions",
    "pubkey",
    "rent",
    "slot_hashes",
    "slot_hashes_raw",
    "sysvar",
]