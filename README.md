# solsysvars

Read Solana sysvar account data from plain bytes. The package has no
dependencies outside the standard library and makes no network calls.

## What is in it

- `solsysvars.sysvar`: `SysvarCache` holds the raw bytes of each sysvar
  account, keyed by its 32-byte id. Use `set(sysvar_id, data)` to fill it.
  `get_sysvar(dst, sysvar_id, offset)` copies `len(dst)` bytes into a writable
  buffer. Every failure raises `ProgramError`, and its `code` attribute holds an
  `ErrorCode`: `INVALID_ARGUMENT`, `INVALID_INSTRUCTION_DATA`,
  `ACCOUNT_DATA_TOO_SMALL`, `ACCOUNT_BORROW_FAILED` or `UNSUPPORTED_SYSVAR`.
- `solsysvars.clock`: `Clock` with `slot`, `epoch_start_timestamp`, `epoch`,
  `leader_schedule_epoch` and `unix_timestamp`. It also provides
  `from_bytes`, `to_bytes`, `from_sysvar(cache)` and the constant `CLOCK_ID`.
  `from_sysvar` raises `UNSUPPORTED_SYSVAR` if the cache cannot supply the data.
- `solsysvars.fees`: `FeeCalculator`, `FeeRateGovernor` and `Fees`.
  `FeeRateGovernor` has defaults, `create_fee_calculator()` and
  `burn(fees)`, which returns `(unburned, burned)`.
- `solsysvars.rent`: `Rent` with `from_bytes`, `to_bytes`,
  `minimum_balance`, `is_exempt`, `due`, `due_amount` and `calculate_burn`.
  `calculate_burn` returns `(burned, distributed)`. `due` returns a `RentDue`,
  which is either `RentDue.EXEMPT` or carries the lamports owed. `RentDue`
  has `lamports()` and `is_exempt()`.
- `solsysvars.instructions`: `Instructions(data)` wraps the data of the
  instructions sysvar. It has `num_instructions()`, `load_current_index()`,
  `load_instruction_at(index)` and `get_instruction_relative(delta)`, each
  returning an `IntrospectedInstruction`. An `IntrospectedInstruction` has
  `get_account_meta_at(index)`, `get_program_id()` and
  `get_instruction_data()`. An `IntrospectedAccountMeta` has
  `is_signer()` and `is_writable()`.
- `solsysvars.slot_hashes`: `SlotHashes(data)` validates the header and
  length, then gives a read-only view. It supports `len()`, iteration and
  `entries()`, plus `get_entry(index)`, `get_hash(slot)` and `position(slot)`.
  `position` is a binary search that expects slots in descending order.
  `SlotHashes.fetch(cache)` copies the full `MAX_SIZE` (20 488) bytes, so the
  cached data must be at least that long. The module also provides
  `SlotHashEntry` and `read_entry_count_from_bytes`.
- `solsysvars.slot_hashes_raw`: copies slot hashes bytes into your own buffer.
  - `fetch_into(buffer, offset, cache)` checks the buffer layout and offset.
    At offset 0 it returns the entry count from the header. At any other
    offset it returns the number of entries the buffer holds.
  - `fetch_into_unchecked` copies without those checks.
  - `get_valid_buffer_capacity` and `validate_fetch_offset` expose the checks.
- `solsysvars.pubkey`: `from_str` decodes a base58 string into 32 bytes.
  `derive_address(seeds, bump, program_id)` hashes the seeds, the optional
  bump, the program id and `PDA_MARKER` with SHA-256. It allows fewer than
  `MAX_SEEDS` seeds. `ProgramId` holds a program id and offers
  `check_id(key)`.

## Install

    pip install solsysvars

## Examples

Rent:

    from solsysvars.rent import Rent

    rent = Rent.from_bytes(rent_account_bytes)
    needed = rent.minimum_balance(165)
    print(rent.is_exempt(2_039_280, 165))

Slot hashes from a cache:

    from solsysvars.sysvar import SysvarCache
    from solsysvars.slot_hashes import SlotHashes, SLOTHASHES_ID

    cache = SysvarCache()
    cache.set(SLOTHASHES_ID, slot_hashes_account_bytes)  # at least 20 488 bytes

    hashes = SlotHashes.fetch(cache)
    print(len(hashes), hashes.position(1234))
    for entry in hashes:
        print(entry.slot, entry.hash.hex())

Program addresses:

    from solsysvars.pubkey import derive_address, from_str

    program_id = from_str("SysvarS1otHashes111111111111111111111111111")
    address = derive_address([b"vault"], 255, program_id)

## What it does not do

- It does not fetch account data from a cluster. You supply the bytes yourself.
- `derive_address` does not check whether the result lies off the curve.
  Use it only with seeds and a bump already known to give a valid address.
- `Fees` has no byte decoding and cannot be loaded from a `SysvarCache`.
- There is no command-line tool.

## Tests

    pip install -e ".[test]"
    pytest