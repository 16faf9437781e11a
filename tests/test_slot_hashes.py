import struct

import pytest

from solsysvars.pubkey import from_str
from solsysvars.slot_hashes import (
    ENTRY_SIZE,
    HASH_BYTES,
    MAX_ENTRIES,
    MAX_SIZE,
    NUM_ENTRIES_SIZE,
    SLOTHASHES_ID,
    SlotHashEntry,
    SlotHashes,
    read_entry_count_from_bytes,
)
from solsysvars.sysvar import ErrorCode, ProgramError, SysvarCache


def simple_prng(seed):
    s = seed or 1
    return (16_807 * s) % 2_147_483_647


def generate_mock_entries(num_entries, start_slot, strategy="strictly1"):
    entries = []
    current = start_slot
    for i in range(num_entries):
        entries.append((current, bytes([i % 256]) * HASH_BYTES))
        random_val = simple_prng(i)
        if strategy == "strictly1":
            dec = 1
        elif strategy == "average1_05":
            dec = 2 if random_val % 20 == 0 else 1
        else:
            dec = 1 if random_val % 2 == 0 else 3
        current = max(current - dec, 0)
    return entries


def build_slot_hashes_bytes(declared_len, entries):
    data = bytearray(MAX_SIZE)
    struct.pack_into("<Q", data, 0, declared_len)
    for i, (slot, hash_) in enumerate(entries):
        struct.pack_into(f"<Q{HASH_BYTES}s", data, NUM_ENTRIES_SIZE + i * ENTRY_SIZE, slot, hash_)
    return bytes(data)


def create_mock_data(entries):
    return build_slot_hashes_bytes(len(entries), entries)


def test_sysvar_id_matches_base58():
    assert from_str("SysvarS1otHashes111111111111111111111111111") == SLOTHASHES_ID


def test_binary_search():
    start = 2000
    entries = generate_mock_entries(512, start, "average1_05")
    sh = SlotHashes(create_mock_data(entries))
    count = len(entries)
    mid = count // 2

    assert sh.position(entries[0][0]) == 0
    assert sh.position(entries[mid][0]) == mid
    assert sh.position(entries[count - 1][0]) == count - 1
    assert sh.position(start + 1) is None

    missing = next(
        later[0] + 1
        for earlier, later in zip(entries, entries[1:])
        if earlier[0] > later[0] + 1
    )
    assert sh.position(missing) is None

    assert sh.get_hash(entries[0][0]) == entries[0][1]
    assert sh.get_hash(entries[mid][0]) == entries[mid][1]
    assert sh.get_hash(entries[count - 1][0]) == entries[count - 1][1]
    assert sh.get_hash(start + 1) is None

    empty = SlotHashes(create_mock_data([]))
    assert empty.get_hash(100) is None


def test_basic_getters_and_iterator():
    start = 2000
    entries = generate_mock_entries(512, start)
    sh = SlotHashes(create_mock_data(entries))

    assert len(sh) == 512
    first = sh.get_entry(0)
    assert first.slot == start
    assert first.hash == bytes(HASH_BYTES)
    last = sh.get_entry(511)
    assert (last.slot, last.hash) == entries[511]
    assert sh.get_entry(512) is None

    assert [(e.slot, e.hash) for e in sh] == entries

    empty = SlotHashes(create_mock_data([]))
    assert len(empty) == 0
    assert empty.get_entry(0) is None
    assert next(iter(empty), None) is None


def test_get_entry_negative_index_is_none():
    sh = SlotHashes(create_mock_data([(100, b"\x01" * HASH_BYTES)]))
    assert sh.get_entry(-1) is None


def test_entry_count_with_exact_size_buffer():
    entries = [(100, b"\x01" * HASH_BYTES), (98, b"\x02" * HASH_BYTES)]
    exact = create_mock_data(entries)[: NUM_ENTRIES_SIZE + 2 * ENTRY_SIZE]
    sh = SlotHashes(exact)
    assert len(sh) == 2
    assert sh.get_entry(1) == SlotHashEntry(98, b"\x02" * HASH_BYTES)


def test_get_entry_single():
    sh = SlotHashes(create_mock_data([(100, b"\x01" * HASH_BYTES)]))
    entry = sh.get_entry(0)
    assert entry.slot == 100
    assert entry.hash == b"\x01" * HASH_BYTES


def test_get_entry_last():
    entries = generate_mock_entries(8, 600)
    sh = SlotHashes(create_mock_data(entries))
    last = sh.get_entry(7)
    assert (last.slot, last.hash) == entries[7]


def test_iterator_sum():
    entries = generate_mock_entries(16, 100)
    sh = SlotHashes(create_mock_data(entries))
    assert sum(e.slot for e in sh) == sum(slot for slot, _ in entries)
    assert len(list(sh)) == len(sh)


def test_max_entries_boundary():
    entries = generate_mock_entries(MAX_ENTRIES, 1000)
    sh = SlotHashes(create_mock_data(entries))
    assert len(sh) == MAX_ENTRIES


def test_entry_from_bytes_layout():
    data = create_mock_data([(100, b"\xab" * 32)])
    entry = SlotHashEntry.from_bytes(data[NUM_ENTRIES_SIZE:NUM_ENTRIES_SIZE + ENTRY_SIZE])
    assert entry == SlotHashEntry(100, b"\xab" * 32)


def test_entry_from_short_bytes_rejected():
    with pytest.raises(ProgramError) as info:
        SlotHashEntry.from_bytes(b"\x00" * (ENTRY_SIZE - 1))
    assert info.value.code is ErrorCode.INVALID_ARGUMENT


def test_entries_exposed():
    entries = generate_mock_entries(8, 80)
    sh = SlotHashes(create_mock_data(entries))
    slice_ = sh.entries()
    assert len(slice_) == len(entries)
    assert [(e.slot, e.hash) for e in slice_] == entries


def test_get_entry_consistent_with_entries():
    entries = generate_mock_entries(16, 200)
    sh = SlotHashes(create_mock_data(entries))
    assert [sh.get_entry(i) for i in range(len(entries))] == list(sh.entries())
    assert len(sh) == len(entries)


@pytest.mark.parametrize(
    "data, expected",
    [
        ((42).to_bytes(8, "little") + bytes(8), 42),
        ((0).to_bytes(8, "little"), 0),
        (MAX_ENTRIES.to_bytes(8, "little"), MAX_ENTRIES),
        (bytes(4), None),
    ],
)
def test_read_entry_count_from_bytes(data, expected):
    assert read_entry_count_from_bytes(data) == expected


def test_header_too_short():
    with pytest.raises(ProgramError) as info:
        SlotHashes(bytes(4))
    assert info.value.code is ErrorCode.ACCOUNT_DATA_TOO_SMALL


def test_wrong_size_buffer_rejected():
    required = NUM_ENTRIES_SIZE + ENTRY_SIZE
    small = (1).to_bytes(8, "little") + bytes(required - 1 - NUM_ENTRIES_SIZE)
    with pytest.raises(ProgramError) as info:
        SlotHashes(small)
    assert info.value.code is ErrorCode.ACCOUNT_DATA_TOO_SMALL

    with pytest.raises(ProgramError) as info:
        SlotHashes(bytes(NUM_ENTRIES_SIZE - 1))
    assert info.value.code is ErrorCode.ACCOUNT_DATA_TOO_SMALL


def test_truncated_payload_with_max_size_buffer_is_valid():
    sh = SlotHashes(build_slot_hashes_bytes(2, [(123, b"\x07" * HASH_BYTES)]))
    assert len(sh) == 2
    assert sh.get_entry(0) == SlotHashEntry(123, b"\x07" * HASH_BYTES)
    assert sh.get_entry(1) == SlotHashEntry(0, bytes(HASH_BYTES))


def test_duplicate_slots_binary_search_safe():
    entries = [
        (200, bytes(HASH_BYTES)),
        (200, b"\x01" * HASH_BYTES),
        (199, b"\x02" * HASH_BYTES),
    ]
    sh = SlotHashes(build_slot_hashes_bytes(3, entries))
    assert sh.position(200) in (0, 1)
    assert sh.get_hash(199) == entries[2][1]


def test_zero_len_iterates_empty():
    sh = SlotHashes(build_slot_hashes_bytes(0, []))
    assert len(sh) == 0
    assert sh.is_empty()
    assert list(sh) == []


def test_is_empty_false_with_entries():
    sh = SlotHashes(create_mock_data(generate_mock_entries(3, 10)))
    assert not sh.is_empty()


def test_fetch_reads_from_cache():
    entries = generate_mock_entries(5, 500)
    cache = SysvarCache({SLOTHASHES_ID: create_mock_data(entries)})
    sh = SlotHashes.fetch(cache)
    assert len(sh.data) == MAX_SIZE
    assert len(sh) == 5
    assert [(e.slot, e.hash) for e in sh] == entries


def test_fetch_unknown_sysvar():
    with pytest.raises(ProgramError) as info:
        SlotHashes.fetch(SysvarCache())
    assert info.value.code is ErrorCode.UNSUPPORTED_SYSVAR


def test_fetch_short_sysvar_data():
    cache = SysvarCache({SLOTHASHES_ID: bytes(NUM_ENTRIES_SIZE)})
    with pytest.raises(ProgramError) as info:
        SlotHashes.fetch(cache)
    assert info.value.code is ErrorCode.INVALID_ARGUMENT