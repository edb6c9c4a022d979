import sys
import zlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from roverctl import lfsutil

u32 = st.integers(min_value=0, max_value=0xFFFFFFFF)


@given(st.binary(max_size=200))
def test_crc_matches_standard_crc32_with_inversion(data):
    assert lfsutil.crc(0xFFFFFFFF, data) ^ 0xFFFFFFFF == zlib.crc32(data)


@given(st.binary(max_size=64), st.binary(max_size=64))
def test_crc_is_incremental(first, second):
    partial = lfsutil.crc(0xFFFFFFFF, first)
    assert lfsutil.crc(partial, second) == lfsutil.crc(0xFFFFFFFF, first + second)


def test_crc_of_empty_keeps_seed():
    assert lfsutil.crc(0x12345678, b"") == 0x12345678


@given(st.integers(min_value=2, max_value=1 << 31))
def test_npw2_bounds(a):
    e = lfsutil.npw2(a)
    assert 2**e >= a
    assert 2 ** (e - 1) < a


@given(st.integers(min_value=0, max_value=31))
def test_npw2_exact_powers(e):
    assert lfsutil.npw2(1 << e) == e


@given(st.integers(min_value=1, max_value=0xFFFFFFFF))
def test_ctz_invariants(a):
    n = lfsutil.ctz(a)
    assert (a >> n) & 1 == 1
    assert a % (1 << n) == 0


def test_ctz_zero_rejected():
    with pytest.raises(ValueError):
        lfsutil.ctz(0)


@given(u32)
def test_popc_complement(a):
    assert lfsutil.popc(a) + lfsutil.popc(~a & 0xFFFFFFFF) == 32


def test_popc_all_ones():
    assert lfsutil.popc(0xFFFFFFFF) == 32


@given(st.integers(min_value=0, max_value=1 << 30), st.integers(min_value=1, max_value=4096))
def test_alignment(a, alignment):
    down = lfsutil.align_down(a, alignment)
    up = lfsutil.align_up(a, alignment)
    assert down % alignment == 0 and up % alignment == 0
    assert down <= a <= up
    assert a - down < alignment and up - a < alignment


@given(u32, st.integers(min_value=-1000, max_value=1000))
def test_scmp_distance(b, delta):
    a = (b + delta) & 0xFFFFFFFF
    assert lfsutil.scmp(a, b) == delta


@given(u32)
def test_le32_round_trip(a):
    assert lfsutil.to_le32(lfsutil.from_le32(a)) == a
    assert lfsutil.to_be32(lfsutil.from_be32(a)) == a


@given(st.binary(min_size=4, max_size=4))
def test_from_le32_reads_memory_as_little_endian(raw):
    word = int.from_bytes(raw, sys.byteorder)
    assert lfsutil.from_le32(word) == int.from_bytes(raw, "little")
    assert lfsutil.from_be32(word) == int.from_bytes(raw, "big")