"""Small 32-bit integer helpers and the nibble-table CRC-32 used by the log filesystem."""

from __future__ import annotations

import sys
from collections.abc import Iterable

_MASK32 = 0xFFFFFFFF

_CRC_TABLE = (
    0x00000000, 0x1DB71064, 0x3B6E20C8, 0x26D930AC,
    0x76DC4190, 0x6B6B51F4, 0x4DB26158, 0x5005713C,
    0xEDB88320, 0xF00F9344, 0xD6D6A3E8, 0xCB61B38C,
    0x9B64C2B0, 0x86D3D2D4, 0xA00AE278, 0xBDBDF21C,
)


def crc(crc: int, data: bytes | bytearray | memoryview | Iterable[int]) -> int:
    """Continue a reflected CRC-32 (polynomial 0x04c11db7) over ``data``.

    No initial or final inversion is applied; the caller chooses the seed.
    """
    value = crc & _MASK32
    for byte in bytes(data):
        value = (value >> 4) ^ _CRC_TABLE[(value ^ byte) & 0xF]
        value = (value >> 4) ^ _CRC_TABLE[(value ^ (byte >> 4)) & 0xF]
    return value


def npw2(a: int) -> int:
    """Return the exponent of the smallest power of two greater than or equal to ``a``."""
    return ((a - 1) & _MASK32).bit_length()


def ctz(a: int) -> int:
    """Count the trailing zero bits of a non-zero 32-bit value."""
    a &= _MASK32
    if a == 0:
        raise ValueError("ctz is undefined for zero")
    return (a & -a).bit_length() - 1


def popc(a: int) -> int:
    """Count the set bits of a 32-bit value."""
    return bin(a & _MASK32).count("1")


def align_down(a: int, alignment: int) -> int:
    """Round ``a`` down to a multiple of ``alignment``."""
    return a - (a % alignment)


def align_up(a: int, alignment: int) -> int:
    """Round ``a`` up to a multiple of ``alignment``."""
    return align_down(a + alignment - 1, alignment)


def scmp(a: int, b: int) -> int:
    """Sequence comparison: the signed 32-bit distance from ``b`` to ``a``."""
    diff = (a - b) & _MASK32
    return diff - (1 << 32) if diff & 0x80000000 else diff


def _reinterpret(a: int, stored: str) -> int:
    raw = (a & _MASK32).to_bytes(4, sys.byteorder)
    return int.from_bytes(raw, stored)


def from_le32(a: int) -> int:
    """Convert a 32-bit word holding little-endian bytes to native order."""
    return _reinterpret(a, "little")


def to_le32(a: int) -> int:
    """Convert a native 32-bit value to little-endian byte order."""
    return from_le32(a)


def from_be32(a: int) -> int:
    """Convert a 32-bit word holding big-endian bytes to native order."""
    return _reinterpret(a, "big")


def to_be32(a: int) -> int:
    """Convert a native 32-bit value to big-endian byte order."""
    return from_be32(a)