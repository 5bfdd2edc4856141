"""
Unsigned LEB128 varints.

Every variable-size integer in the identity wire formats uses this encoding:

- protobuf field tags, the key type value and the key data length,
- multihash function codes and digest lengths,
- CID version and multicodec prefixes.

Each byte carries 7 bits of the value, least significant group first. The high bit
is set on every byte except the last::

    300 = 0b10_0101100  ->  [1|0101100] [0|0000010]  ->  b"\\xac\\x02"

Values are capped at 64 bits (10 bytes), matching protobuf. Decoding only accepts
the minimal encoding, so every value has exactly one wire form.

References:
    https://protobuf.dev/programming-guides/encoding/#varints
    https://github.com/multiformats/unsigned-varint
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "VarintError",
    "encode_varint",
    "decode_varint",
]

MAX_VARINT_BYTES: Final[int] = 10
"""A 64-bit value never needs more than 10 groups of 7 bits."""


class VarintError(ValueError):
    """Raised when a varint is truncated or too long."""


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as an unsigned varint.

    Args:
        value: Integer in [0, 2^64).

    Returns:
        Minimal varint encoding (1 to 10 bytes).

    Raises:
        ValueError: If value is negative or does not fit in 64 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value >= 1 << 64:
        raise ValueError("Varint must fit in 64 bits")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)

    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode one varint starting at `offset`.

    Args:
        data: Buffer holding the varint.
        offset: Position of its first byte.

    Returns:
        Tuple of (value, bytes_consumed).

    Raises:
        VarintError: If the buffer ends mid-varint, the varint exceeds 10 bytes or
            64 bits, or it carries trailing zero groups.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintError("Truncated varint")

        byte = data[pos]
        pos += 1

        result |= (byte & 0x7F) << shift
        shift += 7

        if not byte & 0x80:
            break

        if pos - offset >= MAX_VARINT_BYTES:
            raise VarintError("Varint too long")

    consumed = pos - offset
    if consumed > 1 and byte == 0:
        raise VarintError("Non-minimal varint")
    if result >= 1 << 64:
        raise VarintError("Varint exceeds 64 bits")

    return result, consumed
