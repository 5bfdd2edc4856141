"""Tests for unsigned varint encoding and decoding.

Vectors from the Protocol Buffers encoding guide, plus the lengths that appear
in identity encodings (Ed25519 keys, Dilithium keys and keypairs).
"""

from __future__ import annotations

import pytest

from libp2p_identity_pqc.varint import VarintError, decode_varint, encode_varint

VECTORS: list[tuple[int, bytes]] = [
    (0, b"\x00"),
    (1, b"\x01"),
    (0x12, b"\x12"),  # sha2-256 multihash code
    (32, b"\x20"),  # Ed25519 public key length
    (127, b"\x7f"),
    (128, b"\x80\x01"),
    (150, b"\x96\x01"),  # Protobuf documentation example
    (300, b"\xac\x02"),  # Protobuf documentation example
    (2592, b"\xa0\x14"),  # ML-DSA-87 public key length
    (7488, b"\xc0\x3a"),  # ML-DSA-87 keypair length
    (16383, b"\xff\x7f"),
    (16384, b"\x80\x80\x01"),
]


class TestEncodeVarint:
    """Tests for varint encoding."""

    @pytest.mark.parametrize(("value", "expected"), VECTORS)
    def test_encode(self, value: int, expected: bytes) -> None:
        """encode_varint produces the expected wire bytes."""
        assert encode_varint(value) == expected

    def test_negative_raises(self) -> None:
        """Negative values are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            encode_varint(-1)

    def test_over_64_bits_raises(self) -> None:
        """Values that need more than 64 bits are rejected."""
        with pytest.raises(ValueError, match="64 bits"):
            encode_varint(2**64)

    def test_64bit_max(self) -> None:
        """The largest 64-bit value takes exactly 10 bytes."""
        encoded = encode_varint(2**64 - 1)
        assert len(encoded) == 10
        assert decode_varint(encoded) == (2**64 - 1, 10)


class TestDecodeVarint:
    """Tests for varint decoding."""

    @pytest.mark.parametrize(("expected", "data"), VECTORS)
    def test_decode(self, expected: int, data: bytes) -> None:
        """decode_varint reconstructs the value and reports bytes consumed."""
        assert decode_varint(data) == (expected, len(data))

    def test_decode_at_offset(self) -> None:
        """Decoding starts at the given offset and ignores trailing bytes."""
        assert decode_varint(b"\x08\x04\x12\xa0\x14rest", 3) == (2592, 2)

    def test_truncated_raises(self) -> None:
        """A continuation bit on the final byte raises."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"\xa0")

    def test_empty_raises(self) -> None:
        """Empty input raises."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"")

    def test_too_long_raises(self) -> None:
        """More than 10 bytes raises."""
        with pytest.raises(VarintError, match="too long"):
            decode_varint(b"\x80" * 11)

    def test_error_is_value_error(self) -> None:
        """VarintError can be caught as ValueError."""
        assert issubclass(VarintError, ValueError)

    @pytest.mark.parametrize("data", [b"\x80\x00", b"\x81\x00", b"\xff\x80\x00"])
    def test_non_minimal_raises(self, data: bytes) -> None:
        """Trailing zero groups are not a valid encoding."""
        with pytest.raises(VarintError, match="Non-minimal"):
            decode_varint(data)

    def test_value_over_64_bits_raises(self) -> None:
        """Ten bytes holding more than 64 bits raise."""
        with pytest.raises(VarintError, match="64 bits"):
            decode_varint(b"\xff" * 9 + b"\x7f")
        with pytest.raises(VarintError, match="64 bits"):
            decode_varint(b"\x80" * 9 + b"\x02")
