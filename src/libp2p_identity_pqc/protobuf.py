"""
libp2p-crypto protobuf envelope for keys.

Both public keys and keypairs travel in the same two-field message
(from libp2p's crypto.proto)::

    message PublicKey {
        required KeyType Type = 1;   // field 1, varint
        required bytes Data = 2;     // field 2, length-delimited
    }

    message PrivateKey {
        required KeyType Type = 1;
        required bytes Data = 2;
    }

Canonical wire format, the only one produced by `encode()`::

    [0x08][type_varint][0x12][length_varint][key_bytes]

    - 0x08 = (1 << 3) | 0  -> field 1, wire type varint
    - 0x12 = (2 << 3) | 2  -> field 2, wire type length-delimited

Decoding follows protobuf rules: fields may arrive in any order, a repeated field
keeps its last value, and unknown fields are skipped. Re-encoding a decoded message
therefore always yields the canonical form above.

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md#keys
    - https://protobuf.dev/programming-guides/encoding/
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from typing_extensions import Self

from .exceptions import DecodingError, UnsupportedKeyTypeError
from .key_type import KeyType
from .varint import VarintError, decode_varint, encode_varint

__all__ = [
    "PublicKeyProto",
    "PrivateKeyProto",
]


class _WireType(IntEnum):
    """Protobuf wire types that may appear in a key message."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


_TYPE_FIELD: Final[int] = 1
"""Field number of `Type`."""

_DATA_FIELD: Final[int] = 2
"""Field number of `Data`."""

_TYPE_TAG: Final[bytes] = encode_varint((_TYPE_FIELD << 3) | _WireType.VARINT)
"""Encoded tag for `Type` (0x08)."""

_DATA_TAG: Final[bytes] = encode_varint((_DATA_FIELD << 3) | _WireType.LENGTH_DELIMITED)
"""Encoded tag for `Data` (0x12)."""


def _read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Decode a varint, reporting failures as envelope decoding errors."""
    try:
        return decode_varint(data, offset)
    except VarintError as e:
        raise DecodingError(None, f"{e} at byte offset {offset}") from e


def _read_length_delimited(data: bytes, offset: int) -> tuple[bytes, int]:
    """Read a length-prefixed value. Returns (value, new_offset)."""
    length, consumed = _read_varint(data, offset)
    start = offset + consumed
    end = start + length
    if end > len(data):
        raise DecodingError(
            None, f"length-delimited field needs {length} bytes, only {len(data) - start} left"
        )
    return data[start:end], end


@dataclass(frozen=True, slots=True)
class _KeyProto:
    """
    A key in libp2p-crypto protobuf format.

    Attributes:
        key_type: Algorithm of the key.
        key_data: Algorithm-specific key payload, stored verbatim.
    """

    key_type: KeyType
    """Key algorithm type."""

    key_data: bytes
    """Raw key bytes (format depends on key_type)."""

    def encode(self) -> bytes:
        """
        Encode as canonical protobuf.

        Fields are minimally encoded and written in field-number order, so equal
        messages always produce identical bytes.

        Returns:
            Protobuf-encoded key message.
        """
        type_field = _TYPE_TAG + encode_varint(self.key_type)
        data_field = _DATA_TAG + encode_varint(len(self.key_data)) + self.key_data
        return type_field + data_field

    @classmethod
    def decode(cls, data: bytes) -> Self:
        """
        Decode a protobuf key message.

        Args:
            data: Protobuf-encoded key message.

        Returns:
            Decoded message. `key_data` is not validated here; that is the job of
            the algorithm adapter for `key_type`.

        Raises:
            UnsupportedKeyTypeError: If `Type` is absent or not a known key type.
            DecodingError: If the message is structurally malformed.
        """
        data = bytes(data)
        raw_type: int | None = None
        key_data = b""

        offset = 0
        while offset < len(data):
            tag, consumed = _read_varint(data, offset)
            offset += consumed

            field_number, wire_type = tag >> 3, tag & 0x07

            if field_number == 0:
                raise DecodingError(None, "invalid field number 0")

            if field_number == _TYPE_FIELD:
                if wire_type != _WireType.VARINT:
                    raise DecodingError(None, f"Type field has wire type {wire_type}")
                raw_type, consumed = _read_varint(data, offset)
                offset += consumed

            elif field_number == _DATA_FIELD:
                if wire_type != _WireType.LENGTH_DELIMITED:
                    raise DecodingError(None, f"Data field has wire type {wire_type}")
                key_data, offset = _read_length_delimited(data, offset)

            else:
                offset = cls._skip_field(data, offset, wire_type)

        if raw_type is None:
            raise UnsupportedKeyTypeError(None)

        try:
            key_type = KeyType(raw_type)
        except ValueError:
            raise UnsupportedKeyTypeError(raw_type) from None

        return cls(key_type=key_type, key_data=key_data)

    @staticmethod
    def _skip_field(data: bytes, offset: int, wire_type: int) -> int:
        """Skip over an unknown field. Returns the offset just past it."""
        match wire_type:
            case _WireType.VARINT:
                _, consumed = _read_varint(data, offset)
                return offset + consumed
            case _WireType.LENGTH_DELIMITED:
                _, offset = _read_length_delimited(data, offset)
                return offset
            case _WireType.FIXED64 | _WireType.FIXED32:
                width = 8 if wire_type == _WireType.FIXED64 else 4
                if offset + width > len(data):
                    raise DecodingError(None, "truncated fixed-width field")
                return offset + width
            case _:
                raise DecodingError(None, f"unsupported wire type {wire_type}")


class PublicKeyProto(_KeyProto):
    """`PublicKey` message: `key_data` holds the public key only."""

    __slots__ = ()


class PrivateKeyProto(_KeyProto):
    """`PrivateKey` message: `key_data` holds the adapter's keypair encoding."""

    __slots__ = ()
