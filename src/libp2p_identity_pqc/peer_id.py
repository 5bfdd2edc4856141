"""
PeerId derivation from public keys.

A PeerId is a multihash over the protobuf-encoded public key:

    1. Encode the public key as a libp2p-crypto `PublicKey` message -> E
    2. If len(E) <= 42: PeerId = multihash(identity, E)
    3. Otherwise:       PeerId = multihash(sha2-256, sha256(E))

The rule only looks at the encoded length, never at the algorithm:

    ===========  ===============  =========
    Key type     len(E)           Multihash
    ===========  ===============  =========
    Ed25519      36               identity
    secp256k1    37               identity
    ECDSA P-256  95               sha2-256
    RSA 2048     ~300             sha2-256
    Dilithium    2,597            sha2-256
    ===========  ===============  =========

Identity PeerIds embed the key, so the key can be recovered from the PeerId alone.
Digest PeerIds cannot be reversed; the peer must present its key separately.

Multihash format:
    [code varint][digest length varint][digest]

Text forms:
    - Legacy: base58btc of the raw multihash ("12D3KooW...", "16Uiu2...", "Qm...").
    - CIDv1: multibase base32 ("b" prefix) of [0x01][0x72 libp2p-key][multihash].

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md
    - https://github.com/multiformats/multihash
    - https://github.com/multiformats/cid
"""

from __future__ import annotations

import base64
import hashlib
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Final

from .exceptions import DecodingError, ParseError
from .varint import VarintError, decode_varint, encode_varint

if TYPE_CHECKING:
    from .public_key import PublicKey

__all__ = [
    # Main types
    "PeerId",
    "Multihash",
    # Enums
    "MultihashCode",
    # Utility classes
    "Base58",
    # Constants
    "MAX_INLINE_KEY_LENGTH",
]


MAX_INLINE_KEY_LENGTH: Final[int] = 42
"""
Largest encoded public key that is embedded with the identity multihash.

Fixed by the libp2p PeerId spec. Ed25519 (36 bytes) and secp256k1 (37 bytes)
keys fit; every other key type, post-quantum keys included, is hashed.
"""

_SHA256_DIGEST_LENGTH: Final[int] = 32

_CID_VERSION: Final[int] = 1
"""CID version used for the textual PeerId form."""

_LIBP2P_KEY_CODEC: Final[int] = 0x72
"""Multicodec `libp2p-key`, the content type of a PeerId CID."""

_MULTIBASE_BASE32: Final[str] = "b"
"""Multibase prefix for lowercase, unpadded RFC 4648 base32."""


class MultihashCode(IntEnum):
    """
    Multihash function codes.

    See: https://github.com/multiformats/multicodec/blob/master/table.csv
    """

    IDENTITY = 0x00
    """Identity "hash": the digest is the input itself."""

    SHA256 = 0x12
    """SHA2-256 (32-byte digest)."""


class Base58:
    """
    Base58btc encoding (Bitcoin alphabet).

    The alphabet omits 0, O, I and l. Leading zero bytes map to leading '1's.
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """Encode bytes as a Base58 string."""
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []
        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend(cls.ALPHABET[0] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode a Base58 string.

        Raises:
            ValueError: If the string contains a character outside the alphabet.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
        return b"\x00" * leading_ones + body


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A self-describing hash.

    Attributes:
        code: Hash function identifier.
        digest: Hash output (the raw input for identity).
    """

    code: MultihashCode
    """Hash function used."""

    digest: bytes
    """Hash output or identity data."""

    def encode(self) -> bytes:
        """Encode as `[code][length][digest]`."""
        return encode_varint(self.code) + encode_varint(len(self.digest)) + self.digest

    @classmethod
    def decode(cls, data: bytes) -> Multihash:
        """
        Decode multihash bytes.

        Args:
            data: Exactly one encoded multihash, with nothing after it.

        Returns:
            The decoded multihash.

        Raises:
            ParseError: If the bytes are truncated, carry trailing data, use an
                unsupported hash function or a digest of the wrong size.
        """
        try:
            code, consumed = decode_varint(data)
            length, length_size = decode_varint(data, consumed)
        except VarintError as e:
            raise ParseError(f"Invalid multihash: {e}") from e

        digest = bytes(data[consumed + length_size :])
        if len(digest) != length:
            raise ParseError(f"Multihash declares {length} digest bytes, found {len(digest)}")

        try:
            hash_code = MultihashCode(code)
        except ValueError:
            raise ParseError(f"Unsupported multihash code 0x{code:x}") from None

        if hash_code == MultihashCode.SHA256 and length != _SHA256_DIGEST_LENGTH:
            raise ParseError(f"sha2-256 digest must be 32 bytes, got {length}")

        return cls(code=hash_code, digest=digest)

    @classmethod
    def identity(cls, data: bytes) -> Multihash:
        """Wrap data unchanged."""
        return cls(code=MultihashCode.IDENTITY, digest=bytes(data))

    @classmethod
    def sha256(cls, data: bytes) -> Multihash:
        """Hash data with SHA2-256."""
        return cls(code=MultihashCode.SHA256, digest=hashlib.sha256(data).digest())

    @classmethod
    def from_data(cls, data: bytes) -> Multihash:
        """
        Choose the multihash for an encoded public key.

        Returns:
            Identity multihash if `len(data) <= MAX_INLINE_KEY_LENGTH`,
            SHA2-256 multihash otherwise.
        """
        if len(data) <= MAX_INLINE_KEY_LENGTH:
            return cls.identity(data)
        return cls.sha256(data)


@dataclass(frozen=True, slots=True)
class PeerId:
    """
    A libp2p peer identifier.

    Equality is byte equality of the multihash. Construct it with
    `from_public_key()` or one of the parsers; they all validate the multihash.

    Attributes:
        multihash: The raw multihash bytes.
    """

    multihash: bytes
    """Raw multihash bytes (before any text encoding)."""

    def __str__(self) -> str:
        """Return the legacy Base58 form."""
        return Base58.encode(self.multihash)

    def __repr__(self) -> str:
        return f"PeerId({self!s})"

    def to_base58(self) -> str:
        """Return the legacy Base58 form."""
        return Base58.encode(self.multihash)

    def to_cid(self) -> str:
        """
        Return the CIDv1 form: multibase base32 over `libp2p-key` CID bytes.

        Returns:
            String starting with "b".
        """
        cid = encode_varint(_CID_VERSION) + encode_varint(_LIBP2P_KEY_CODEC) + self.multihash
        body = base64.b32encode(cid).decode("ascii").rstrip("=").lower()
        return _MULTIBASE_BASE32 + body

    def to_bytes(self) -> bytes:
        """Return the raw multihash bytes."""
        return self.multihash

    @property
    def hash_code(self) -> MultihashCode:
        """Hash function of the underlying multihash."""
        return Multihash.decode(self.multihash).code

    @classmethod
    def from_bytes(cls, data: bytes) -> PeerId:
        """
        Parse raw multihash bytes.

        Raises:
            ParseError: If the multihash is invalid, or is an identity multihash
                longer than `MAX_INLINE_KEY_LENGTH`.
        """
        mh = Multihash.decode(data)
        if mh.code == MultihashCode.IDENTITY and len(mh.digest) > MAX_INLINE_KEY_LENGTH:
            raise ParseError(
                f"Identity multihash of {len(mh.digest)} bytes exceeds "
                f"{MAX_INLINE_KEY_LENGTH}-byte inline limit"
            )
        return cls(multihash=bytes(data))

    @classmethod
    def from_base58(cls, s: str) -> PeerId:
        """
        Parse the legacy Base58 form.

        Raises:
            ParseError: If the string is not Base58 or not a valid PeerId multihash.
        """
        try:
            data = Base58.decode(s)
        except ValueError as e:
            raise ParseError(str(e)) from e
        return cls.from_bytes(data)

    @classmethod
    def from_cid(cls, s: str) -> PeerId:
        """
        Parse the CIDv1 form.

        Raises:
            ParseError: If the string is not base32 multibase, not CIDv1, or not
                tagged `libp2p-key`.
        """
        if not s.startswith(_MULTIBASE_BASE32):
            raise ParseError(f"Unsupported multibase prefix {s[:1]!r}")

        body = s[1:].upper()
        try:
            cid = base64.b32decode(body + "=" * (-len(body) % 8))
        except ValueError as e:
            raise ParseError(f"Invalid base32: {e}") from e

        try:
            version, consumed = decode_varint(cid)
            codec, codec_size = decode_varint(cid, consumed)
        except VarintError as e:
            raise ParseError(f"Invalid CID: {e}") from e

        if version != _CID_VERSION:
            raise ParseError(f"Unsupported CID version {version}")
        if codec != _LIBP2P_KEY_CODEC:
            raise ParseError(f"CID codec 0x{codec:x} is not libp2p-key")

        return cls.from_bytes(cid[consumed + codec_size :])

    @classmethod
    def from_string(cls, s: str) -> PeerId:
        """
        Parse either text form.

        Strings starting with "1" or "Qm" are legacy Base58 multihashes,
        everything else is read as a multibase CID.
        """
        if s.startswith(("1", "Qm")):
            return cls.from_base58(s)
        return cls.from_cid(s)

    @classmethod
    def from_public_key(cls, public_key: PublicKey) -> PeerId:
        """
        Derive the PeerId of a public key.

        Args:
            public_key: Key of any algorithm.

        Returns:
            Identity PeerId for encodings up to 42 bytes, SHA2-256 PeerId otherwise.
        """
        encoded = public_key.to_protobuf_encoding()
        return cls(multihash=Multihash.from_data(encoded).encode())

    @classmethod
    def random(cls) -> PeerId:
        """Return an identity PeerId over 32 random bytes. For tests and placeholders."""
        return cls(multihash=Multihash.identity(os.urandom(32)).encode())

    def to_public_key(self) -> PublicKey | None:
        """
        Recover the public key embedded in an identity PeerId.

        Returns:
            The embedded key, or None for SHA2-256 PeerIds (and for identity
            PeerIds whose payload is not a valid key, such as `random()` ones).
        """
        from .public_key import PublicKey

        mh = Multihash.decode(self.multihash)
        if mh.code != MultihashCode.IDENTITY:
            return None
        try:
            return PublicKey.from_protobuf_encoding(mh.digest)
        except DecodingError:
            return None

    def is_public_key(self, public_key: PublicKey) -> bool:
        """Return True if this PeerId was derived from `public_key`."""
        return self == PeerId.from_public_key(public_key)
