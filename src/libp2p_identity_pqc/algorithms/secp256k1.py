"""
secp256k1 keys.

libp2p signs with ECDSA over secp256k1 using SHA-256 as the message digest.
Encodings used inside the protobuf envelope:

- public key: 33-byte SEC1 compressed point (0x02 or 0x03 followed by x),
- keypair: the 32-byte big-endian secret scalar,
- signature: DER-encoded (r, s).

Signatures are emitted in low-S form (s <= n/2), which is what libsecp256k1-based
peers require. Verification also accepts high-S signatures, as go-libp2p does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Final

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from typing_extensions import Self

from ..exceptions import DecodingError, ErasedKeyError, KeyGenerationError
from ..key_type import KeyType
from .base import SecretKeyMaterial

__all__ = [
    "Secp256k1PublicKey",
    "Secp256k1Keypair",
]

CURVE_ORDER: Final[int] = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""Order n of the secp256k1 base point."""

PUBLIC_KEY_LENGTH: Final[int] = 33
"""Length of a compressed public key."""

SECRET_KEY_LENGTH: Final[int] = 32
"""Length of the secret scalar."""

_COMPRESSED_PREFIXES: Final[frozenset[int]] = frozenset({0x02, 0x03})


@dataclass(frozen=True, slots=True)
class Secp256k1PublicKey:
    """
    secp256k1 public key.

    Attributes:
        key_bytes: 33-byte compressed point.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.SECP256K1

    key_bytes: bytes
    """Canonical compressed encoding."""

    _key: ec.EllipticCurvePublicKey = field(compare=False, repr=False)
    """Parsed engine key."""

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a compressed public key.

        Uncompressed (65-byte) points are rejected: re-encoding them would not
        reproduce the input bytes.

        Raises:
            DecodingError: If the encoding is not a compressed point on the curve.
        """
        data = bytes(data)
        if len(data) != PUBLIC_KEY_LENGTH:
            raise DecodingError(
                KeyType.SECP256K1, f"expected {PUBLIC_KEY_LENGTH} bytes, got {len(data)}"
            )
        if data[0] not in _COMPRESSED_PREFIXES:
            raise DecodingError(KeyType.SECP256K1, f"invalid point prefix 0x{data[0]:02x}")

        try:
            key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data)
        except ValueError as e:
            raise DecodingError(KeyType.SECP256K1, str(e)) from e

        return cls(key_bytes=data, _key=key)

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return True if `signature` is a valid DER ECDSA-SHA256 signature of `message`."""
        try:
            self._key.verify(bytes(signature), bytes(message), ec.ECDSA(hashes.SHA256()))
        except (InvalidSignature, ValueError):
            return False
        return True


class Secp256k1Keypair(SecretKeyMaterial):
    """secp256k1 keypair backed by `cryptography`."""

    KEY_TYPE: ClassVar[KeyType] = KeyType.SECP256K1

    __slots__ = ("_private_key", "_public_key")

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        self._private_key: ec.EllipticCurvePrivateKey | None = private_key
        public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )
        self._public_key = Secp256k1PublicKey.from_bytes(public_bytes)

    @classmethod
    def generate(cls) -> Self:
        """
        Generate a random keypair.

        Raises:
            KeyGenerationError: If the engine cannot produce a key.
        """
        try:
            private_key = ec.generate_private_key(ec.SECP256K1())
        except (UnsupportedAlgorithm, ValueError, OSError) as e:
            raise KeyGenerationError(KeyType.SECP256K1, f"engine failure: {e}") from e
        return cls(private_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Load a keypair from its 32-byte secret scalar.

        Raises:
            DecodingError: If the length is wrong or the scalar is outside [1, n-1].
        """
        if len(data) != SECRET_KEY_LENGTH:
            raise DecodingError(
                KeyType.SECP256K1, f"expected {SECRET_KEY_LENGTH} bytes, got {len(data)}"
            )

        scalar = int.from_bytes(data, "big")
        if not 0 < scalar < CURVE_ORDER:
            raise DecodingError(KeyType.SECP256K1, "secret scalar out of range")

        return cls(ec.derive_private_key(scalar, ec.SECP256K1()))

    def to_bytes(self) -> bytes:
        scalar = self._require_key().private_numbers().private_value
        return scalar.to_bytes(SECRET_KEY_LENGTH, "big")

    def sign(self, message: bytes) -> bytes:
        """
        Sign with ECDSA-SHA256 and normalize to low-S.

        Returns:
            DER-encoded signature (70 to 72 bytes).
        """
        der = self._require_key().sign(bytes(message), ec.ECDSA(hashes.SHA256()))

        # (r, n - s) verifies the same message; only the low half is canonical.
        r, s = decode_dss_signature(der)
        if s > CURVE_ORDER // 2:
            der = encode_dss_signature(r, CURVE_ORDER - s)

        return der

    def public(self) -> Secp256k1PublicKey:
        return self._public_key

    def erase(self) -> None:
        self._private_key = None

    def _require_key(self) -> ec.EllipticCurvePrivateKey:
        if self._private_key is None:
            raise ErasedKeyError(KeyType.SECP256K1)
        return self._private_key

    def __repr__(self) -> str:
        return f"Secp256k1Keypair(public={self._public_key.key_bytes.hex()})"
