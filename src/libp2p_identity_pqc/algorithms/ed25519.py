"""
Ed25519 keys (RFC 8032).

Encodings used inside the protobuf envelope:

- public key: the raw 32-byte point,
- keypair: 64 bytes, the 32-byte secret seed followed by the 32-byte public key.

The keypair layout is the one produced by libp2p's Rust and Go implementations,
so files written by them decode here unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Final

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ed25519
from typing_extensions import Self

from ..exceptions import DecodingError, ErasedKeyError, KeyGenerationError
from ..key_type import KeyType
from .base import SecretKeyMaterial

__all__ = [
    "Ed25519PublicKey",
    "Ed25519Keypair",
]

PUBLIC_KEY_LENGTH: Final[int] = 32
"""Length of an encoded Ed25519 public key."""

SECRET_KEY_LENGTH: Final[int] = 32
"""Length of an Ed25519 secret seed."""

KEYPAIR_LENGTH: Final[int] = SECRET_KEY_LENGTH + PUBLIC_KEY_LENGTH
"""Length of an encoded Ed25519 keypair."""

SIGNATURE_LENGTH: Final[int] = 64
"""Length of an Ed25519 signature."""


@dataclass(frozen=True, slots=True)
class Ed25519PublicKey:
    """
    Ed25519 public key.

    Attributes:
        key_bytes: The 32-byte encoded point.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.ED25519

    key_bytes: bytes
    """Canonical 32-byte encoding."""

    _key: ed25519.Ed25519PublicKey = field(compare=False, repr=False)
    """Parsed engine key."""

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a raw 32-byte public key.

        Raises:
            DecodingError: If the length is wrong or the bytes are not a valid point.
        """
        data = bytes(data)
        if len(data) != PUBLIC_KEY_LENGTH:
            raise DecodingError(
                KeyType.ED25519, f"expected {PUBLIC_KEY_LENGTH} bytes, got {len(data)}"
            )

        try:
            key = ed25519.Ed25519PublicKey.from_public_bytes(data)
        except ValueError as e:
            raise DecodingError(KeyType.ED25519, str(e)) from e

        return cls(key_bytes=data, _key=key)

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return True if `signature` is a valid Ed25519 signature of `message`."""
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            self._key.verify(bytes(signature), bytes(message))
        except InvalidSignature:
            return False
        return True


class Ed25519Keypair(SecretKeyMaterial):
    """Ed25519 keypair backed by `cryptography`."""

    KEY_TYPE: ClassVar[KeyType] = KeyType.ED25519

    __slots__ = ("_private_key", "_public_key")

    def __init__(self, private_key: ed25519.Ed25519PrivateKey) -> None:
        self._private_key: ed25519.Ed25519PrivateKey | None = private_key
        public_bytes = private_key.public_key().public_bytes_raw()
        self._public_key = Ed25519PublicKey.from_bytes(public_bytes)

    @classmethod
    def generate(cls) -> Self:
        """
        Generate a random keypair.

        Raises:
            KeyGenerationError: If the engine cannot produce a key.
        """
        try:
            private_key = ed25519.Ed25519PrivateKey.generate()
        except (UnsupportedAlgorithm, ValueError, OSError) as e:
            raise KeyGenerationError(KeyType.ED25519, f"engine failure: {e}") from e
        return cls(private_key)

    @classmethod
    def from_secret(cls, secret: bytes) -> Self:
        """
        Build a keypair from a 32-byte secret seed.

        Raises:
            DecodingError: If the seed is not 32 bytes.
        """
        if len(secret) != SECRET_KEY_LENGTH:
            raise DecodingError(
                KeyType.ED25519, f"expected {SECRET_KEY_LENGTH}-byte secret, got {len(secret)}"
            )
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(bytes(secret)))

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a 64-byte `secret || public` keypair.

        Raises:
            DecodingError: If the length is wrong or the public half does not
                belong to the secret half.
        """
        if len(data) != KEYPAIR_LENGTH:
            raise DecodingError(
                KeyType.ED25519, f"expected {KEYPAIR_LENGTH} bytes, got {len(data)}"
            )

        keypair = cls.from_secret(data[:SECRET_KEY_LENGTH])
        if keypair.public().to_bytes() != bytes(data[SECRET_KEY_LENGTH:]):
            raise DecodingError(KeyType.ED25519, "public key does not match secret key")

        return keypair

    def to_bytes(self) -> bytes:
        return self._require_key().private_bytes_raw() + self._public_key.to_bytes()

    def sign(self, message: bytes) -> bytes:
        return self._require_key().sign(bytes(message))

    def public(self) -> Ed25519PublicKey:
        return self._public_key

    def erase(self) -> None:
        self._private_key = None

    def _require_key(self) -> ed25519.Ed25519PrivateKey:
        if self._private_key is None:
            raise ErasedKeyError(KeyType.ED25519)
        return self._private_key

    def __repr__(self) -> str:
        return f"Ed25519Keypair(public={self._public_key.key_bytes.hex()})"
