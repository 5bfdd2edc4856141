"""
ECDSA keys over NIST P-256.

Encodings used inside the protobuf envelope, matching go-libp2p and rust-libp2p:

- public key: DER-encoded X.509 SubjectPublicKeyInfo (91 bytes),
- keypair: DER-encoded SEC1 `ECPrivateKey` (curve parameters and public key included),
- signature: DER-encoded (r, s) over SHA-256 of the message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from typing_extensions import Self

from ..exceptions import DecodingError, ErasedKeyError, KeyGenerationError
from ..key_type import KeyType
from .base import SecretKeyMaterial

__all__ = [
    "EcdsaPublicKey",
    "EcdsaKeypair",
]


def _check_curve(curve: ec.EllipticCurve) -> None:
    if not isinstance(curve, ec.SECP256R1):
        raise DecodingError(KeyType.ECDSA, f"expected curve secp256r1, got {curve.name}")


@dataclass(frozen=True, slots=True)
class EcdsaPublicKey:
    """
    P-256 public key.

    Attributes:
        key_bytes: DER SubjectPublicKeyInfo.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.ECDSA

    key_bytes: bytes
    """Canonical DER encoding."""

    _key: ec.EllipticCurvePublicKey = field(compare=False, repr=False)
    """Parsed engine key."""

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a DER SubjectPublicKeyInfo.

        Raises:
            DecodingError: If the DER is malformed, not an EC key, on another curve,
                or not in canonical (uncompressed-point) form.
        """
        data = bytes(data)
        try:
            key = serialization.load_der_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise DecodingError(KeyType.ECDSA, f"invalid SubjectPublicKeyInfo: {e}") from e

        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise DecodingError(KeyType.ECDSA, f"expected an EC key, got {type(key).__name__}")
        _check_curve(key.curve)

        canonical = key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        if canonical != data:
            raise DecodingError(KeyType.ECDSA, "non-canonical SubjectPublicKeyInfo")

        return cls(key_bytes=data, _key=key)

    @classmethod
    def _from_key(cls, key: ec.EllipticCurvePublicKey) -> Self:
        encoded = key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        return cls(key_bytes=encoded, _key=key)

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return True if `signature` is a valid DER ECDSA-SHA256 signature of `message`."""
        try:
            self._key.verify(bytes(signature), bytes(message), ec.ECDSA(hashes.SHA256()))
        except (InvalidSignature, ValueError):
            return False
        return True


class EcdsaKeypair(SecretKeyMaterial):
    """P-256 keypair backed by `cryptography`."""

    KEY_TYPE: ClassVar[KeyType] = KeyType.ECDSA

    __slots__ = ("_private_key", "_public_key")

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        self._private_key: ec.EllipticCurvePrivateKey | None = private_key
        self._public_key = EcdsaPublicKey._from_key(private_key.public_key())

    @classmethod
    def generate(cls) -> Self:
        """
        Generate a random keypair.

        Raises:
            KeyGenerationError: If the engine cannot produce a key.
        """
        try:
            private_key = ec.generate_private_key(ec.SECP256R1())
        except (UnsupportedAlgorithm, ValueError, OSError) as e:
            raise KeyGenerationError(KeyType.ECDSA, f"engine failure: {e}") from e
        return cls(private_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Load a keypair from a DER SEC1 `ECPrivateKey`.

        Raises:
            DecodingError: If the DER is malformed or the key is not on P-256.
        """
        try:
            key = serialization.load_der_private_key(bytes(data), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise DecodingError(KeyType.ECDSA, f"invalid ECPrivateKey: {e}") from e

        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise DecodingError(KeyType.ECDSA, f"expected an EC key, got {type(key).__name__}")
        _check_curve(key.curve)

        return cls(key)

    def to_bytes(self) -> bytes:
        return self._require_key().private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def sign(self, message: bytes) -> bytes:
        return self._require_key().sign(bytes(message), ec.ECDSA(hashes.SHA256()))

    def public(self) -> EcdsaPublicKey:
        return self._public_key

    def erase(self) -> None:
        self._private_key = None

    def _require_key(self) -> ec.EllipticCurvePrivateKey:
        if self._private_key is None:
            raise ErasedKeyError(KeyType.ECDSA)
        return self._private_key

    def __repr__(self) -> str:
        return f"EcdsaKeypair(public={self._public_key.key_bytes.hex()})"
