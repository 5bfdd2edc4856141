"""
RSA keys.

Encodings used inside the protobuf envelope:

- public key: DER-encoded X.509 SubjectPublicKeyInfo (PKIX),
- keypair: DER-encoded PKCS#8 `PrivateKeyInfo`,
- signature: RSASSA-PKCS1-v1_5 over SHA-256, as long as the modulus.

Moduli outside [2048, 8192] bits are refused both when generating and decoding,
following go-libp2p's limits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from typing_extensions import Self

from .. import config
from ..exceptions import DecodingError, ErasedKeyError, KeyGenerationError
from ..key_type import KeyType
from .base import SecretKeyMaterial

__all__ = [
    "RsaPublicKey",
    "RsaKeypair",
]

_PUBLIC_EXPONENT = 65537


def _check_key_size(key_size: int) -> None:
    if not config.MIN_RSA_KEY_BITS <= key_size <= config.MAX_RSA_KEY_BITS:
        raise DecodingError(
            KeyType.RSA,
            f"{key_size}-bit modulus outside "
            f"[{config.MIN_RSA_KEY_BITS}, {config.MAX_RSA_KEY_BITS}]",
        )


@dataclass(frozen=True, slots=True)
class RsaPublicKey:
    """
    RSA public key.

    Attributes:
        key_bytes: DER SubjectPublicKeyInfo.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.RSA

    key_bytes: bytes
    """Canonical DER encoding."""

    _key: rsa.RSAPublicKey = field(compare=False, repr=False)
    """Parsed engine key."""

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a DER SubjectPublicKeyInfo.

        Raises:
            DecodingError: If the DER is malformed, not RSA, non-canonical or the
                modulus size is out of bounds.
        """
        data = bytes(data)
        try:
            key = serialization.load_der_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise DecodingError(KeyType.RSA, f"invalid SubjectPublicKeyInfo: {e}") from e

        if not isinstance(key, rsa.RSAPublicKey):
            raise DecodingError(KeyType.RSA, f"expected an RSA key, got {type(key).__name__}")
        _check_key_size(key.key_size)

        if cls._encode(key) != data:
            raise DecodingError(KeyType.RSA, "non-canonical SubjectPublicKeyInfo")

        return cls(key_bytes=data, _key=key)

    @staticmethod
    def _encode(key: rsa.RSAPublicKey) -> bytes:
        return key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return True if `signature` is a valid PKCS#1 v1.5 SHA-256 signature of `message`."""
        try:
            self._key.verify(
                bytes(signature), bytes(message), padding.PKCS1v15(), hashes.SHA256()
            )
        except (InvalidSignature, ValueError):
            return False
        return True


class RsaKeypair(SecretKeyMaterial):
    """RSA keypair backed by `cryptography`."""

    KEY_TYPE: ClassVar[KeyType] = KeyType.RSA

    __slots__ = ("_private_key", "_public_key")

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        self._private_key: rsa.RSAPrivateKey | None = private_key
        public_key = private_key.public_key()
        self._public_key = RsaPublicKey(key_bytes=RsaPublicKey._encode(public_key), _key=public_key)

    @classmethod
    def generate(cls, key_size: int | None = None) -> Self:
        """
        Generate a random keypair.

        Args:
            key_size: Modulus size in bits. Defaults to `config.RSA_KEY_BITS`.

        Raises:
            KeyGenerationError: If the size is outside the supported range or the
                engine cannot produce a key.
        """
        bits = config.RSA_KEY_BITS if key_size is None else key_size
        if not config.MIN_RSA_KEY_BITS <= bits <= config.MAX_RSA_KEY_BITS:
            raise KeyGenerationError(KeyType.RSA, f"unsupported modulus size {bits}")

        try:
            private_key = rsa.generate_private_key(public_exponent=_PUBLIC_EXPONENT, key_size=bits)
        except (UnsupportedAlgorithm, ValueError, OSError) as e:
            raise KeyGenerationError(KeyType.RSA, f"engine failure: {e}") from e
        return cls(private_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Load a keypair from PKCS#8 DER.

        Raises:
            DecodingError: If the DER is malformed, not RSA or the modulus size is
                out of bounds.
        """
        try:
            key = serialization.load_der_private_key(bytes(data), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise DecodingError(KeyType.RSA, f"invalid PKCS#8 key: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise DecodingError(KeyType.RSA, f"expected an RSA key, got {type(key).__name__}")
        _check_key_size(key.key_size)

        return cls(key)

    def to_bytes(self) -> bytes:
        return self._require_key().private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def sign(self, message: bytes) -> bytes:
        return self._require_key().sign(bytes(message), padding.PKCS1v15(), hashes.SHA256())

    def public(self) -> RsaPublicKey:
        return self._public_key

    def erase(self) -> None:
        self._private_key = None

    def _require_key(self) -> rsa.RSAPrivateKey:
        if self._private_key is None:
            raise ErasedKeyError(KeyType.RSA)
        return self._private_key

    def __repr__(self) -> str:
        return f"RsaKeypair(bits={self._public_key._key.key_size})"
