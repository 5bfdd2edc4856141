"""
Dilithium keys: ML-DSA-87 (FIPS 204, NIST security level 5).

The lattice engine is `dilithium-py`; this module only frames its byte strings.
Sizes are two to three orders of magnitude above the classical algorithms:

    ==========  ===========
    Public key  2,592 bytes
    Secret key  4,896 bytes
    Signature   4,627 bytes
    ==========  ===========

Encodings used inside the protobuf envelope:

- public key: the FIPS 204 `pkEncode` output, stored verbatim,
- keypair: FIPS 204 `skEncode` output followed by the public key (7,488 bytes).
  ML-DSA secret keys do not contain the public key, so it travels alongside.

A decoded keypair is checked for consistency: the secret key starts with the same
`rho` seed as the public key and embeds `tr = SHAKE256(pk, 64)`.

Signing is hedged (fresh randomness per signature), as FIPS 204 recommends.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar, Final

from dilithium_py.ml_dsa import ML_DSA_87
from typing_extensions import Self

from ..exceptions import DecodingError, ErasedKeyError, KeyGenerationError, SigningError
from ..key_type import KeyType
from .base import SecretKeyMaterial

__all__ = [
    "DilithiumPublicKey",
    "DilithiumKeypair",
]

PUBLIC_KEY_LENGTH: Final[int] = 2592
"""ML-DSA-87 encoded public key length."""

SECRET_KEY_LENGTH: Final[int] = 4896
"""ML-DSA-87 encoded secret key length."""

KEYPAIR_LENGTH: Final[int] = SECRET_KEY_LENGTH + PUBLIC_KEY_LENGTH
"""Length of the `secret || public` keypair encoding."""

SIGNATURE_LENGTH: Final[int] = 4627
"""ML-DSA-87 signature length."""

_RHO_LENGTH: Final[int] = 32
"""Public matrix seed, first field of both keys."""

_TR_OFFSET: Final[int] = 64
"""Offset of `tr` in the secret key (after `rho` and `K`)."""

_TR_LENGTH: Final[int] = 64
"""Length of `tr = SHAKE256(pk, 64)`."""


@dataclass(frozen=True, slots=True)
class DilithiumPublicKey:
    """
    ML-DSA-87 public key.

    Attributes:
        key_bytes: 2,592-byte FIPS 204 encoding.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.DILITHIUM

    key_bytes: bytes
    """Encoded public key."""

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Wrap an encoded public key.

        Every byte string of the right length unpacks to some ML-DSA public key,
        so only the length is checked.

        Raises:
            DecodingError: If the length is not 2,592 bytes.
        """
        if len(data) != PUBLIC_KEY_LENGTH:
            raise DecodingError(
                KeyType.DILITHIUM, f"expected {PUBLIC_KEY_LENGTH} bytes, got {len(data)}"
            )
        return cls(key_bytes=bytes(data))

    def to_bytes(self) -> bytes:
        return self.key_bytes

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return True if `signature` is a valid ML-DSA-87 signature of `message`."""
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            return bool(ML_DSA_87.verify(self.key_bytes, bytes(message), bytes(signature)))
        except (ValueError, IndexError):
            # Malformed encodings can surface as engine exceptions instead of False.
            return False


class DilithiumKeypair(SecretKeyMaterial):
    """
    ML-DSA-87 keypair.

    The secret key lives in a mutable buffer that `erase()` overwrites with zeros.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.DILITHIUM

    __slots__ = ("_secret", "_public_key")

    def __init__(self, secret_key: bytes, public_key: DilithiumPublicKey) -> None:
        self._secret = bytearray(secret_key)
        self._public_key = public_key

    @classmethod
    def generate(cls) -> Self:
        """
        Generate a random keypair.

        Raises:
            KeyGenerationError: If the system entropy source fails.
        """
        try:
            public_bytes, secret_bytes = ML_DSA_87.keygen()
        except OSError as e:
            raise KeyGenerationError(KeyType.DILITHIUM, f"entropy source unavailable: {e}") from e

        return cls(secret_bytes, DilithiumPublicKey.from_bytes(public_bytes))

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Decode a `secret || public` keypair.

        Raises:
            DecodingError: If the length is wrong or the halves do not belong together.
        """
        if len(data) != KEYPAIR_LENGTH:
            raise DecodingError(
                KeyType.DILITHIUM, f"expected {KEYPAIR_LENGTH} bytes, got {len(data)}"
            )

        secret = bytes(data[:SECRET_KEY_LENGTH])
        public_key = DilithiumPublicKey.from_bytes(data[SECRET_KEY_LENGTH:])

        if secret[:_RHO_LENGTH] != public_key.key_bytes[:_RHO_LENGTH]:
            raise DecodingError(KeyType.DILITHIUM, "secret key seed does not match public key")

        tr = hashlib.shake_256(public_key.key_bytes).digest(_TR_LENGTH)
        if secret[_TR_OFFSET : _TR_OFFSET + _TR_LENGTH] != tr:
            raise DecodingError(KeyType.DILITHIUM, "secret key hash does not match public key")

        return cls(secret, public_key)

    def to_bytes(self) -> bytes:
        return bytes(self._require_secret()) + self._public_key.key_bytes

    def sign(self, message: bytes) -> bytes:
        """
        Sign with hedged ML-DSA-87.

        Returns:
            4,627-byte signature.

        Raises:
            ErasedKeyError: If the secret key has been erased.
            SigningError: If the engine rejects the secret key.
        """
        secret = bytes(self._require_secret())
        try:
            return ML_DSA_87.sign(secret, bytes(message))
        except ValueError as e:
            raise SigningError(KeyType.DILITHIUM, str(e)) from e

    def public(self) -> DilithiumPublicKey:
        return self._public_key

    def erase(self) -> None:
        self._secret[:] = bytes(len(self._secret))
        self._secret = bytearray()

    def _require_secret(self) -> bytearray:
        if not self._secret:
            raise ErasedKeyError(KeyType.DILITHIUM)
        return self._secret

    def __repr__(self) -> str:
        return f"DilithiumKeypair(public={self._public_key.key_bytes[:8].hex()}...)"
