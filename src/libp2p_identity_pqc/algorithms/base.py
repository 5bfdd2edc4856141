"""
Capability interfaces shared by every signature algorithm adapter.

An adapter wraps one cryptographic engine behind two small contracts:

- a public key that can be encoded, decoded and used to verify,
- a keypair that can be generated, encoded, decoded, used to sign,
  and that yields its public half.

The rest of the package only talks to these contracts. Swapping the engine behind
an algorithm (e.g. another ML-DSA library) touches nothing outside its module.
"""

from __future__ import annotations

from typing import Any, ClassVar, NoReturn, Protocol

from typing_extensions import Self

from ..key_type import KeyType

__all__ = [
    "AlgorithmPublicKey",
    "AlgorithmKeypair",
    "SecretKeyMaterial",
]


class AlgorithmPublicKey(Protocol):
    """Public key of one algorithm."""

    KEY_TYPE: ClassVar[KeyType]

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode the canonical public key encoding. Raises `DecodingError`."""
        ...

    def to_bytes(self) -> bytes:
        """Return the canonical public key encoding."""
        ...

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Check a signature. Never raises on malformed input."""
        ...


class AlgorithmKeypair(Protocol):
    """Keypair of one algorithm."""

    KEY_TYPE: ClassVar[KeyType]

    @classmethod
    def generate(cls) -> Self:
        """Create fresh key material. Raises `KeyGenerationError`."""
        ...

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Decode the keypair encoding. Raises `DecodingError`."""
        ...

    def to_bytes(self) -> bytes:
        """Return the keypair encoding (secret material)."""
        ...

    def sign(self, message: bytes) -> bytes:
        """Sign a message. Raises `SigningError`."""
        ...

    def public(self) -> AlgorithmPublicKey:
        """Return the public half."""
        ...

    def erase(self) -> None:
        """Make the secret material unrecoverable from this object."""
        ...


class SecretKeyMaterial:
    """
    Guards shared by every object that owns secret key material.

    Secret keys are never duplicated implicitly: copying and pickling are refused,
    so the only way to move a key is through its explicit byte encoding.
    Subclasses implement `erase()`, which also runs when the object is collected.
    """

    __slots__ = ()

    def erase(self) -> None:
        raise NotImplementedError

    def __copy__(self) -> NoReturn:
        raise TypeError(f"{type(self).__name__} holds secret key material and cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise TypeError(f"{type(self).__name__} holds secret key material and cannot be copied")

    def __reduce__(self) -> NoReturn:
        raise TypeError(f"{type(self).__name__} holds secret key material and cannot be pickled")

    def __del__(self) -> None:
        self.erase()
