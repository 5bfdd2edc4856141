"""
Algorithm-agnostic keypairs.

`Keypair` owns the secret material of exactly one algorithm adapter and exposes
one API for all of them::

    keypair = Keypair.generate(KeyType.DILITHIUM)
    signature = keypair.sign(b"hello")
    assert keypair.public().verify(b"hello", signature)

    encoded = keypair.to_protobuf_encoding()
    restored = Keypair.from_protobuf_encoding(encoded)

Keypairs cannot be copied or pickled. Use the protobuf encoding to persist them,
and `erase()` (or a `with` block) to drop the secret material early.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TypeVar

from typing_extensions import Self

from .algorithms import (
    KEYPAIR_TYPES,
    AlgorithmKeypair,
    DilithiumKeypair,
    EcdsaKeypair,
    Ed25519Keypair,
    RsaKeypair,
    Secp256k1Keypair,
    SecretKeyMaterial,
)
from .exceptions import DecodingError, OtherVariantError
from .key_type import KeyType
from .peer_id import PeerId
from .protobuf import PrivateKeyProto
from .public_key import PublicKey

__all__ = [
    "Keypair",
]

logger = logging.getLogger(__name__)

_KeypairT = TypeVar("_KeypairT", bound=AlgorithmKeypair)


class Keypair(SecretKeyMaterial):
    """A keypair of any supported algorithm."""

    __slots__ = ("_inner",)

    def __init__(self, inner: AlgorithmKeypair) -> None:
        self._inner = inner

    @classmethod
    def generate(cls, key_type: KeyType) -> Self:
        """
        Generate a fresh keypair.

        Args:
            key_type: Algorithm to generate.

        Returns:
            A new keypair drawn from the system's secure random source.

        Raises:
            KeyGenerationError: If the engine cannot produce key material.
        """
        inner = KEYPAIR_TYPES[key_type].generate()
        logger.debug("Generated %s keypair", key_type.name)
        return cls(inner)

    @classmethod
    def generate_ed25519(cls) -> Self:
        return cls.generate(KeyType.ED25519)

    @classmethod
    def generate_rsa(cls, key_size: int | None = None) -> Self:
        """Generate an RSA keypair with `key_size` bits (default from config)."""
        return cls(RsaKeypair.generate(key_size))

    @classmethod
    def generate_ecdsa(cls) -> Self:
        return cls.generate(KeyType.ECDSA)

    @classmethod
    def generate_secp256k1(cls) -> Self:
        return cls.generate(KeyType.SECP256K1)

    @classmethod
    def generate_dilithium(cls) -> Self:
        return cls.generate(KeyType.DILITHIUM)

    @property
    def key_type(self) -> KeyType:
        """Algorithm of this keypair."""
        return self._inner.KEY_TYPE

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: Bytes to sign (any length, including empty).

        Returns:
            Signature bytes. Length and format depend on the algorithm.

        Raises:
            ErasedKeyError: If the secret material was erased.
            SigningError: If the engine refuses to sign.
        """
        return self._inner.sign(message)

    def public(self) -> PublicKey:
        """Return the public key. Cheap, no I/O."""
        return PublicKey(inner=self._inner.public())

    def to_peer_id(self) -> PeerId:
        """Derive the PeerId of this keypair's public key."""
        return PeerId.from_public_key(self.public())

    def to_raw_bytes(self) -> bytes:
        """
        Return the algorithm-level keypair encoding.

        This is the `Data` field of the protobuf encoding, e.g. `secret || public`
        for Dilithium and PKCS#8 DER for RSA.
        """
        return self._inner.to_bytes()

    def to_protobuf_encoding(self) -> bytes:
        """
        Encode as a libp2p-crypto `PrivateKey` protobuf message.

        Returns:
            Protobuf-encoded keypair. Contains secret key material.
        """
        return PrivateKeyProto(key_type=self.key_type, key_data=self.to_raw_bytes()).encode()

    @classmethod
    def from_protobuf_encoding(cls, data: bytes) -> Self:
        """
        Decode a libp2p-crypto `PrivateKey` protobuf message.

        Args:
            data: Protobuf-encoded keypair.

        Returns:
            The decoded keypair.

        Raises:
            UnsupportedKeyTypeError: If the key type tag is missing or unknown.
            DecodingError: If the envelope or the key payload is malformed.
        """
        proto = PrivateKeyProto.decode(data)
        try:
            inner = KEYPAIR_TYPES[proto.key_type].from_bytes(proto.key_data)
        except DecodingError as e:
            logger.debug("Rejected %s keypair: %s", proto.key_type.name, e.detail)
            raise
        return cls(inner)

    to_wire_bytes = to_protobuf_encoding
    from_wire_bytes = from_protobuf_encoding

    def try_into_ed25519(self) -> Ed25519Keypair:
        """Return the Ed25519 keypair, or raise `OtherVariantError`."""
        return self._try_into(Ed25519Keypair)

    def try_into_rsa(self) -> RsaKeypair:
        """Return the RSA keypair, or raise `OtherVariantError`."""
        return self._try_into(RsaKeypair)

    def try_into_ecdsa(self) -> EcdsaKeypair:
        """Return the ECDSA keypair, or raise `OtherVariantError`."""
        return self._try_into(EcdsaKeypair)

    def try_into_secp256k1(self) -> Secp256k1Keypair:
        """Return the secp256k1 keypair, or raise `OtherVariantError`."""
        return self._try_into(Secp256k1Keypair)

    def try_into_dilithium(self) -> DilithiumKeypair:
        """Return the Dilithium keypair, or raise `OtherVariantError`."""
        return self._try_into(DilithiumKeypair)

    def _try_into(self, adapter: type[_KeypairT]) -> _KeypairT:
        if not isinstance(self._inner, adapter):
            raise OtherVariantError(self.key_type, adapter.KEY_TYPE)
        return self._inner

    def erase(self) -> None:
        """
        Destroy the secret material held by the adapter.

        Mutable secret buffers are zeroed and engine key objects are released.
        The public key stays available. Later calls to `sign()` or any encoding
        method raise `ErasedKeyError`, a `SigningError` subclass.
        """
        self._inner.erase()

    def __del__(self) -> None:
        # Adapters returned by try_into_* may outlive this wrapper; each one
        # erases itself when collected.
        pass

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.erase()

    def __repr__(self) -> str:
        return f"Keypair({self.key_type.name}, peer_id={self.to_peer_id()})"
