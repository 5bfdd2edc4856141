"""
Algorithm-agnostic public keys.

`PublicKey` wraps exactly one algorithm adapter and routes every call to it.
It is the only public key type callers need: verification, wire encoding and
PeerId derivation behave the same for every key type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import total_ordering
from typing import TYPE_CHECKING, TypeVar

from typing_extensions import Self

from .algorithms import (
    PUBLIC_KEY_TYPES,
    AlgorithmPublicKey,
    DilithiumPublicKey,
    EcdsaPublicKey,
    Ed25519PublicKey,
    RsaPublicKey,
    Secp256k1PublicKey,
)
from .exceptions import DecodingError, OtherVariantError
from .key_type import KeyType
from .protobuf import PublicKeyProto

if TYPE_CHECKING:
    from .peer_id import PeerId

__all__ = [
    "PublicKey",
]

logger = logging.getLogger(__name__)

_PublicKeyT = TypeVar("_PublicKeyT", bound=AlgorithmPublicKey)


@total_ordering
@dataclass(frozen=True, slots=True)
class PublicKey:
    """
    A public key of any supported algorithm.

    Public keys are immutable and hashable. Two keys are equal when they hold the
    same algorithm and the same encoded bytes. Ordering is only defined between
    keys of the same algorithm.

    Attributes:
        inner: The algorithm-specific public key.
    """

    inner: AlgorithmPublicKey
    """Adapter holding the key material."""

    @property
    def key_type(self) -> KeyType:
        """Algorithm of this key."""
        return self.inner.KEY_TYPE

    def verify(self, message: bytes, signature: bytes) -> bool:
        """
        Verify a signature made by the matching keypair.

        Signatures carry no algorithm tag: this key's algorithm decides how the
        signature is interpreted. Malformed signatures, or signatures made by a
        different algorithm, simply fail.

        Args:
            message: The signed message.
            signature: Signature bytes.

        Returns:
            True if the signature is valid, False otherwise.
        """
        return self.inner.verify(message, signature)

    def to_protobuf_encoding(self) -> bytes:
        """
        Encode as a libp2p-crypto `PublicKey` protobuf message.

        This encoding is canonical: it is the input to PeerId derivation and is
        byte-identical across libp2p implementations.

        Returns:
            Protobuf-encoded public key.
        """
        return PublicKeyProto(key_type=self.key_type, key_data=self.inner.to_bytes()).encode()

    @classmethod
    def from_protobuf_encoding(cls, data: bytes) -> Self:
        """
        Decode a libp2p-crypto `PublicKey` protobuf message.

        Args:
            data: Protobuf-encoded public key, possibly from an untrusted peer.

        Returns:
            The decoded public key.

        Raises:
            UnsupportedKeyTypeError: If the key type tag is missing or unknown.
            DecodingError: If the envelope or the key payload is malformed.
        """
        proto = PublicKeyProto.decode(data)
        try:
            inner = PUBLIC_KEY_TYPES[proto.key_type].from_bytes(proto.key_data)
        except DecodingError as e:
            logger.debug("Rejected %s public key: %s", proto.key_type.name, e.detail)
            raise
        return cls(inner=inner)

    to_wire_bytes = to_protobuf_encoding
    from_wire_bytes = from_protobuf_encoding

    def to_peer_id(self) -> PeerId:
        """Derive the PeerId of this key."""
        from .peer_id import PeerId

        return PeerId.from_public_key(self)

    def try_into_ed25519(self) -> Ed25519PublicKey:
        """Return the Ed25519 key, or raise `OtherVariantError`."""
        return self._try_into(Ed25519PublicKey)

    def try_into_rsa(self) -> RsaPublicKey:
        """Return the RSA key, or raise `OtherVariantError`."""
        return self._try_into(RsaPublicKey)

    def try_into_ecdsa(self) -> EcdsaPublicKey:
        """Return the ECDSA key, or raise `OtherVariantError`."""
        return self._try_into(EcdsaPublicKey)

    def try_into_secp256k1(self) -> Secp256k1PublicKey:
        """Return the secp256k1 key, or raise `OtherVariantError`."""
        return self._try_into(Secp256k1PublicKey)

    def try_into_dilithium(self) -> DilithiumPublicKey:
        """Return the Dilithium key, or raise `OtherVariantError`."""
        return self._try_into(DilithiumPublicKey)

    def _try_into(self, adapter: type[_PublicKeyT]) -> _PublicKeyT:
        if not isinstance(self.inner, adapter):
            raise OtherVariantError(self.key_type, adapter.KEY_TYPE)
        return self.inner

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        if self.key_type != other.key_type:
            raise TypeError(
                f"Cannot order {self.key_type.name} key against {other.key_type.name} key"
            )
        return self.inner.to_bytes() < other.inner.to_bytes()

    def __repr__(self) -> str:
        return f"PublicKey({self.key_type.name}, {self.inner.to_bytes().hex()[:16]}...)"
