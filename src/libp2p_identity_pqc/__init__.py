"""
libp2p peer identity keys with post-quantum support.

One `Keypair` / `PublicKey` API covers RSA, Ed25519, secp256k1, ECDSA (P-256)
and Dilithium (ML-DSA-87). Keys travel in the libp2p-crypto protobuf envelope
and derive libp2p PeerIds.
"""

from .exceptions import (
    DecodingError,
    ErasedKeyError,
    IdentityError,
    KeyGenerationError,
    OtherVariantError,
    ParseError,
    SigningError,
    UnsupportedKeyTypeError,
)
from .key_type import KeyType
from .keypair import Keypair
from .models import IdentityRecord
from .peer_id import MAX_INLINE_KEY_LENGTH, Base58, Multihash, MultihashCode, PeerId
from .protobuf import PrivateKeyProto, PublicKeyProto
from .public_key import PublicKey

__all__ = [
    # Keys
    "KeyType",
    "Keypair",
    "PublicKey",
    # Wire format
    "PublicKeyProto",
    "PrivateKeyProto",
    # PeerId
    "PeerId",
    "Multihash",
    "MultihashCode",
    "Base58",
    "MAX_INLINE_KEY_LENGTH",
    # Summaries
    "IdentityRecord",
    # Exceptions
    "IdentityError",
    "DecodingError",
    "UnsupportedKeyTypeError",
    "SigningError",
    "ErasedKeyError",
    "KeyGenerationError",
    "OtherVariantError",
    "ParseError",
]
