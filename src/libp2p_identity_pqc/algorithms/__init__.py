"""
Signature algorithm adapters.

Each supported key type has one module wrapping its cryptographic engine:

- ed25519:   `cryptography` Ed25519
- rsa:       `cryptography` RSA (PKCS#1 v1.5, SHA-256)
- ecdsa:     `cryptography` ECDSA over P-256
- secp256k1: `cryptography` ECDSA over secp256k1
- dilithium: `dilithium-py` ML-DSA-87

The two tables below are the only place that maps a wire tag to an adapter.
Supporting a new algorithm means adding a `KeyType` member, an adapter module,
and one entry in each table.
"""

from typing import Final

from ..key_type import KeyType
from .base import AlgorithmKeypair, AlgorithmPublicKey, SecretKeyMaterial
from .dilithium import DilithiumKeypair, DilithiumPublicKey
from .ecdsa import EcdsaKeypair, EcdsaPublicKey
from .ed25519 import Ed25519Keypair, Ed25519PublicKey
from .rsa import RsaKeypair, RsaPublicKey
from .secp256k1 import Secp256k1Keypair, Secp256k1PublicKey

KEYPAIR_TYPES: Final[dict[KeyType, type[AlgorithmKeypair]]] = {
    KeyType.RSA: RsaKeypair,
    KeyType.ED25519: Ed25519Keypair,
    KeyType.SECP256K1: Secp256k1Keypair,
    KeyType.ECDSA: EcdsaKeypair,
    KeyType.DILITHIUM: DilithiumKeypair,
}
"""Keypair adapter for each key type."""

PUBLIC_KEY_TYPES: Final[dict[KeyType, type[AlgorithmPublicKey]]] = {
    KeyType.RSA: RsaPublicKey,
    KeyType.ED25519: Ed25519PublicKey,
    KeyType.SECP256K1: Secp256k1PublicKey,
    KeyType.ECDSA: EcdsaPublicKey,
    KeyType.DILITHIUM: DilithiumPublicKey,
}
"""Public key adapter for each key type."""

__all__ = [
    # Dispatch tables
    "KEYPAIR_TYPES",
    "PUBLIC_KEY_TYPES",
    # Contracts
    "AlgorithmKeypair",
    "AlgorithmPublicKey",
    "SecretKeyMaterial",
    # Adapters
    "DilithiumKeypair",
    "DilithiumPublicKey",
    "EcdsaKeypair",
    "EcdsaPublicKey",
    "Ed25519Keypair",
    "Ed25519PublicKey",
    "RsaKeypair",
    "RsaPublicKey",
    "Secp256k1Keypair",
    "Secp256k1PublicKey",
]
