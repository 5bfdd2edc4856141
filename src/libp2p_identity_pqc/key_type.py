"""
libp2p-crypto key type codes.

The numeric values are the `KeyType` enum of libp2p's `crypto.proto`. They are
written to the wire as field 1 of every encoded key, so a value must never be
renumbered or reused for a different algorithm once published.
"""

from __future__ import annotations

from enum import IntEnum

__all__ = [
    "KeyType",
]


class KeyType(IntEnum):
    """Signature algorithm carried by a keypair, public key or signature."""

    RSA = 0
    """RSA, PKCS#1 v1.5 signatures over SHA-256."""

    ED25519 = 1
    """Ed25519 (RFC 8032)."""

    SECP256K1 = 2
    """ECDSA over secp256k1, Bitcoin-style compressed keys."""

    ECDSA = 3
    """ECDSA over NIST P-256."""

    DILITHIUM = 4
    """ML-DSA-87 (FIPS 204, Dilithium security level 5)."""

    @classmethod
    def from_name(cls, name: str) -> KeyType:
        """
        Look up a key type by its case-insensitive name.

        Args:
            name: Algorithm name, e.g. "ed25519" or "Dilithium".

        Returns:
            The matching key type.

        Raises:
            ValueError: If no key type has that name.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            choices = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"Unknown key type {name!r} (expected one of: {choices})") from None
