"""Key type lists and byte helpers for parametrized tests."""

from __future__ import annotations

from libp2p_identity_pqc import KeyType

ALL_KEY_TYPES: list[KeyType] = list(KeyType)
"""Every supported key type, for parametrization."""

CLASSICAL_KEY_TYPES: list[KeyType] = [kt for kt in KeyType if kt != KeyType.DILITHIUM]
"""Key types with cheap signing, for high-volume property tests."""


def key_type_id(key_type: KeyType) -> str:
    """Readable test id for a key type parameter."""
    return key_type.name.lower()


def flip_bit(data: bytes, bit: int) -> bytes:
    """Return `data` with one bit inverted. `bit` wraps around the length."""
    index = bit % (len(data) * 8)
    mutated = bytearray(data)
    mutated[index // 8] ^= 1 << (index % 8)
    return bytes(mutated)
