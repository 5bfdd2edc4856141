"""Shared helpers for identity tests."""

from .keys import ALL_KEY_TYPES, CLASSICAL_KEY_TYPES, flip_bit, key_type_id

__all__ = [
    "ALL_KEY_TYPES",
    "CLASSICAL_KEY_TYPES",
    "flip_bit",
    "key_type_id",
]
