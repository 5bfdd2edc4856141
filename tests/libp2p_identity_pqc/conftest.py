"""
Shared pytest fixtures for identity tests.

Key generation is expensive for RSA and Dilithium, so one keypair per key type is
generated per session and shared. Tests that mutate a keypair (e.g. `erase()`)
must generate their own.
"""

from __future__ import annotations

import pytest

from libp2p_identity_pqc import Keypair, KeyType
from tests.libp2p_identity_pqc.helpers import ALL_KEY_TYPES, key_type_id


@pytest.fixture(scope="session")
def keypairs() -> dict[KeyType, Keypair]:
    """One shared keypair per key type."""
    return {key_type: Keypair.generate(key_type) for key_type in KeyType}


@pytest.fixture(scope="session")
def other_keypairs() -> dict[KeyType, Keypair]:
    """A second, independent keypair per key type."""
    return {key_type: Keypair.generate(key_type) for key_type in KeyType}


@pytest.fixture(params=ALL_KEY_TYPES, ids=key_type_id)
def key_type(request: pytest.FixtureRequest) -> KeyType:
    """Each key type in turn."""
    return request.param


@pytest.fixture
def keypair(keypairs: dict[KeyType, Keypair], key_type: KeyType) -> Keypair:
    """Shared keypair of the current key type."""
    return keypairs[key_type]
