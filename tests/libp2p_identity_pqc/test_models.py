"""Tests for the IdentityRecord summary model."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from libp2p_identity_pqc import IdentityRecord, Keypair, KeyType


class TestIdentityRecord:
    """Tests for IdentityRecord."""

    def test_from_ed25519_key(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Inlined keys are flagged as such."""
        public_key = keypairs[KeyType.ED25519].public()
        record = IdentityRecord.from_public_key(public_key)

        assert record.key_type == "ed25519"
        assert record.peer_id == str(public_key.to_peer_id())
        assert record.peer_id_cid == public_key.to_peer_id().to_cid()
        assert bytes.fromhex(record.public_key) == public_key.to_protobuf_encoding()
        assert record.inlined is True

    def test_from_dilithium_key(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Hashed keys are not inlined."""
        record = IdentityRecord.from_public_key(keypairs[KeyType.DILITHIUM].public())

        assert record.key_type == "dilithium"
        assert record.peer_id.startswith("Qm")
        assert record.inlined is False
        assert len(record.public_key) == 2 * 2597

    def test_json_uses_camel_case(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Serialized field names are camel case."""
        record = IdentityRecord.from_public_key(keypairs[KeyType.SECP256K1].public())
        payload = json.loads(record.model_dump_json(by_alias=True))

        assert set(payload) == {"keyType", "peerId", "peerIdCid", "publicKey", "inlined"}
        assert payload["keyType"] == "secp256k1"

    def test_validate_by_alias(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Records can be parsed back from their JSON form."""
        record = IdentityRecord.from_public_key(keypairs[KeyType.ECDSA].public())
        parsed = IdentityRecord.model_validate_json(record.model_dump_json(by_alias=True))

        assert parsed == record

    def test_frozen(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Records are immutable."""
        record = IdentityRecord.from_public_key(keypairs[KeyType.ED25519].public())
        with pytest.raises(ValidationError):
            record.inlined = False  # type: ignore[misc]

    def test_extra_fields_forbidden(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            IdentityRecord(
                key_type="ed25519",
                peer_id="12D3KooW",
                peer_id_cid="bafzaa",
                public_key="00",
                inlined=True,
                comment="x",  # type: ignore[call-arg]
            )

    def test_strict_types(self) -> None:
        """Values are not coerced."""
        with pytest.raises(ValidationError):
            IdentityRecord(
                key_type="ed25519",
                peer_id="12D3KooW",
                peer_id_cid="bafzaa",
                public_key="00",
                inlined="yes",  # type: ignore[arg-type]
            )
