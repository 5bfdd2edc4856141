"""Serializable summaries of identity keys."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Self

from .peer_id import MultihashCode
from .public_key import PublicKey


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Field names serialize in camel case, e.g. `peer_id` becomes `peerId`.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )


class IdentityRecord(StrictBaseModel):
    """Public facts about one identity, as printed by the CLI."""

    key_type: str
    """Lowercase algorithm name."""

    peer_id: str
    """Legacy Base58 PeerId."""

    peer_id_cid: str
    """CIDv1 (base32) PeerId."""

    public_key: str
    """Hex of the protobuf-encoded public key."""

    inlined: bool
    """True if the PeerId embeds the public key (identity multihash)."""

    @classmethod
    def from_public_key(cls, public_key: PublicKey) -> Self:
        """Summarize a public key."""
        peer_id = public_key.to_peer_id()
        return cls(
            key_type=public_key.key_type.name.lower(),
            peer_id=peer_id.to_base58(),
            peer_id_cid=peer_id.to_cid(),
            public_key=public_key.to_protobuf_encoding().hex(),
            inlined=peer_id.hash_code == MultihashCode.IDENTITY,
        )
