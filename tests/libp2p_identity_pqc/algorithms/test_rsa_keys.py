"""Tests for the RSA adapter."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa

from libp2p_identity_pqc import DecodingError, KeyGenerationError, Keypair, KeyType
from libp2p_identity_pqc.algorithms import RsaKeypair, RsaPublicKey


@pytest.fixture(scope="module")
def weak_key() -> rsa.RSAPrivateKey:
    """A 1024-bit key, below the accepted range."""
    return rsa.generate_private_key(public_exponent=65537, key_size=1024)


class TestEncodings:
    """Tests for PKIX public keys and PKCS#8 keypairs."""

    def test_public_key_is_spki(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Public keys are DER SubjectPublicKeyInfo."""
        public_bytes = keypairs[KeyType.RSA].public().try_into_rsa().to_bytes()
        loaded = serialization.load_der_public_key(public_bytes)

        assert isinstance(loaded, rsa.RSAPublicKey)
        assert loaded.key_size == 2048

    def test_keypair_is_pkcs8(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Keypairs are DER PKCS#8 PrivateKeyInfo (version 0)."""
        der = keypairs[KeyType.RSA].to_raw_bytes()

        assert der[:2] == b"\x30\x82"
        assert der[4:7] == b"\x02\x01\x00"

    def test_pkcs1_private_key_accepted(self, keypairs: dict[KeyType, Keypair]) -> None:
        """Traditional PKCS#1 private keys load and re-encode as PKCS#8."""
        inner = keypairs[KeyType.RSA].try_into_rsa()
        private_key = serialization.load_der_private_key(inner.to_bytes(), password=None)
        pkcs1 = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

        assert RsaKeypair.from_bytes(pkcs1).to_bytes() == inner.to_bytes()

    def test_pkcs1_public_key_rejected(self, keypairs: dict[KeyType, Keypair]) -> None:
        """A bare PKCS#1 RSAPublicKey is not the canonical encoding."""
        public_bytes = keypairs[KeyType.RSA].public().try_into_rsa().to_bytes()
        loaded = serialization.load_der_public_key(public_bytes)
        pkcs1 = loaded.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.PKCS1,
        )

        with pytest.raises(DecodingError):
            RsaPublicKey.from_bytes(pkcs1)

    def test_garbage(self) -> None:
        """Non-DER input is rejected."""
        with pytest.raises(DecodingError, match="invalid PKCS#8 key"):
            RsaKeypair.from_bytes(b"\x00" * 16)
        with pytest.raises(DecodingError, match="invalid SubjectPublicKeyInfo"):
            RsaPublicKey.from_bytes(b"\x00" * 16)


class TestKeySize:
    """Tests for modulus size limits."""

    def test_weak_public_key(self, weak_key: rsa.RSAPrivateKey) -> None:
        """1024-bit public keys are refused."""
        spki = weak_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        with pytest.raises(DecodingError, match="1024-bit modulus outside"):
            RsaPublicKey.from_bytes(spki)

    def test_weak_private_key(self, weak_key: rsa.RSAPrivateKey) -> None:
        """1024-bit private keys are refused."""
        pkcs8 = weak_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        with pytest.raises(DecodingError, match="1024-bit modulus outside"):
            RsaKeypair.from_bytes(pkcs8)

    @pytest.mark.parametrize("key_size", [512, 1024, 8200, 16384])
    def test_generate_out_of_range(self, key_size: int) -> None:
        """Generation refuses sizes outside [2048, 8192]."""
        with pytest.raises(KeyGenerationError, match=f"unsupported modulus size {key_size}"):
            RsaKeypair.generate(key_size)

    def test_ed25519_key_is_not_rsa(self) -> None:
        """Keys of other algorithms are rejected by type."""
        der = ed25519.Ed25519PrivateKey.generate().private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        with pytest.raises(DecodingError, match="expected an RSA key"):
            RsaKeypair.from_bytes(der)


class TestSignatures:
    """Tests for PKCS#1 v1.5 SHA-256 signatures."""

    def test_deterministic(self, keypairs: dict[KeyType, Keypair]) -> None:
        """PKCS#1 v1.5 signatures do not use randomness."""
        keypair = keypairs[KeyType.RSA]
        assert keypair.sign(b"same") == keypair.sign(b"same")

    def test_truncated_signature(self, keypairs: dict[KeyType, Keypair]) -> None:
        """A short signature fails without raising."""
        keypair = keypairs[KeyType.RSA]
        signature = keypair.sign(b"short")

        assert not keypair.public().verify(b"short", signature[:-1])

    def test_repr_shows_size(self, keypairs: dict[KeyType, Keypair]) -> None:
        """The adapter repr shows the modulus size only."""
        assert repr(keypairs[KeyType.RSA].try_into_rsa()) == "RsaKeypair(bits=2048)"
