"""Tests for the libp2p-identity command line tool."""

from __future__ import annotations

import json
import logging
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest

from libp2p_identity_pqc import Keypair, KeyType, PeerId
from libp2p_identity_pqc.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Drop the handlers `main()` installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler.get_name() == "libp2p-identity":
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def ed25519_file(tmp_path: Path, keypairs: dict[KeyType, Keypair]) -> Path:
    """An Ed25519 keypair written to disk."""
    path = tmp_path / "node.key"
    path.write_bytes(keypairs[KeyType.ED25519].to_protobuf_encoding())
    return path


class TestGenerate:
    """Tests for the generate command."""

    def test_writes_keypair(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The file holds a keypair whose PeerId is printed."""
        output = tmp_path / "keys" / "node.key"

        assert main(["--no-color", "generate", "--output", str(output)]) == 0

        printed = capsys.readouterr().out.strip()
        keypair = Keypair.from_protobuf_encoding(output.read_bytes())
        assert keypair.key_type == KeyType.ED25519
        assert printed == str(keypair.to_peer_id())

    def test_file_is_private(self, tmp_path: Path) -> None:
        """Keypair files are readable by the owner only."""
        output = tmp_path / "node.key"
        main(["--no-color", "generate", "--key-type", "secp256k1", "--output", str(output)])

        assert stat.S_IMODE(output.stat().st_mode) == 0o600

    def test_replaced_file_is_private(self, tmp_path: Path) -> None:
        """An existing world-readable file is replaced by an owner-only one."""
        output = tmp_path / "node.key"
        output.write_bytes(b"old contents")
        output.chmod(0o644)

        assert main(["--no-color", "generate", "--output", str(output)]) == 0

        assert stat.S_IMODE(output.stat().st_mode) == 0o600
        assert Keypair.from_protobuf_encoding(output.read_bytes()).key_type == KeyType.ED25519

    def test_dilithium(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Post-quantum keypairs get hashed PeerIds."""
        output = tmp_path / "pq.key"
        args = ["--no-color", "generate", "--key-type", "dilithium", "--output", str(output)]

        assert main(args) == 0

        assert capsys.readouterr().out.startswith("Qm")
        assert output.read_bytes()[:5] == b"\x08\x04\x12\xc0\x3a"

    def test_unknown_key_type(self, tmp_path: Path) -> None:
        """argparse rejects unknown algorithms."""
        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "--key-type", "dsa", "--output", str(tmp_path / "x")])
        assert exc_info.value.code == 2


class TestInspect:
    """Tests for the inspect command."""

    def test_keypair_file(
        self,
        ed25519_file: Path,
        keypairs: dict[KeyType, Keypair],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A keypair file is summarized by its public half."""
        assert main(["--no-color", "inspect", str(ed25519_file)]) == 0

        summary = json.loads(capsys.readouterr().out)
        public_key = keypairs[KeyType.ED25519].public()
        assert summary["keyType"] == "ed25519"
        assert summary["peerId"] == str(public_key.to_peer_id())
        assert summary["inlined"] is True

    def test_public_key_file(
        self,
        tmp_path: Path,
        keypairs: dict[KeyType, Keypair],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """--public reads a public key encoding."""
        public_key = keypairs[KeyType.RSA].public()
        path = tmp_path / "node.pub"
        path.write_bytes(public_key.to_protobuf_encoding())

        assert main(["--no-color", "inspect", str(path), "--public"]) == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["keyType"] == "rsa"
        assert summary["publicKey"] == public_key.to_protobuf_encoding().hex()
        assert summary["inlined"] is False

    def test_corrupt_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Undecodable files exit with status 1 and log the reason."""
        path = tmp_path / "bad.key"
        path.write_bytes(b"\x08\x09\x12\x00")

        assert main(["--no-color", "inspect", str(path)]) == 1
        assert "unsupported key type 9" in caplog.text


class TestPeerIdAndHex:
    """Tests for the peer-id and to-hex commands."""

    def test_peer_id_base58(
        self,
        ed25519_file: Path,
        keypairs: dict[KeyType, Keypair],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The default form is Base58."""
        assert main(["--no-color", "peer-id", str(ed25519_file)]) == 0
        assert capsys.readouterr().out.strip() == str(keypairs[KeyType.ED25519].to_peer_id())

    def test_peer_id_cid(self, ed25519_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--cid prints the CIDv1 form."""
        assert main(["--no-color", "peer-id", str(ed25519_file), "--cid"]) == 0

        cid = capsys.readouterr().out.strip()
        assert cid.startswith("bafzaa")
        assert PeerId.from_string(cid).to_cid() == cid

    def test_to_hex(
        self,
        ed25519_file: Path,
        keypairs: dict[KeyType, Keypair],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """to-hex prints the 64-byte Ed25519 keypair."""
        assert main(["--no-color", "to-hex", str(ed25519_file)]) == 0

        printed = capsys.readouterr().out.strip()
        assert printed == keypairs[KeyType.ED25519].to_raw_bytes().hex()
        assert len(printed) == 128

    def test_missing_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A missing file exits with status 1."""
        assert main(["--no-color", "peer-id", str(tmp_path / "absent.key")]) == 1
        assert "Cannot access key file" in caplog.text


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self) -> None:
        """Running without a command is an error."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_verbose_flag(self) -> None:
        """Global flags precede the command."""
        args = build_parser().parse_args(["-v", "peer-id", "node.key"])

        assert args.verbose is True
        assert args.path == Path("node.key")
        assert args.cid is False


class TestLogging:
    """Tests for the CLI log handler."""

    def test_repeated_runs_share_one_handler(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Running main() twice logs each record once per run."""
        missing = str(tmp_path / "absent.key")

        assert main(["--no-color", "peer-id", missing]) == 1
        assert main(["--no-color", "peer-id", missing]) == 1

        handlers = [h for h in logging.getLogger().handlers if h.get_name() == "libp2p-identity"]
        assert len(handlers) == 1
        assert capsys.readouterr().err.count("Cannot access key file") == 2

    def test_plain_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--no-color output carries no ANSI escapes."""
        main(["--no-color", "peer-id", str(tmp_path / "absent.key")])

        err = capsys.readouterr().err
        assert "ERROR libp2p_identity_pqc.__main__: Cannot access key file" in err
        assert "\x1b[" not in err

    def test_colored_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The default formatter tints the level tag."""
        main(["peer-id", str(tmp_path / "absent.key")])

        err = capsys.readouterr().err
        assert "\x1b[31merror" in err
        assert "Cannot access key file" in err
