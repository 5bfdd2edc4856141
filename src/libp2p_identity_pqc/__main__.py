"""
libp2p identity key tool.

Create, inspect and convert protobuf-encoded libp2p keypairs.

Usage::

    python -m libp2p_identity_pqc generate --key-type dilithium --output node.key
    python -m libp2p_identity_pqc inspect node.key
    python -m libp2p_identity_pqc inspect node.pub --public
    python -m libp2p_identity_pqc peer-id node.key --cid
    python -m libp2p_identity_pqc to-hex node.key

Commands:
    generate   Write a fresh keypair (protobuf encoding, mode 0600) and print its PeerId
    inspect    Print key type, PeerIds and public key of a keypair or public key file as JSON
    peer-id    Print the PeerId of a keypair file
    to-hex     Print the algorithm-level keypair bytes as hex
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .exceptions import IdentityError
from .key_type import KeyType
from .keypair import Keypair
from .models import IdentityRecord
from .public_key import PublicKey

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Formatter for terminal output: a tinted level tag, a dimmed logger name."""

    DIM = "\x1b[2m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        tag = f"{color}{record.levelname.lower():<7}{self.RESET}"
        return f"{tag} {self.DIM}{record.name}{self.RESET} {message}"


_HANDLER_NAME = "libp2p-identity"
"""Name of the stderr handler the CLI owns on the root logger."""


def setup_logging(verbose: bool = False, no_color: bool = False) -> logging.Handler:
    """
    Route log records to stderr.

    The CLI installs one named handler on the root logger. Calling this again
    reconfigures that handler instead of adding another, so in-process reruns
    of `main()` never print a record twice.

    Args:
        verbose: Show debug records (rejected keys, generation events).
        no_color: Use a plain layout without ANSI escapes.

    Returns:
        The handler in use.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()

    handler = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    elif isinstance(handler, logging.StreamHandler):
        handler.setStream(sys.stderr)

    if no_color:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(ColoredFormatter())

    handler.setLevel(level)
    root.setLevel(level)
    return handler


def _load_keypair(path: Path) -> Keypair:
    return Keypair.from_protobuf_encoding(path.read_bytes())


def _write_secret(path: Path, data: bytes) -> None:
    """Write key material to a file that only its owner can read."""
    path.unlink(missing_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


def cmd_generate(args: argparse.Namespace) -> None:
    """Generate a keypair and write it to disk."""
    key_type = KeyType.from_name(args.key_type)
    keypair = Keypair.generate(key_type)

    output: Path = args.output
    output.parent.mkdir(parents=True, exist_ok=True)
    _write_secret(output, keypair.to_protobuf_encoding())

    peer_id = keypair.to_peer_id()
    logger.info("Wrote %s keypair to %s", key_type.name, output)
    print(peer_id)


def cmd_inspect(args: argparse.Namespace) -> None:
    """Print a JSON summary of a keypair or public key file."""
    data = args.path.read_bytes()
    if args.public:
        public_key = PublicKey.from_protobuf_encoding(data)
    else:
        public_key = Keypair.from_protobuf_encoding(data).public()

    record = IdentityRecord.from_public_key(public_key)
    print(record.model_dump_json(by_alias=True, indent=2))


def cmd_peer_id(args: argparse.Namespace) -> None:
    """Print the PeerId of a keypair file."""
    peer_id = _load_keypair(args.path).to_peer_id()
    print(peer_id.to_cid() if args.cid else peer_id.to_base58())


def cmd_to_hex(args: argparse.Namespace) -> None:
    """Print the raw keypair bytes of a keypair file as hex."""
    print(_load_keypair(args.path).to_raw_bytes().hex())


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="libp2p-identity",
        description="libp2p identity key tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate a keypair file")
    generate.add_argument(
        "--key-type",
        default="ed25519",
        choices=[key_type.name.lower() for key_type in KeyType],
        help="Signature algorithm (default: ed25519)",
    )
    generate.add_argument(
        "--output",
        required=True,
        type=Path,
        help="Where to write the protobuf-encoded keypair",
    )
    generate.set_defaults(handler=cmd_generate)

    inspect = commands.add_parser("inspect", help="Describe a key file as JSON")
    inspect.add_argument("path", type=Path, help="Protobuf-encoded key file")
    inspect.add_argument(
        "--public",
        action="store_true",
        help="The file holds a public key instead of a keypair",
    )
    inspect.set_defaults(handler=cmd_inspect)

    peer_id = commands.add_parser("peer-id", help="Print the PeerId of a keypair file")
    peer_id.add_argument("path", type=Path, help="Protobuf-encoded keypair file")
    peer_id.add_argument(
        "--cid",
        action="store_true",
        help="Print the CIDv1 (base32) form instead of Base58",
    )
    peer_id.set_defaults(handler=cmd_peer_id)

    to_hex = commands.add_parser("to-hex", help="Print raw keypair bytes as hex")
    to_hex.add_argument("path", type=Path, help="Protobuf-encoded keypair file")
    to_hex.set_defaults(handler=cmd_to_hex)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        args.handler(args)
    except OSError as e:
        logger.error("Cannot access key file: %s", e)
        return 1
    except IdentityError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
