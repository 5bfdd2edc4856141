"""Benchmark identity key operations for every key type.

Compares the post-quantum Dilithium (ML-DSA-87) keys against the classical
algorithms on the operations a libp2p node performs per peer:

    - key generation
    - signing and verification over 32 B to 4 KiB messages
    - protobuf encode/decode round-trips
    - PeerId derivation

Usage:
    python scripts/bench_identity.py
    python scripts/bench_identity.py --iterations 50 --key-type dilithium
"""

import argparse
import os
import time
from collections.abc import Callable

from libp2p_identity_pqc import Keypair, KeyType, PublicKey

MESSAGE_SIZES = [32, 64, 128, 256, 512, 1024, 2048, 4096]


def time_op(op: Callable[[], object], iterations: int) -> float:
    """Return the mean wall time of `op` in milliseconds."""
    start = time.perf_counter()
    for _ in range(iterations):
        op()
    return (time.perf_counter() - start) * 1000 / iterations


def bench_key_type(key_type: KeyType, iterations: int) -> list[tuple[str, float]]:
    """
    Run every benchmark for one key type.

    Parameters
    ----------
    key_type : KeyType
        Algorithm to benchmark.
    iterations : int
        Repetitions per measurement. RSA generation uses a fifth of them.

    Returns
    -------
    list of (label, milliseconds)
    """
    results: list[tuple[str, float]] = []

    gen_iterations = max(1, iterations // 5) if key_type == KeyType.RSA else iterations
    results.append(("generate", time_op(lambda: Keypair.generate(key_type), gen_iterations)))

    keypair = Keypair.generate(key_type)
    public_key = keypair.public()

    for size in MESSAGE_SIZES:
        message = os.urandom(size)
        signature = keypair.sign(message)
        results.append((f"sign {size}B", time_op(lambda: keypair.sign(message), iterations)))
        results.append(
            (
                f"verify {size}B",
                time_op(lambda: public_key.verify(message, signature), iterations),
            )
        )

    encoded_keypair = keypair.to_protobuf_encoding()
    encoded_public = public_key.to_protobuf_encoding()
    results.append(
        (
            "keypair decode",
            time_op(lambda: Keypair.from_protobuf_encoding(encoded_keypair), iterations),
        )
    )
    results.append(
        (
            "public key decode",
            time_op(lambda: PublicKey.from_protobuf_encoding(encoded_public), iterations),
        )
    )
    results.append(("peer id", time_op(public_key.to_peer_id, iterations)))

    return results


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--iterations", type=int, default=20, help="Repetitions per measurement")
    parser.add_argument(
        "--key-type",
        action="append",
        choices=[key_type.name.lower() for key_type in KeyType],
        help="Restrict to these key types (can be repeated)",
    )
    args = parser.parse_args()

    key_types = (
        [KeyType.from_name(name) for name in args.key_type] if args.key_type else list(KeyType)
    )

    for key_type in key_types:
        print(f"\n{key_type.name} ({args.iterations} iterations)")
        for label, millis in bench_key_type(key_type, args.iterations):
            print(f"  {label:<20} {millis:10.3f} ms")


if __name__ == "__main__":
    main()
