"""
Global configuration for libp2p identity keys.

This module contains environment-specific settings that apply across all key types.
Protocol constants (wire tags, PeerId thresholds) are not configurable and live
next to the code that uses them.
"""

import os

MIN_RSA_KEY_BITS = 2048
"""Smallest RSA modulus accepted for generation or decoding (go-libp2p `MinRsaKeyBits`)."""

MAX_RSA_KEY_BITS = 8192
"""Largest RSA modulus accepted for generation or decoding."""

_RSA_BITS_ENV = os.environ.get("LIBP2P_IDENTITY_RSA_BITS", "2048")

try:
    RSA_KEY_BITS = int(_RSA_BITS_ENV)
    """Modulus size used by `Keypair.generate_rsa()`. Defaults to 2048."""
except ValueError:
    raise ValueError(
        f"Invalid LIBP2P_IDENTITY_RSA_BITS environment variable: '{_RSA_BITS_ENV}'. "
        "Expected an integer."
    ) from None

if not MIN_RSA_KEY_BITS <= RSA_KEY_BITS <= MAX_RSA_KEY_BITS:
    raise ValueError(
        f"Invalid LIBP2P_IDENTITY_RSA_BITS environment variable: '{RSA_KEY_BITS}'. "
        f"Supported range: [{MIN_RSA_KEY_BITS}, {MAX_RSA_KEY_BITS}]"
    )
