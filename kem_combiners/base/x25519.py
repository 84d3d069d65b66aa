"""
X25519 as a KEM — the classical half
=====================================
Diffie-Hellman over Curve25519 (RFC 7748), wrapped as a KEM:

    ek = public key of a static secret          (32 bytes)
    ct = public key of a fresh ephemeral secret (32 bytes)
    ss = X25519(ephemeral, ek) = X25519(static, ct)

No implicit rejection: a ciphertext that is not a valid 32-byte point, or
that lands on a low-order point, makes decapsulation raise ValueError.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)

from . import BaseKem, Rng, draw

logger = logging.getLogger(__name__)


def _raw(public_key: X25519PublicKey) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )


class X25519Kem(BaseKem):
    """X25519 Diffie-Hellman in KEM form."""

    name     = "X25519"
    KEY_SIZE = 32

    def generate(self, rng: Optional[Rng] = None) -> Tuple[X25519PrivateKey, bytes]:
        dk = X25519PrivateKey.from_private_bytes(draw(rng, self.KEY_SIZE))
        ek = _raw(dk.public_key())
        logger.debug(f"X25519 keys: ek={len(ek)}B")
        return dk, ek

    def encapsulate(self, rng: Optional[Rng], ek: bytes) -> Tuple[bytes, bytes]:
        eph = X25519PrivateKey.from_private_bytes(draw(rng, self.KEY_SIZE))
        ct  = _raw(eph.public_key())
        ss  = eph.exchange(X25519PublicKey.from_public_bytes(ek))
        logger.debug(f"X25519 encap: ct={len(ct)}B ss={len(ss)}B")
        return ct, ss

    def decapsulate(self, dk: X25519PrivateKey, ct: bytes) -> bytes:
        return dk.exchange(X25519PublicKey.from_public_bytes(ct))
