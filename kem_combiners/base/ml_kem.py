"""
ML-KEM  |  NIST FIPS 203 — the lattice half
============================================
Thin adapter over kyber-py's ML-KEM parameter sets.

VARIANTS (security level vs RSA/ECC equivalent):
ML-KEM-512  -> ~Level 1 post-quantum   ek=800B   ct=768B
ML-KEM-768  -> ~Level 3 post-quantum   ek=1184B  ct=1088B
ML-KEM-1024 -> ~Level 5 post-quantum   ek=1568B  ct=1568B

Randomness is drawn from the caller's rng and fed to the deterministic
FIPS 203 entry points (KeyGen from a 64-byte seed d||z, Encaps_internal
from a 32-byte message m), so a seeded rng reproduces keys and ciphertexts.

Decapsulation uses implicit rejection: a tampered ciphertext of the right
length yields an unpredictable secret, never an error. Wrong-length keys
or ciphertexts are rejected by kyber-py with ValueError.

Dependencies: kyber-py >= 1.0
"""

import logging
from typing import Optional, Tuple

from kyber_py.ml_kem import ML_KEM_512, ML_KEM_768, ML_KEM_1024

from . import BaseKem, Rng, draw

logger = logging.getLogger(__name__)

SECURITY_LEVELS = {
    512 : ML_KEM_512,
    768 : ML_KEM_768,
    1024: ML_KEM_1024,
}


class MlKem(BaseKem):
    """ML-KEM-512 / 768 / 1024 backed by kyber-py."""

    SEED_SIZE    = 64   # d || z
    MESSAGE_SIZE = 32

    def __init__(self, security_level: int = 768):
        if security_level not in SECURITY_LEVELS:
            raise ValueError("security_level must be 512, 768, or 1024")
        self.level = security_level
        self.name  = f"ML-KEM-{security_level}"
        self._kem  = SECURITY_LEVELS[security_level]

    def generate(self, rng: Optional[Rng] = None) -> Tuple[bytes, bytes]:
        ek, dk = self._kem.key_derive(draw(rng, self.SEED_SIZE))
        logger.debug(f"{self.name} keys: ek={len(ek)}B dk={len(dk)}B")
        return dk, ek

    def encapsulate(self, rng: Optional[Rng], ek: bytes) -> Tuple[bytes, bytes]:
        ss, ct = self._kem._encaps_internal(ek, draw(rng, self.MESSAGE_SIZE))
        logger.debug(f"{self.name} encap: ct={len(ct)}B ss={len(ss)}B")
        return ct, ss

    def decapsulate(self, dk: bytes, ct: bytes) -> bytes:
        return self._kem.decaps(dk, ct)
