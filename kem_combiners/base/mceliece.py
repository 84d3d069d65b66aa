"""
Classic McEliece — the code-based half
=======================================
Backed by liboqs through its Python wrapper. Huge public keys (261 KB for
the smallest parameter set) and tiny ciphertexts: the opposite trade-off
to ML-KEM, which is exactly what makes it interesting next to a combiner
that hashes the whole encapsulation key on every call.

liboqs draws its own system entropy; the rng argument is accepted to keep
the BaseKem contract but is not consumed.

Not imported by the package by default:
    from kem_combiners.base.mceliece import ClassicMcEliece

Dependencies: liboqs-python  (pip install "kem-combiners[mceliece]")
"""

import logging
from typing import Optional, Tuple

import oqs

from . import BaseKem, Rng

logger = logging.getLogger(__name__)

PARAMETER_SETS = (
    "Classic-McEliece-348864",
    "Classic-McEliece-348864f",
    "Classic-McEliece-460896",
    "Classic-McEliece-460896f",
    "Classic-McEliece-6688128",
    "Classic-McEliece-6688128f",
    "Classic-McEliece-6960119",
    "Classic-McEliece-6960119f",
    "Classic-McEliece-8192128",
    "Classic-McEliece-8192128f",
)


class ClassicMcEliece(BaseKem):
    """Classic McEliece KEM via liboqs."""

    def __init__(self, parameter_set: str = "Classic-McEliece-348864"):
        if parameter_set not in PARAMETER_SETS:
            raise ValueError(f"Unknown Classic McEliece parameter set: {parameter_set}")
        enabled = oqs.get_enabled_kem_mechanisms()
        if parameter_set not in enabled:
            raise ValueError(f"{parameter_set} not enabled in this liboqs build.")
        self.name = parameter_set

    def generate(self, rng: Optional[Rng] = None) -> Tuple[bytes, bytes]:
        with oqs.KeyEncapsulation(self.name) as kem:
            ek = kem.generate_keypair()
            dk = kem.export_secret_key()
        logger.debug(f"{self.name} keys: ek={len(ek)}B dk={len(dk)}B")
        return dk, ek

    def encapsulate(self, rng: Optional[Rng], ek: bytes) -> Tuple[bytes, bytes]:
        with oqs.KeyEncapsulation(self.name) as kem:
            ct, ss = kem.encap_secret(ek)
        logger.debug(f"{self.name} encap: ct={len(ct)}B ss={len(ss)}B")
        return ct, ss

    def decapsulate(self, dk: bytes, ct: bytes) -> bytes:
        with oqs.KeyEncapsulation(self.name, dk) as kem:
            return kem.decap_secret(ct)
