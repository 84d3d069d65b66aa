"""
kem_combiners — Hybrid KEM combiners
=====================================
Binding a classical KEM and a post-quantum KEM into one shared secret,
and measuring what each way of doing it costs.

Combiners (SHA3-256, 32-byte output):
    KitchenSink   — everything, one flat hash            (+ KitchenSinkPre)
    Chempat       — hashed keys + hashed ciphertexts     (+ ChempatPre)
    Dhkem         — per-component DHKEM-style digests    (+ DhkemPre)
    DhkemHalf     — DHKEM classical half + raw PQ secret
    XWing         — X-Wing: PQ secret + classical triple

Base KEMs:
    X25519Kem     — cryptography
    MlKem         — ML-KEM-512/768/1024 via kyber-py
    ClassicMcEliece (kem_combiners.base.mceliece) — liboqs, optional

License: Apache 2.0
"""

__version__  = "0.1.0"

from .base      import BaseKem, RandomnessError, X25519Kem, MlKem
from .combiners import (
    SHARED_SECRET_SIZE,
    COMBINERS,
    PRECOMPUTED,
    Combiner,
    PrecomputedCombiner,
    KitchenSink,
    KitchenSinkPre,
    Chempat,
    ChempatPre,
    Dhkem,
    DhkemPre,
    DhkemHalf,
    XWing,
    get_combiner,
)
from .hybrid    import (
    EncapsulationKey,
    DecapsulationKey,
    Ciphertext,
    HybridKem,
    precompute,
    x25519_mlkem768,
)

__all__ = [
    "BaseKem",
    "RandomnessError",
    "X25519Kem",
    "MlKem",
    "SHARED_SECRET_SIZE",
    "COMBINERS",
    "PRECOMPUTED",
    "Combiner",
    "PrecomputedCombiner",
    "KitchenSink",
    "KitchenSinkPre",
    "Chempat",
    "ChempatPre",
    "Dhkem",
    "DhkemPre",
    "DhkemHalf",
    "XWing",
    "get_combiner",
    "EncapsulationKey",
    "DecapsulationKey",
    "Ciphertext",
    "HybridKem",
    "precompute",
    "x25519_mlkem768",
]
