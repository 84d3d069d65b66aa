"""
HYBRID KEM
==========
Two independent KEMs run side by side, glued together by a combiner.

Protocol:
  1. Receiver: generate() -> (dk, ek)
       a. T.generate  -> (dk_t,  ek_t)
       b. PQ.generate -> (dk_pq, ek_pq)
       c. ek = (ek_t, ek_pq);  dk = (dk_t, dk_pq, ek)
  2. Sender: encap(combiner, ek) -> (ct, ss)
       a. T.encapsulate(ek_t)   -> (ct_t,  ss_t)
       b. PQ.encapsulate(ek_pq) -> (ct_pq, ss_pq)
       c. ss = combiner(ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq)
  3. Receiver: decap(combiner, dk, ct) -> ss
       a. T.decapsulate(dk_t, ct_t)    -> ss_t
       b. PQ.decapsulate(dk_pq, ct_pq) -> ss_pq
       c. same combiner, with the ek stored inside dk

The combiner is chosen per call, not per key pair. Encap and decap must use
the same one; a mismatch is not detected and just yields a different secret.

Bundle format (keys and ciphertexts):
    [4-byte len(t)][t][pq]
"""

import logging
import struct
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Type, Union

from .base import BaseKem, MlKem, Rng, X25519Kem
from .combiners import COMBINERS, PRECOMPUTED, Combiner, PrecomputedCombiner

logger = logging.getLogger(__name__)


def _bundle(t: bytes, pq: bytes) -> bytes:
    return struct.pack('>I', len(t)) + t + pq


def _unbundle(bundle: bytes) -> Tuple[bytes, bytes]:
    if len(bundle) < 4:
        raise ValueError("Bundle too short.")
    t_len = struct.unpack('>I', bundle[:4])[0]
    if len(bundle) < 4 + t_len:
        raise ValueError("Bundle truncated -- classical component incomplete.")
    return bundle[4:4 + t_len], bundle[4 + t_len:]


@dataclass(frozen=True)
class EncapsulationKey:
    """Public half: the classical and post-quantum encapsulation keys."""
    t: bytes
    pq: bytes

    def to_bytes(self) -> bytes:
        return _bundle(self.t, self.pq)

    @classmethod
    def from_bytes(cls, data: bytes) -> "EncapsulationKey":
        return cls(*_unbundle(data))


@dataclass(frozen=True)
class DecapsulationKey:
    """Private half. Carries the ek it was generated with, for the combiner."""
    t: Any
    pq: Any
    ek: EncapsulationKey


@dataclass(frozen=True)
class Ciphertext:
    t: bytes
    pq: bytes

    def to_bytes(self) -> bytes:
        return _bundle(self.t, self.pq)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ciphertext":
        return cls(*_unbundle(data))


class HybridKem:
    """A classical KEM and a post-quantum KEM composed through a combiner."""

    def __init__(self, t: BaseKem, pq: BaseKem):
        self.t  = t
        self.pq = pq
        logger.info(f"HybridKem {t.name} + {pq.name}")

    def generate(self, rng: Optional[Rng] = None) -> Tuple[DecapsulationKey, EncapsulationKey]:
        """Return (dk, ek). Randomness failures propagate."""
        dk_t, ek_t   = self.t.generate(rng)
        dk_pq, ek_pq = self.pq.generate(rng)

        ek = EncapsulationKey(t=ek_t, pq=ek_pq)
        dk = DecapsulationKey(t=dk_t, pq=dk_pq, ek=ek)
        logger.debug(f"Keys: ek_t={len(ek_t)}B ek_pq={len(ek_pq)}B")
        return dk, ek

    def encap(self, combiner: Combiner, ek: EncapsulationKey,
              rng: Optional[Rng] = None) -> Tuple[Ciphertext, bytes]:
        """Encapsulate to ek. Returns (ciphertext, 32-byte shared secret)."""
        ct_t, ss_t   = self.t.encapsulate(rng, ek.t)
        ct_pq, ss_pq = self.pq.encapsulate(rng, ek.pq)

        ct = Ciphertext(t=ct_t, pq=ct_pq)
        ss = combiner.combine(ss_t, ct.t, ek.t, ss_pq, ct.pq, ek.pq)
        logger.debug(f"Encap: ct_t={len(ct_t)}B ct_pq={len(ct_pq)}B")
        return ct, ss

    def decap(self, combiner: Combiner, dk: DecapsulationKey, ct: Ciphertext) -> bytes:
        """
        Recover the shared secret. Whatever the base KEMs do with a bad
        ciphertext (raise, or implicitly reject) passes through untouched.
        """
        ss_t  = self.t.decapsulate(dk.t, ct.t)
        ss_pq = self.pq.decapsulate(dk.pq, ct.pq)
        return combiner.combine(ss_t, ct.t, dk.ek.t, ss_pq, ct.pq, dk.ek.pq)

    def __repr__(self):
        return f"HybridKem({self.t.name} + {self.pq.name})"


def x25519_mlkem768() -> HybridKem:
    """The X25519 + ML-KEM-768 pairing."""
    return HybridKem(X25519Kem(), MlKem(768))


# -- Stateful-combiner factory -------------------------------------------------

_PRE_BY_NAME = {cls.name: cls for cls in PRECOMPUTED.values()}


def _precomputed_class(combiner) -> Type[PrecomputedCombiner]:
    if isinstance(combiner, str):
        if combiner in _PRE_BY_NAME:
            return _PRE_BY_NAME[combiner]
        if combiner not in COMBINERS:
            raise ValueError(f"Unknown combiner {combiner!r}.")
        combiner = COMBINERS[combiner]
    if isinstance(combiner, type) and issubclass(combiner, PrecomputedCombiner):
        return combiner
    cls = combiner if isinstance(combiner, type) else type(combiner)
    if cls not in PRECOMPUTED:
        raise ValueError(f"{cls.__name__} has no precomputing variant.")
    return PRECOMPUTED[cls]


def precompute(combiner: Union[str, Combiner, Type[Combiner]],
               ek: EncapsulationKey) -> PrecomputedCombiner:
    """
    Build a combiner that has already hashed ek's key material.

    Use it for every encap/decap under that one key pair; its output is the
    same as the stateless combiner's, minus the cost of rehashing ek.
    """
    pre = _precomputed_class(combiner).from_keys(ek.t, ek.pq)
    logger.debug(f"Precomputed {pre.name} over ek={len(ek.t) + len(ek.pq)}B")
    return pre


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=' %(message)s')

    kem    = x25519_mlkem768()
    dk, ek = kem.generate()
    for name in COMBINERS:
        c      = COMBINERS[name]()
        ct, ss = kem.encap(c, ek)
        assert kem.decap(c, dk, ct) == ss
        print(f"  {name:<14} ss={ss.hex()[:32]}...  ✓")
    for cls in PRECOMPUTED.values():
        c      = precompute(cls, ek)
        ct, ss = kem.encap(c, ek)
        assert kem.decap(c, dk, ct) == ss
        print(f"  {c.name:<14} ss={ss.hex()[:32]}...  ✓")
