"""
KEM COMBINERS
=============
Six ways of folding two KEMs' outputs into one 32-byte shared secret.

Every combiner takes the same six inputs:

    ss_t, ct_t, ek_t       shared secret / ciphertext / encapsulation key
                           of the traditional (classical) KEM
    ss_pq, ct_pq, ek_pq    the same for the post-quantum KEM

and uses SHA3-256 as its only primitive. They differ in which inputs they
bind and how they group them, which changes both the security argument and
the cost. Concatenation order is part of each algorithm: reordering changes
the output.

    KitchenSink  H(ek_t | ek_pq | ss_t | ct_t | ss_pq | ct_pq)
    Chempat      H(ss_t | ss_pq | H(ek_t | ek_pq) | H(ct_t | ct_pq))
    Dhkem        H(H(ek_t | ss_t | ct_t) | H(ek_pq | ss_pq | ct_pq))
    DhkemHalf    H(H(ss_t | ct_t | ek_t) | ss_pq)
    XWing        H(ss_pq | ss_t | ct_t | ek_t)

The *Pre variants hash the encapsulation keys once, when they are built,
and only absorb the per-encapsulation inputs on each call. Their output is
byte-identical to the stateless version's.
"""

import hashlib
from abc import ABC, abstractmethod

SHARED_SECRET_SIZE = 32   # SHA3-256 output


def _h(*parts: bytes) -> bytes:
    h = hashlib.sha3_256()
    for p in parts:
        h.update(p)
    return h.digest()


class Combiner(ABC):
    """Maps (ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq) to a 32-byte secret."""

    name = "combiner"

    @abstractmethod
    def combine(self, ss_t: bytes, ct_t: bytes, ek_t: bytes,
                ss_pq: bytes, ct_pq: bytes, ek_pq: bytes) -> bytes:
        ...

    def __repr__(self):
        return f"{type(self).__name__}()"


class PrecomputedCombiner(Combiner):
    """
    A combiner that has already absorbed one key pair's encapsulation keys.

    combine() keeps the six-argument signature so it drops in anywhere a
    Combiner does, but ek_t / ek_pq are ignored: the keys it was built from
    are used instead.
    """

    @classmethod
    @abstractmethod
    def from_keys(cls, ek_t: bytes, ek_pq: bytes) -> "PrecomputedCombiner":
        ...


# -- KitchenSink ---------------------------------------------------------------

class KitchenSink(Combiner):
    """Everything into one flat hash. Maximal binding; the baseline."""

    name = "kitchen_sink"

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        return _h(ek_t, ek_pq, ss_t, ct_t, ss_pq, ct_pq)


class KitchenSinkPre(PrecomputedCombiner):
    """KitchenSink with the SHA3 state after ek_t | ek_pq kept as a prefix."""

    name = "kitchen_sink_pre"

    def __init__(self, prefix):
        self._prefix = prefix

    @classmethod
    def from_keys(cls, ek_t, ek_pq):
        prefix = hashlib.sha3_256()
        prefix.update(ek_t)
        prefix.update(ek_pq)
        return cls(prefix)

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        h = self._prefix.copy()
        h.update(ss_t)
        h.update(ct_t)
        h.update(ss_pq)
        h.update(ct_pq)
        return h.digest()


# -- Chempat -------------------------------------------------------------------

class Chempat(Combiner):
    """Two-level tree: digest the keys and the ciphertexts, then the secrets."""

    name = "chempat"

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        hybrid_ek = _h(ek_t, ek_pq)
        hybrid_ct = _h(ct_t, ct_pq)
        return _h(ss_t, ss_pq, hybrid_ek, hybrid_ct)


class ChempatPre(PrecomputedCombiner):
    """Chempat with hybrid_ek = H(ek_t | ek_pq) cached."""

    name = "chempat_pre"

    def __init__(self, hybrid_ek: bytes):
        self._hybrid_ek = hybrid_ek

    @classmethod
    def from_keys(cls, ek_t, ek_pq):
        return cls(_h(ek_t, ek_pq))

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        hybrid_ct = _h(ct_t, ct_pq)
        return _h(ss_t, ss_pq, self._hybrid_ek, hybrid_ct)


# -- DHKEM ---------------------------------------------------------------------

class Dhkem(Combiner):
    """A DHKEM-style derivation per component, then a hash of the two."""

    name = "dhkem"

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        input_t  = _h(ek_t, ss_t, ct_t)
        input_pq = _h(ek_pq, ss_pq, ct_pq)
        return _h(input_t, input_pq)


class DhkemPre(PrecomputedCombiner):
    """Dhkem with one SHA3 prefix per component, seeded from its own ek."""

    name = "dhkem_pre"

    def __init__(self, prefix_t, prefix_pq):
        self._prefix_t  = prefix_t
        self._prefix_pq = prefix_pq

    @classmethod
    def from_keys(cls, ek_t, ek_pq):
        prefix_t = hashlib.sha3_256()
        prefix_t.update(ek_t)
        prefix_pq = hashlib.sha3_256()
        prefix_pq.update(ek_pq)
        return cls(prefix_t, prefix_pq)

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        t = self._prefix_t.copy()
        t.update(ss_t)
        t.update(ct_t)

        pq = self._prefix_pq.copy()
        pq.update(ss_pq)
        pq.update(ct_pq)

        return _h(t.digest(), pq.digest())


# -- Half DHKEM / X-Wing -------------------------------------------------------

class DhkemHalf(Combiner):
    """
    DHKEM-style derivation for the classical KEM, raw secret for the PQ KEM.

    The PQ ciphertext and key are not bound here; this leans on the PQ KEM's
    own secret already depending on them.
    """

    name = "dhkem_half"

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        input_t = _h(ss_t, ct_t, ek_t)
        return _h(input_t, ss_pq)


class XWing(Combiner):
    """X-Wing: PQ secret plus the full classical triple, one flat hash."""

    name = "xwing"

    def combine(self, ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq):
        return _h(ss_pq, ss_t, ct_t, ek_t)


# -- Registry ------------------------------------------------------------------

COMBINERS = {
    cls.name: cls
    for cls in (KitchenSink, Chempat, Dhkem, DhkemHalf, XWing)
}

PRECOMPUTED = {
    KitchenSink: KitchenSinkPre,
    Chempat:     ChempatPre,
    Dhkem:       DhkemPre,
}


def get_combiner(name: str) -> Combiner:
    """Return a stateless combiner by registry name."""
    try:
        return COMBINERS[name]()
    except KeyError:
        pre = {cls.name for cls in PRECOMPUTED.values()}
        if name in pre:
            raise ValueError(
                f"{name} needs key material -- build it with precompute(name, ek)."
            ) from None
        raise ValueError(
            f"Unknown combiner {name!r}. Choose from: {', '.join(COMBINERS)}"
        ) from None
