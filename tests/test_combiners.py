"""
Combiner algorithms — concatenation order, precomputation equivalence,
purity and the registry / factory surface.

Run with:  python -m pytest tests/ -v
"""

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from kem_combiners.combiners import (
    SHARED_SECRET_SIZE,
    COMBINERS,
    PRECOMPUTED,
    Chempat,
    ChempatPre,
    Dhkem,
    DhkemHalf,
    DhkemPre,
    KitchenSink,
    KitchenSinkPre,
    XWing,
    get_combiner,
)
from kem_combiners.hybrid import EncapsulationKey, precompute


def H(*parts):
    return hashlib.sha3_256(b"".join(parts)).digest()


EK_T, EK_PQ = b"\x01" * 32, b"\x02" * 32
SS_T, CT_T  = b"\x03" * 32, b"\x04" * 32
SS_PQ, CT_PQ = b"\x05" * 32, b"\x06" * 32

# (ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq)
BLOCKS = (SS_T, CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)

INPUT_SETS = [
    BLOCKS,
    # X25519 + ML-KEM-768 shaped
    (os.urandom(32), os.urandom(32), os.urandom(32),
     os.urandom(32), os.urandom(1088), os.urandom(1184)),
    # uneven, including empty fields
    (b"", os.urandom(7), os.urandom(200), os.urandom(1), b"", os.urandom(65)),
    # longer than one SHA3-256 block (136 bytes) everywhere
    tuple(os.urandom(300 + i) for i in range(6)),
]

ALL_STATELESS = [KitchenSink(), Chempat(), Dhkem(), DhkemHalf(), XWing()]


# ── Concatenation order ───────────────────────────────────────────────────────
def test_kitchen_sink_literal():
    out = KitchenSink().combine(*BLOCKS)
    assert out == H(EK_T, EK_PQ, SS_T, CT_T, SS_PQ, CT_PQ)

def test_chempat_literal():
    out = Chempat().combine(*BLOCKS)
    assert out == H(SS_T, SS_PQ, H(EK_T, EK_PQ), H(CT_T, CT_PQ))

def test_dhkem_literal():
    out = Dhkem().combine(*BLOCKS)
    assert out == H(H(EK_T, SS_T, CT_T), H(EK_PQ, SS_PQ, CT_PQ))

def test_dhkem_half_literal():
    out = DhkemHalf().combine(*BLOCKS)
    assert out == H(H(SS_T, CT_T, EK_T), SS_PQ)

def test_xwing_literal():
    out = XWing().combine(*BLOCKS)
    assert out == H(SS_PQ, SS_T, CT_T, EK_T)

def test_kitchen_sink_order_matters():
    swapped = KitchenSink().combine(SS_PQ, CT_PQ, EK_PQ, SS_T, CT_T, EK_T)
    assert swapped != KitchenSink().combine(*BLOCKS)


# ── Unbound inputs ────────────────────────────────────────────────────────────
def test_dhkem_half_ignores_pq_ciphertext_and_key():
    c = DhkemHalf()
    a = c.combine(SS_T, CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)
    b = c.combine(SS_T, CT_T, EK_T, SS_PQ, b"other-ct", b"other-ek")
    assert a == b

def test_xwing_ignores_pq_ciphertext_and_key():
    c = XWing()
    a = c.combine(SS_T, CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)
    b = c.combine(SS_T, CT_T, EK_T, SS_PQ, b"", b"")
    assert a == b

@pytest.mark.parametrize("combiner", [KitchenSink(), Chempat(), Dhkem()],
                         ids=lambda c: c.name)
def test_full_binding_combiners_depend_on_pq_ciphertext(combiner):
    a = combiner.combine(SS_T, CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)
    b = combiner.combine(SS_T, CT_T, EK_T, SS_PQ, CT_PQ[:-1] + b"\x07", EK_PQ)
    assert a != b


# ── Precomputed == stateless ──────────────────────────────────────────────────
@pytest.mark.parametrize("stateless_cls, pre_cls", list(PRECOMPUTED.items()),
                         ids=lambda c: c.name)
@pytest.mark.parametrize("inputs", INPUT_SETS)
def test_precomputed_matches_stateless(stateless_cls, pre_cls, inputs):
    ss_t, ct_t, ek_t, ss_pq, ct_pq, ek_pq = inputs
    pre = pre_cls.from_keys(ek_t, ek_pq)
    assert pre.combine(*inputs) == stateless_cls().combine(*inputs)

@pytest.mark.parametrize("pre_cls", [KitchenSinkPre, ChempatPre, DhkemPre],
                         ids=lambda c: c.name)
def test_precomputed_uses_seeded_keys(pre_cls):
    pre = pre_cls.from_keys(EK_T, EK_PQ)
    a = pre.combine(SS_T, CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)
    b = pre.combine(SS_T, CT_T, b"ignored", SS_PQ, CT_PQ, b"ignored")
    assert a == b

@pytest.mark.parametrize("pre_cls", [KitchenSinkPre, ChempatPre, DhkemPre],
                         ids=lambda c: c.name)
def test_precomputed_repeat_calls_do_not_drift(pre_cls):
    pre   = pre_cls.from_keys(EK_T, EK_PQ)
    first = pre.combine(*BLOCKS)
    pre.combine(os.urandom(32), os.urandom(32), EK_T, os.urandom(32), os.urandom(32), EK_PQ)
    assert pre.combine(*BLOCKS) == first

@pytest.mark.parametrize("pre_cls", [KitchenSinkPre, ChempatPre, DhkemPre],
                         ids=lambda c: c.name)
def test_precomputed_shared_across_threads(pre_cls):
    ek_t, ek_pq = os.urandom(32), os.urandom(1184)
    pre  = pre_cls.from_keys(ek_t, ek_pq)
    base = [c for c, p in PRECOMPUTED.items() if p is pre_cls][0]()
    jobs = [(os.urandom(32), os.urandom(32), ek_t, os.urandom(32), os.urandom(1088), ek_pq)
            for _ in range(64)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        got = list(pool.map(lambda args: pre.combine(*args), jobs))
    assert got == [base.combine(*args) for args in jobs]


# ── Purity / width / distinctness ─────────────────────────────────────────────
@pytest.mark.parametrize("combiner", ALL_STATELESS, ids=lambda c: c.name)
@pytest.mark.parametrize("inputs", INPUT_SETS)
def test_output_is_32_bytes(combiner, inputs):
    out = combiner.combine(*inputs)
    assert isinstance(out, bytes)
    assert len(out) == SHARED_SECRET_SIZE == 32

@pytest.mark.parametrize("combiner", ALL_STATELESS, ids=lambda c: c.name)
def test_deterministic_across_instances_and_calls(combiner):
    first = combiner.combine(*BLOCKS)
    for other in ALL_STATELESS:
        other.combine(*INPUT_SETS[1])
    assert type(combiner)().combine(*BLOCKS) == first

def test_combiners_are_distinct():
    outputs = {c.name: c.combine(*BLOCKS) for c in ALL_STATELESS}
    assert len(set(outputs.values())) == len(outputs)

def test_text_input_rejected():
    with pytest.raises(TypeError):
        KitchenSink().combine("ss", CT_T, EK_T, SS_PQ, CT_PQ, EK_PQ)


# ── Registry ──────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("name", ["kitchen_sink", "chempat", "dhkem", "dhkem_half", "xwing"])
def test_get_combiner(name):
    c = get_combiner(name)
    assert c.name == name
    assert isinstance(c, COMBINERS[name])

def test_get_combiner_unknown():
    with pytest.raises(ValueError, match="Unknown combiner"):
        get_combiner("hkdf")

def test_get_combiner_precomputed_needs_key():
    with pytest.raises(ValueError, match="precompute"):
        get_combiner("chempat_pre")


# ── Stateful-combiner factory ─────────────────────────────────────────────────
EK = EncapsulationKey(t=EK_T, pq=EK_PQ)

@pytest.mark.parametrize("which", [
    "chempat", "chempat_pre", Chempat, Chempat(), ChempatPre,
])
def test_precompute_accepts_names_classes_instances(which):
    pre = precompute(which, EK)
    assert isinstance(pre, ChempatPre)
    assert pre.combine(*BLOCKS) == Chempat().combine(*BLOCKS)

@pytest.mark.parametrize("which", ["xwing", "dhkem_half", XWing(), DhkemHalf])
def test_precompute_rejects_combiners_without_variant(which):
    with pytest.raises(ValueError, match="no precomputing variant"):
        precompute(which, EK)

def test_precompute_unknown_name():
    with pytest.raises(ValueError, match="Unknown combiner"):
        precompute("nope", EK)
