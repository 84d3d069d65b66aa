"""
kem_combiners — Benchmark: every combiner, raw and inside a hybrid KEM
=======================================================================
Run:  python examples/bench_combiners.py [--iterations N] [--mceliece]

For each combiner, times:
    raw    combine() on fixed inputs
    encap  full hybrid encapsulation
    decap  full hybrid decapsulation

Stateless combiners first, then the precomputing variants built from the
same key pair, so the cost of rehashing the encapsulation key shows up
as the difference between e.g. kitchen_sink and kitchen_sink_pre.
"""

import sys, os, time
import argparse
import logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kem_combiners import (
    COMBINERS,
    PRECOMPUTED,
    HybridKem,
    X25519Kem,
    precompute,
    x25519_mlkem768,
)

LINE = "═" * 70


def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)


def per_call(fn, iterations):
    t0 = time.perf_counter()
    for _ in range(iterations):
        fn()
    return (time.perf_counter() - t0) / iterations


def fmt(seconds):
    if seconds < 1e-3:
        return f"{seconds * 1e6:9.2f} µs"
    return f"{seconds * 1e3:9.2f} ms"


def bench_combiner(kem, combiner, dk, ek, iterations):
    ct, ss = kem.encap(combiner, ek)
    # same shape as a real call: 32-byte secrets, real ciphertexts and keys
    args = (ss, ct.t, ek.t, ss, ct.pq, ek.pq)

    raw   = per_call(lambda: combiner.combine(*args), iterations * 100)
    encap = per_call(lambda: kem.encap(combiner, ek), iterations)
    decap = per_call(lambda: kem.decap(combiner, dk, ct), iterations)
    print(f"  {combiner.name:<18} raw {fmt(raw)}   encap {fmt(encap)}   decap {fmt(decap)}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark hybrid KEM combiners")
    parser.add_argument("--iterations", type=int, default=20,
                        help="encap/decap calls per measurement (raw combine runs 100x this)")
    parser.add_argument("--mceliece", action="store_true",
                        help="pair X25519 with Classic McEliece instead of ML-KEM-768")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format=' %(message)s')

    if args.mceliece:
        from kem_combiners.base.mceliece import ClassicMcEliece
        kem = HybridKem(X25519Kem(), ClassicMcEliece())
    else:
        kem = x25519_mlkem768()

    header(f"{kem}  |  {args.iterations} iterations")
    t0     = time.perf_counter()
    dk, ek = kem.generate()
    print(f"  keygen {fmt(time.perf_counter() - t0)}   "
          f"ek_t={len(ek.t)}B  ek_pq={len(ek.pq)}B")

    header("Stateless")
    for cls in COMBINERS.values():
        bench_combiner(kem, cls(), dk, ek, args.iterations)

    header("Stateful (precomputed over this key pair)")
    for cls in PRECOMPUTED:
        bench_combiner(kem, precompute(cls, ek), dk, ek, args.iterations)

    print(LINE + "\n")


if __name__ == "__main__":
    main()
