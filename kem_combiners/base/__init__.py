"""
Base KEMs — the two halves of a hybrid
=======================================
A hybrid KEM never looks inside its components. All it needs from each one
is the classic KEM triple:

    generate(rng)          -> (dk, ek)
    encapsulate(rng, ek)   -> (ct, ss)
    decapsulate(dk, ct)    -> ss

Encapsulation keys, ciphertexts and shared secrets cross this boundary as
their canonical byte encodings. Decapsulation keys stay opaque: whatever
object the backing library hands out.

Randomness is passed in by the caller as a callable ``rng(n) -> bytes``
(``os.urandom`` by default). A source that raises is never replaced; a
source that returns the wrong number of bytes raises RandomnessError.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple

Rng = Callable[[int], bytes]


class RandomnessError(RuntimeError):
    """The randomness source returned fewer (or more) bytes than requested."""


def draw(rng: Optional[Rng], n: int) -> bytes:
    """Read exactly n bytes from rng (os.urandom when rng is None)."""
    if rng is None:
        rng = os.urandom
    out = rng(n)
    if not isinstance(out, (bytes, bytearray)) or len(out) != n:
        got = len(out) if isinstance(out, (bytes, bytearray)) else type(out).__name__
        raise RandomnessError(f"Randomness source returned {got}, expected {n} bytes.")
    return bytes(out)


class BaseKem(ABC):
    """A key-encapsulation mechanism usable as one half of a HybridKem."""

    name = "base"

    @abstractmethod
    def generate(self, rng: Optional[Rng] = None) -> Tuple[Any, bytes]:
        """Return (decapsulation_key, encapsulation_key_bytes)."""

    @abstractmethod
    def encapsulate(self, rng: Optional[Rng], ek: bytes) -> Tuple[bytes, bytes]:
        """Return (ciphertext, shared_secret) for the holder of ek."""

    @abstractmethod
    def decapsulate(self, dk: Any, ct: bytes) -> bytes:
        """Recover the shared secret from ct.

        Behaviour on a forged ciphertext is up to the KEM: implicit
        rejection returns a pseudorandom secret, otherwise an error is raised.
        """

    def __repr__(self):
        return f"{type(self).__name__}({self.name})"


from .x25519 import X25519Kem   # noqa: E402
from .ml_kem import MlKem       # noqa: E402

__all__ = [
    "BaseKem",
    "Rng",
    "RandomnessError",
    "draw",
    "X25519Kem",
    "MlKem",
]
