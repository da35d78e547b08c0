"""Uniform and standard-normal draws for the samplers.

``RandomSource`` wraps an integer generator and maps it onto the open
interval (0, 1): draws are taken from ``[1, 2**53 - 1]`` and divided by
``2**53``, which is exact in double precision, so neither 0.0 nor 1.0 can
come out.  Downstream samplers take ``log(u)`` and ``u ** (1/k)`` and rely
on that.

Normals come from the polar Box-Muller method.  Each accepted pair yields
two independent normals; the spare one is cached per thread and handed out
on the next call, so concurrent callers never share or tear the cache.
"""

from __future__ import annotations

import math
import random
import secrets
import threading

from rlbandit.core.exceptions import RandomSourceError

# 2**53 keeps ``draw / _RESOLUTION`` exact as a float
_RESOLUTION = 2**53


class RandomSource:
    """Uniform(0, 1) and Normal(0, 1) generator.

    Parameters
    ----------
    seed : int | None
        ``None`` (default) draws from the operating system's CSPRNG.  An
        integer seed switches to a reproducible Mersenne Twister, which is
        what tests and simulations want.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng: random.Random = secrets.SystemRandom() if seed is None else random.Random(seed)
        self._local = threading.local()

    def uniform(self) -> float:
        """Return a draw from the open interval (0, 1)."""
        try:
            draw = self._rng.randrange(1, _RESOLUTION)
        except OSError as exc:
            raise RandomSourceError("entropy source unavailable") from exc
        return draw / _RESOLUTION

    def standard_normal(self) -> float:
        """Return a draw from N(0, 1) via polar Box-Muller."""
        spare = getattr(self._local, "spare", None)
        if spare is not None:
            self._local.spare = None
            return spare

        while True:
            u1 = 2.0 * self.uniform() - 1.0
            u2 = 2.0 * self.uniform() - 1.0
            s = u1 * u1 + u2 * u2
            if 0.0 < s < 1.0:
                break

        factor = math.sqrt(-2.0 * math.log(s) / s)
        self._local.spare = u1 * factor
        return u2 * factor


_default_source: RandomSource | None = None
_default_lock = threading.Lock()


def default_source() -> RandomSource:
    """Process-wide CSPRNG-backed source, created on first use."""
    global _default_source
    if _default_source is None:
        with _default_lock:
            if _default_source is None:
                _default_source = RandomSource()
    return _default_source
