"""Gamma and Beta samplers built on ``RandomSource``.

Gamma(k, 1) uses Marsaglia & Tsang (2000), "A Simple Method for Generating
Gamma Variables".  Beta(a, b) is the ratio X / (X + Y) of two independent
Gamma draws X ~ Gamma(a), Y ~ Gamma(b).
"""

from __future__ import annotations

import math

from rlbandit.stats.random import RandomSource, default_source


def _check_shape(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")


class GammaSampler:
    """Draw from Gamma(shape=k, scale=1) for any k > 0.

    Parameters
    ----------
    source : RandomSource | None
        Uniform/normal generator.  Defaults to the shared CSPRNG source.
    """

    def __init__(self, source: RandomSource | None = None) -> None:
        self.source = source or default_source()

    def sample(self, shape: float) -> float:
        """Return one Gamma(shape, 1) draw.

        For very small shapes the draw can fall below the smallest double
        and come back as 0.0; use ``log_sample`` when that matters.

        Raises
        ------
        ValueError
            If ``shape`` is not a positive finite number.
        """
        return math.exp(self.log_sample(shape))

    def log_sample(self, shape: float) -> float:
        """Return the natural log of one Gamma(shape, 1) draw.

        Shapes below 1 are boosted to ``shape + 1`` and scaled back by
        ``U ** (1 / shape)``, applied here as ``log(U) / shape`` so the
        result stays finite however small the draw is.  The rejection loop
        is unbounded; it accepts with probability above 0.95 for k >= 1, so
        it ends quickly in practice.

        Raises
        ------
        ValueError
            If ``shape`` is not a positive finite number.
        """
        _check_shape("shape", shape)

        if shape < 1.0:
            return self.log_sample(shape + 1.0) + math.log(self.source.uniform()) / shape

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)

        while True:
            z = self.source.standard_normal()
            v = (1.0 + c * z) ** 3
            if v <= 0.0:
                continue

            u = self.source.uniform()

            # Squeeze
            if u < 1.0 - 0.0331 * z**4:
                return math.log(d * v)

            if math.log(u) < 0.5 * z * z + d * (1.0 - v + math.log(v)):
                return math.log(d * v)


_SMALLEST = math.nextafter(0.0, 1.0)
_LARGEST = math.nextafter(1.0, 0.0)


class BetaSampler:
    """Draw from Beta(alpha, beta) for alpha, beta > 0."""

    def __init__(self, source: RandomSource | None = None) -> None:
        self.gamma = GammaSampler(source)

    @property
    def source(self) -> RandomSource:
        return self.gamma.source

    def sample(self, alpha: float, beta: float) -> float:
        """Return one Beta(alpha, beta) draw, strictly inside (0, 1).

        X / (X + Y) is formed from ``log X`` and ``log Y`` so neither Gamma
        draw can underflow.  Shapes well below 1 put most of the mass
        closer to 0 or 1 than a double can resolve; such draws come back as
        the nearest representable value inside the interval.

        Raises
        ------
        ValueError
            If either parameter is not a positive finite number.
        """
        _check_shape("alpha", alpha)
        _check_shape("beta", beta)

        log_x = self.gamma.log_sample(alpha)
        log_y = self.gamma.log_sample(beta)
        if log_x >= log_y:
            value = 1.0 / (1.0 + math.exp(log_y - log_x))
        else:
            ratio = math.exp(log_x - log_y)
            value = ratio / (1.0 + ratio)
        return min(max(value, _SMALLEST), _LARGEST)
