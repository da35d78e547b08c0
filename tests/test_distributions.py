"""Tests for the Marsaglia-Tsang Gamma sampler and the Gamma-ratio Beta sampler."""

import math

import numpy as np
import pytest
from scipy import stats as sp_stats

from rlbandit.stats.distributions import BetaSampler, GammaSampler
from rlbandit.stats.random import RandomSource


class StubSource:
    """Feeds scripted uniforms and normals to a sampler."""

    def __init__(self, normals=(), uniforms=()):
        self.normals = list(normals)
        self.uniforms = list(uniforms)

    def standard_normal(self):
        return self.normals.pop(0)

    def uniform(self):
        return self.uniforms.pop(0)


def mt_candidate(shape, z):
    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)
    return d, (1.0 + c * z) ** 3


# ======================================================================
# GammaSampler
# ======================================================================


class TestGammaSamplerAlgorithm:
    """Walk the rejection loop with scripted draws."""

    def test_squeeze_accepts(self):
        source = StubSource(normals=[0.0], uniforms=[0.5])
        assert GammaSampler(source).sample(1.0) == pytest.approx(2.0 / 3.0)

    def test_negative_v_is_retried(self):
        # 1 + c*z < 0 for z = -10, so the first candidate is discarded
        # without consuming a uniform
        source = StubSource(normals=[-10.0, 0.0], uniforms=[0.5])
        assert GammaSampler(source).sample(1.0) == pytest.approx(2.0 / 3.0)
        assert source.normals == []
        assert source.uniforms == []

    def test_log_test_accepts_when_squeeze_fails(self):
        d, v = mt_candidate(1.0, 1.5)
        source = StubSource(normals=[1.5], uniforms=[0.9])
        assert GammaSampler(source).sample(1.0) == pytest.approx(d * v)

    def test_rejected_candidate_draws_fresh_normal(self):
        source = StubSource(normals=[1.5, 0.0], uniforms=[0.99, 0.5])
        assert GammaSampler(source).sample(1.0) == pytest.approx(2.0 / 3.0)
        assert source.normals == []

    def test_shape_below_one_is_boosted_and_scaled(self):
        # Gamma(1.5) candidate with z = 0 is d = 7/6, then scaled by 0.25 ** 2
        source = StubSource(normals=[0.0], uniforms=[0.5, 0.25])
        assert GammaSampler(source).sample(0.5) == pytest.approx(7.0 / 6.0 * 0.0625)

    def test_log_sample_stays_finite_for_tiny_shapes(self):
        sampler = GammaSampler(RandomSource(seed=6))
        logs = [sampler.log_sample(0.001) for _ in range(2_000)]
        assert all(math.isfinite(value) for value in logs)
        # Most Gamma(0.001) draws are far below the smallest double
        assert min(logs) < -800

    @pytest.mark.parametrize("shape", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_shape_raises(self, shape):
        with pytest.raises(ValueError, match="shape"):
            GammaSampler(RandomSource(seed=1)).sample(shape)


class TestGammaSamplerDistribution:
    @pytest.mark.parametrize("shape", [0.3, 1.0, 2.5, 10.0])
    def test_mean_and_variance_match_shape(self, shape):
        sampler = GammaSampler(RandomSource(seed=2024))
        draws = np.array([sampler.sample(shape) for _ in range(20_000)])
        assert np.all(draws > 0)
        # Gamma(k, 1) has mean k and variance k
        assert np.mean(draws) == pytest.approx(shape, rel=0.05)
        assert np.var(draws) == pytest.approx(shape, rel=0.15)


# ======================================================================
# BetaSampler
# ======================================================================


class TestBetaSampler:
    def test_ratio_of_gamma_draws(self):
        # Gamma(1) -> 2/3 and Gamma(2) -> 5/3 with z = 0 and squeeze acceptance
        source = StubSource(normals=[0.0, 0.0], uniforms=[0.5, 0.5])
        expected = (2.0 / 3.0) / (2.0 / 3.0 + 5.0 / 3.0)
        assert BetaSampler(source).sample(1.0, 2.0) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "alpha,beta",
        [(1.0, 1.0), (2.0, 5.0), (0.5, 0.5), (10.0, 3.0), (101.0, 1.0), (0.001, 1.0), (1.0, 0.001)],
    )
    def test_draws_in_unit_interval_with_correct_mean(self, alpha, beta):
        sampler = BetaSampler(RandomSource(seed=99))
        draws = np.array([sampler.sample(alpha, beta) for _ in range(10_000)])
        assert np.all((draws > 0) & (draws < 1))
        assert np.mean(draws) == pytest.approx(alpha / (alpha + beta), abs=0.015)

    @pytest.mark.parametrize("alpha,beta", [(0.001, 1.0), (1.0, 0.001), (0.01, 0.01), (1e-4, 5.0)])
    def test_tiny_shapes_never_hit_the_endpoints(self, alpha, beta):
        sampler = BetaSampler(RandomSource(seed=1))
        draws = [sampler.sample(alpha, beta) for _ in range(2_000)]
        assert all(0.0 < d < 1.0 for d in draws)

    def test_beta_one_one_is_uniform(self):
        sampler = BetaSampler(RandomSource(seed=31337))
        draws = [sampler.sample(1, 1) for _ in range(5_000)]
        result = sp_stats.kstest(draws, "uniform")
        assert result.pvalue > 0.001

    def test_matches_scipy_beta(self):
        sampler = BetaSampler(RandomSource(seed=8))
        draws = [sampler.sample(3, 7) for _ in range(5_000)]
        result = sp_stats.kstest(draws, sp_stats.beta(3, 7).cdf)
        assert result.pvalue > 0.001

    @pytest.mark.parametrize("alpha,beta", [(0, 1), (1, 0), (-2, 3), (1, float("nan"))])
    def test_invalid_parameters_raise(self, alpha, beta):
        with pytest.raises(ValueError):
            BetaSampler(RandomSource(seed=1)).sample(alpha, beta)

    def test_exposes_underlying_source(self):
        source = RandomSource(seed=4)
        assert BetaSampler(source).source is source
