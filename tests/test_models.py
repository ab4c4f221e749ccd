"""
Unit tests for the shared model contract
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest
import numpy as np
from scipy import stats

from bayesian_int import (
    ParamBound, TimescaleModel, OneTimescaleModel, OneTimescaleAndOscModel,
    generate_data, summary_stats, distance_function,
)
from bayesian_int.ornstein_uhlenbeck import generate_ou_process, generate_ou_with_oscillation

DT = 0.01
T = 10.0


@pytest.fixture(scope="module")
def observed():
    return np.random.default_rng(5).standard_normal((4, int(round(T / DT))))


@pytest.fixture(scope="module", params=['one_timescale', 'oscillation'])
def model(request, observed):
    if request.param == 'one_timescale':
        return OneTimescaleModel.from_prior(observed, [stats.uniform(0.1, 9.9)],
                                            dt=DT, T=T, n_lags=200)
    return OneTimescaleAndOscModel.from_prior(
        observed, [stats.uniform(0.1, 9.9), stats.uniform(0.5, 2.0), stats.uniform()],
        dt=DT, T=T)


class TestContract:
    """Every model honours the same interface."""

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            TimescaleModel(data=np.zeros((1, 10)), prior=(), data_sum_stats=None,
                           epsilon=0.1, dt=0.1, T=1.0, num_trials=1,
                           data_mean=0.0, data_var=1.0)

    def test_functional_dispatch(self, model):
        theta = model.draw_theta(rng=np.random.default_rng(2))
        a = generate_data(model, theta, rng=np.random.default_rng(3))
        b = model.generate_data(theta, rng=np.random.default_rng(3))
        np.testing.assert_array_equal(a, b)

        s = summary_stats(model, a)
        assert distance_function(model, s, s) == pytest.approx(0.0, abs=1e-10)
        assert distance_function(model, model.data_sum_stats, s) >= 0.0

    def test_draw_theta_within_prior(self, model, rng):
        for _ in range(20):
            theta = model.draw_theta(rng=rng)
            assert theta.shape == (model.n_params,)
            assert np.isfinite(model.prior_logpdf(theta))

    def test_prior_logpdf_outside_support(self, model):
        theta = np.zeros(model.n_params)
        theta[0] = 100.0
        assert model.prior_logpdf(theta) == -np.inf

    def test_prior_logpdf_shape_checked(self, model):
        with pytest.raises(ValueError):
            model.prior_logpdf(np.ones(model.n_params + 1))

    def test_sampling_rate(self, model):
        assert model.sampling_rate == pytest.approx(100.0)
        assert model.ntime == 1000


class TestParameterDomain:
    """Prior draws always land where the simulator accepts them."""

    def test_param_bound_closed_and_open(self):
        assert ParamBound(0.0, 1.0).contains(0.0)
        assert ParamBound(0.0, 1.0).contains(1.0)
        assert not ParamBound(0.0, 1.0).contains(1.5)
        assert not ParamBound(0.0, include_low=False).contains(0.0)
        assert ParamBound(0.0, include_low=False).contains(1e-12)
        assert not ParamBound().contains(np.nan)

    def test_bounds_cover_every_parameter(self, model):
        assert len(model.param_bounds) == model.n_params

    @pytest.mark.parametrize("kind", ["one_timescale", "oscillation"])
    def test_informed_draws_always_simulate(self, kind):
        """Normal priors put mass below zero; every draw must still simulate."""
        rng = np.random.default_rng(11)
        if kind == "one_timescale":
            # Fast timescale: Normal(tau_hat, tau_hat) is negative ~16% of the time
            data = generate_ou_process(0.02, 1.0, DT, T, 4, rng=rng)
            informed = OneTimescaleModel.informed(data, dt=DT, T=T)
        else:
            # Peak near the lowest bins: the frequency Normal reaches below zero
            data = generate_ou_with_oscillation([0.5, 0.1, 0.8], DT, T, 4, 0.0, 1.0,
                                                rng=rng)
            informed = OneTimescaleAndOscModel.informed(data, dt=DT, T=T)

        for _ in range(200):
            theta = informed.draw_theta(rng=rng)
            assert informed.in_domain(theta)
            assert np.isfinite(informed.prior_logpdf(theta))
            sim = informed.generate_data(theta, rng=rng)
            assert np.all(np.isfinite(sim))

    def test_logpdf_off_domain(self, model):
        theta = model.draw_theta(rng=np.random.default_rng(1))
        theta[0] = -1.0
        assert not model.in_domain(theta)
        assert model.prior_logpdf(theta) == -np.inf

    def test_draws_exhausted(self, observed):
        far = OneTimescaleModel.from_prior(observed, [stats.norm(-100.0, 1.0)],
                                           dt=DT, T=T, n_lags=200)
        with pytest.raises(ValueError, match="No admissible theta"):
            far.draw_theta(rng=np.random.default_rng(0), max_draws=50)


class TestImmutability:
    """Models are never mutated after construction."""

    def test_frozen_attributes(self, model):
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.epsilon = 1.0

    def test_read_only_arrays(self, model):
        with pytest.raises(ValueError):
            model.data[0, 0] = 1.0

    def test_caller_array_not_aliased(self):
        data = np.random.default_rng(0).standard_normal((2, 100))
        model = OneTimescaleModel.from_prior(data, [stats.uniform(0.1, 9.9)],
                                             dt=0.01, T=1.0, n_lags=10)
        data[0, 0] = 1e6
        assert model.data[0, 0] != 1e6

    def test_operations_leave_model_unchanged(self, model, rng):
        before = model.data.copy()
        sim = model.generate_data(model.draw_theta(rng=rng), rng=rng)
        model.distance_function(model.data_sum_stats, model.summary_stats(sim))
        np.testing.assert_array_equal(model.data, before)


class TestConcurrentUse:
    """One model shared by several workers."""

    def test_threads_share_model(self, model):
        thetas = [model.draw_theta(rng=np.random.default_rng(i)) for i in range(8)]

        def evaluate(i):
            sim = model.generate_data(thetas[i], rng=np.random.default_rng(100 + i))
            return model.distance_function(model.data_sum_stats, model.summary_stats(sim))

        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = list(pool.map(evaluate, range(8)))
        serial = [evaluate(i) for i in range(8)]

        assert parallel == serial
        assert all(d >= 0.0 for d in parallel)
