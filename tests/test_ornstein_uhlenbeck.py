"""
Unit tests for the Ornstein-Uhlenbeck simulator
"""

import pytest
import numpy as np

import bayesian_int.ornstein_uhlenbeck as ou_module
from bayesian_int.ornstein_uhlenbeck import (
    generate, generate_ou_process, generate_ou_with_oscillation, n_timepoints
)


class TestTimeGrid:
    """Test the (dt, T) sample count."""

    def test_rounds_to_nearest(self):
        assert n_timepoints(0.01, 100.0) == 10000
        assert n_timepoints(0.1, 0.3) == 3  # 0.3 / 0.1 = 2.9999999999999996

    @pytest.mark.parametrize("dt,T", [(0.0, 1.0), (-0.1, 1.0), (0.1, 0.0), (0.1, -5.0)])
    def test_non_positive_rejected(self, dt, T):
        with pytest.raises(ValueError):
            n_timepoints(dt, T)

    def test_shorter_than_one_sample(self):
        with pytest.raises(ValueError):
            n_timepoints(1.0, 0.2)


class TestOUProcess:
    """Test plain OU trials."""

    def test_shape_and_finite(self, rng):
        data = generate_ou_process(1.0, 1.0, 0.01, 100.0, 10, rng=rng)
        assert data.shape == (10, 10000)
        assert np.all(np.isfinite(data))

    def test_stationary_moments(self, rng):
        """Mean and std converge to the stationary law."""
        data = generate_ou_process(1.0, 2.0, 0.01, 100.0, 30, rng=rng)
        assert abs(np.mean(data)) < 0.1
        assert abs(np.std(data) - np.sqrt(2.0)) < 0.1

    def test_exact_lag_one_correlation_at_coarse_dt(self, rng):
        """With dt == tau the lag-1 correlation is exp(-1), not Euler's 0."""
        tau, dt = 0.5, 0.5
        data = generate_ou_process(tau, 1.0, dt, 500.0, 20, rng=rng)
        x = data - data.mean(axis=1, keepdims=True)
        r1 = np.sum(x[:, :-1] * x[:, 1:]) / np.sum(x * x)

        assert abs(r1 - np.exp(-dt / tau)) < 0.03
        # Variance is preserved even though dt is coarse
        assert abs(np.std(data) - 1.0) < 0.05

    def test_seeded_reproducible(self):
        a = generate_ou_process(1.0, 1.0, 0.01, 1.0, 3, rng=np.random.default_rng(7))
        b = generate_ou_process(1.0, 1.0, 0.01, 1.0, 3, rng=np.random.default_rng(7))
        np.testing.assert_array_equal(a, b)

    def test_default_rng(self):
        data = generate_ou_process(1.0, 1.0, 0.01, 1.0, 2)
        assert data.shape == (2, 100)

    @pytest.mark.parametrize("kwargs", [
        dict(tau=0.0), dict(tau=-1.0), dict(tau=np.nan),
        dict(true_D=0.0), dict(num_trials=0),
        dict(dt=0.0), dict(T=-1.0),
    ])
    def test_invalid_arguments(self, kwargs):
        args = dict(tau=1.0, true_D=1.0, dt=0.01, T=1.0, num_trials=2)
        args.update(kwargs)
        with pytest.raises(ValueError):
            generate_ou_process(**args)

    def test_non_finite_output_fails_loudly(self, rng, monkeypatch):
        """A non-finite simulation result is never returned."""
        monkeypatch.setattr(ou_module, "lfilter",
                            lambda b, a, x, axis: np.full_like(x, np.nan))
        with pytest.raises(FloatingPointError):
            generate_ou_process(1.0, 1.0, 0.01, 1.0, 2, rng=rng)


class TestOUWithOscillation:
    """Test OU trials with an additive oscillation."""

    def test_shape_and_moments(self, rng):
        data = generate_ou_with_oscillation([1.0, 0.1, 0.5], 0.01, 100.0, 30,
                                            2.0, 4.0, rng=rng)
        assert data.shape == (30, 10000)
        assert np.all(np.isfinite(data))
        assert abs(np.mean(data) - 2.0) < 0.1
        assert abs(np.std(data) - 2.0) < 0.1

    def test_pure_oscillation(self, rng):
        """coeff = 1 leaves only the sinusoid."""
        data = generate_ou_with_oscillation([1.0, 1.0, 1.0], 0.01, 10.0, 4,
                                            0.0, 1.0, rng=rng)
        # Period of 100 samples
        np.testing.assert_allclose(data[:, 100:], data[:, :-100], atol=1e-9)

    @pytest.mark.parametrize("theta", [
        [1.0, 0.1, 1.5], [1.0, 0.1, -0.1], [1.0, -0.1, 0.5], [1.0, 0.1],
    ])
    def test_invalid_theta(self, theta, rng):
        with pytest.raises(ValueError):
            generate_ou_with_oscillation(theta, 0.01, 1.0, 2, 0.0, 1.0, rng=rng)

    def test_zero_frequency_rejected(self, rng):
        """A 0 Hz sinusoid is a constant; with coeff = 1 the trials would be flat."""
        with pytest.raises(ValueError, match="frequency"):
            generate_ou_with_oscillation([1.0, 0.0, 1.0], 0.01, 1.0, 2, 0.0, 1.0, rng=rng)


class TestGenerate:
    """Test the layout dispatching entry point."""

    def test_single_timescale_layout(self):
        a = generate([1.0], 0.01, 1.0, 3, mean=5.0, variance=2.0,
                     rng=np.random.default_rng(3))
        b = generate_ou_process(1.0, 2.0, 0.01, 1.0, 3, rng=np.random.default_rng(3))
        np.testing.assert_allclose(a, b + 5.0)

    def test_oscillation_layout(self, rng):
        data = generate([1.0, 0.5, 0.3], 0.01, 2.0, 3, rng=rng)
        assert data.shape == (3, 200)

    def test_wrong_layout(self, rng):
        with pytest.raises(ValueError):
            generate([1.0, 0.5], 0.01, 1.0, 3, rng=rng)
