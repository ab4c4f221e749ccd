"""
BayesianINT — Ornstein-Uhlenbeck Simulator
==========================================
Trial-wise synthetic data for ABC inference of intrinsic timescales.

Discretisation:
    The OU process dx = -x/tau dt + sqrt(2D/tau) dW is sampled exactly on
    the grid t_k = k*dt:

        x[k+1] = a * x[k] + sqrt(D * (1 - a^2)) * e[k],   a = exp(-dt/tau)

    with x[0] drawn from the stationary law N(0, D). Unlike an Euler step
    this has no bias when dt is coarse relative to tau.

Oscillatory variant:
    theta = [tau, freq, coeff]. A unit-variance OU path and a unit-variance
    sinusoid (random phase per trial) are superimposed as
        sqrt(1 - coeff) * ou + sqrt(coeff) * osc
    and then scaled to the requested mean / variance.

All randomness flows through a numpy Generator passed by the caller, so one
model can be shared by concurrent workers.

License: MIT
"""

import numpy as np
from typing import Optional, Sequence
from scipy.signal import lfilter


def n_timepoints(dt: float, T: float) -> int:
    """Number of samples on the (dt, T) grid, round(T/dt)."""
    if not dt > 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if not T > 0:
        raise ValueError(f"T must be positive, got {T}")
    ntime = int(round(T / dt))
    if ntime < 1:
        raise ValueError(f"T={T} is shorter than one sample at dt={dt}")
    return ntime


def _check_finite(x: np.ndarray, what: str) -> np.ndarray:
    if not np.all(np.isfinite(x)):
        n_bad = int(np.size(x) - np.count_nonzero(np.isfinite(x)))
        raise FloatingPointError(f"{what} produced {n_bad} non-finite values")
    return x


def generate_ou_process(tau: float,
                        true_D: float,
                        dt: float,
                        T: float,
                        num_trials: int,
                        rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Simulate zero-mean OU trials.

    Args:
        tau: Timescale (s), 1/tau is the mean-reversion rate
        true_D: Stationary variance
        dt: Sampling interval (s)
        T: Trial duration (s)
        num_trials: Number of independent trials
        rng: numpy Generator (a fresh one is created if None)

    Returns:
        [num_trials, round(T/dt)] array
    """
    ntime = n_timepoints(dt, T)
    if not tau > 0:
        raise ValueError(f"tau must be positive, got {tau}")
    if not true_D > 0:
        raise ValueError(f"variance must be positive, got {true_D}")
    if int(num_trials) < 1:
        raise ValueError(f"num_trials must be >= 1, got {num_trials}")

    rng = rng if rng is not None else np.random.default_rng()
    a = np.exp(-dt / tau)
    # a == 1.0 only when dt/tau underflows; the path is then constant
    step_sd = np.sqrt(true_D * -np.expm1(-2.0 * dt / tau))

    innovations = rng.standard_normal((int(num_trials), ntime))
    innovations[:, 1:] *= step_sd
    innovations[:, 0] *= np.sqrt(true_D)

    # y[k] = a*y[k-1] + innovations[k], y[0] = innovations[0]
    ou = lfilter([1.0], [1.0, -a], innovations, axis=1)
    return _check_finite(ou, "OU simulation")


def generate_ou_with_oscillation(theta: Sequence[float],
                                 dt: float,
                                 T: float,
                                 num_trials: int,
                                 data_mean: float,
                                 data_var: float,
                                 rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Simulate OU trials with an additive sinusoidal component.

    Args:
        theta: [tau, freq (Hz), coeff in [0, 1]]
        data_mean, data_var: Target mean and variance of the output

    Returns:
        [num_trials, round(T/dt)] array
    """
    if len(theta) != 3:
        raise ValueError(f"theta must be [tau, freq, coeff], got {len(theta)} values")
    tau, freq, coeff = (float(v) for v in theta)
    if not freq > 0:
        raise ValueError(f"frequency must be positive, got {freq}")
    if not 0.0 <= coeff <= 1.0:
        raise ValueError(f"coefficient must lie in [0, 1], got {coeff}")
    if not data_var > 0:
        raise ValueError(f"variance must be positive, got {data_var}")

    rng = rng if rng is not None else np.random.default_rng()
    ou = generate_ou_process(tau, 1.0, dt, T, num_trials, rng=rng)

    time = np.arange(1, ou.shape[1] + 1) * dt
    phases = rng.uniform(0.0, 2 * np.pi, size=(ou.shape[0], 1))
    osc = np.sqrt(2.0) * np.sin(2 * np.pi * freq * time[np.newaxis, :] + phases)

    data = np.sqrt(1.0 - coeff) * ou + np.sqrt(coeff) * osc
    data = data * np.sqrt(data_var) + data_mean
    return _check_finite(data, "Oscillatory OU simulation")


def generate(theta: Sequence[float],
             dt: float,
             T: float,
             num_trials: int,
             mean: float = 0.0,
             variance: float = 1.0,
             rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Simulate trials for either parameter layout.

    ``[tau]`` gives a plain OU process with the requested mean/variance,
    ``[tau, freq, coeff]`` adds the oscillation.
    """
    theta = np.atleast_1d(np.asarray(theta, dtype=float))
    if theta.size == 1:
        ou = generate_ou_process(theta[0], variance, dt, T, num_trials, rng=rng)
        return ou + mean
    if theta.size == 3:
        return generate_ou_with_oscillation(theta, dt, T, num_trials,
                                            mean, variance, rng=rng)
    raise ValueError(f"theta must have 1 or 3 entries, got {theta.size}")
