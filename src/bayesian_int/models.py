"""
BayesianINT — Model Contract
============================
A model binds observed trials, priors, the ABC tolerance and the time grid.
An ABC sampler only needs three operations from it:

    sim   = generate_data(model, theta)         # theta proposed from the prior
    stats = summary_stats(model, sim)
    d     = distance_function(model, model.data_sum_stats, stats)
    accept if d <= model.epsilon

Concrete models (OneTimescaleModel, OneTimescaleAndOscModel) implement the
three abstract methods. Models are frozen after construction and hold no RNG,
so a single instance can be shared by concurrent workers.

License: MIT
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

from .ornstein_uhlenbeck import n_timepoints
from .priors import distribution_name, validate_prior


MAX_PRIOR_DRAWS = 1000


@dataclass(frozen=True)
class ParamBound:
    """Admissible range of one parameter; the upper end is always included."""
    low: float = -np.inf
    high: float = np.inf
    include_low: bool = True

    def contains(self, value: float) -> bool:
        above = value >= self.low if self.include_low else value > self.low
        return bool(above and value <= self.high)


def _readonly(arr) -> np.ndarray:
    arr = np.array(arr, dtype=float)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class TimescaleModel(ABC):
    """Shared state and validation for all timescale models."""
    data: np.ndarray
    prior: tuple
    data_sum_stats: object
    epsilon: float
    dt: float
    T: float
    num_trials: int
    data_mean: float
    data_var: float

    param_names: ClassVar[Tuple[str, ...]] = ()
    param_bounds: ClassVar[Tuple[ParamBound, ...]] = ()
    tag: ClassVar[str] = 'Model'

    def __post_init__(self):
        ntime = n_timepoints(self.dt, self.T)

        data = np.asarray(self.data, dtype=float)
        if data.ndim != 2:
            raise ValueError(f"data must be 2D [trials, time], got shape {data.shape}")
        if data.shape != (self.num_trials, ntime):
            raise ValueError(f"data shape {data.shape} does not match "
                             f"(num_trials={self.num_trials}, round(T/dt)={ntime})")
        if not np.all(np.isfinite(data)):
            raise ValueError("data contains NaN or Inf")
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if not self.data_var > 0:
            raise ValueError(f"data_var must be positive, got {self.data_var}")
        if not np.isfinite(self.data_mean):
            raise ValueError(f"data_mean must be finite, got {self.data_mean}")

        object.__setattr__(self, 'data', _readonly(data))
        object.__setattr__(self, 'prior', validate_prior(self.prior, self.param_names))
        object.__setattr__(self, 'num_trials', int(self.num_trials))
        object.__setattr__(self, 'data_mean', float(self.data_mean))
        object.__setattr__(self, 'data_var', float(self.data_var))

    # ── Derived properties ──────────────────────────────────────

    @property
    def ntime(self) -> int:
        return self.data.shape[1]

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    @property
    def sampling_rate(self) -> float:
        return 1.0 / self.dt

    # ── Capability contract ─────────────────────────────────────

    @abstractmethod
    def generate_data(self, theta: Sequence[float],
                      rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Simulate [num_trials, ntime] trials at parameters theta."""

    @abstractmethod
    def summary_stats(self, data: np.ndarray):
        """Reduce trials to the model's summary statistics."""

    @abstractmethod
    def distance_function(self, sum_stats, other_sum_stats) -> float:
        """Non-negative distance between two summary statistics."""

    # ── Prior helpers ───────────────────────────────────────────

    def in_domain(self, theta: Sequence[float]) -> bool:
        """True when every entry of theta is accepted by the simulator."""
        theta = self._check_theta(np.atleast_1d(np.asarray(theta, dtype=float)))
        return all(b.contains(v) for b, v in zip(self.param_bounds, theta))

    def draw_theta(self, rng: Optional[np.random.Generator] = None,
                   max_draws: int = MAX_PRIOR_DRAWS) -> np.ndarray:
        """Sample one parameter vector from the prior, restricted to param_bounds.

        Priors with mass outside the domain (e.g. Normal on tau) are
        redrawn until the vector is admissible.
        """
        rng = rng if rng is not None else np.random.default_rng()
        for _ in range(max_draws):
            theta = np.array([float(d.rvs(random_state=rng)) for d in self.prior])
            if self.in_domain(theta):
                return theta
        raise ValueError(f"No admissible theta in {max_draws} prior draws; "
                         f"the prior barely overlaps {self.describe_bounds()}")

    def prior_logpdf(self, theta: Sequence[float]) -> float:
        """Joint log prior density (independent components), -inf off the domain."""
        theta = np.atleast_1d(np.asarray(theta, dtype=float))
        if not self.in_domain(theta):
            return -np.inf
        return float(sum(d.logpdf(v) for d, v in zip(self.prior, theta)))

    def describe_bounds(self) -> str:
        parts = []
        for name, b in zip(self.param_names, self.param_bounds):
            parts.append(f"{name} in {'[' if b.include_low else '('}{b.low:g}, {b.high:g}]")
        return ', '.join(parts)

    def _check_theta(self, theta: np.ndarray) -> np.ndarray:
        if theta.shape != (self.n_params,):
            raise ValueError(f"theta must be [{', '.join(self.param_names)}], "
                             f"got shape {theta.shape}")
        return theta

    def describe(self) -> str:
        priors = ', '.join(f"{name}~{distribution_name(d)}"
                           for name, d in zip(self.param_names, self.prior))
        return (f"[{self.tag}] {self.num_trials} trials x {self.ntime} samples "
                f"(dt={self.dt}, T={self.T}), epsilon={self.epsilon}, prior: {priors}")

    @staticmethod
    def _observed_moments(data, num_trials, data_mean, data_var):
        """Fill in defaults derived from the observed trials."""
        data = np.asarray(data, dtype=float)
        if data.ndim != 2:
            raise ValueError(f"data must be 2D [trials, time], got shape {data.shape}")
        if num_trials is None:
            num_trials = data.shape[0]
        if data_mean is None:
            data_mean = float(np.mean(data))
        if data_var is None:
            data_var = float(np.var(data))
        return data, num_trials, data_mean, data_var


# ═══════════════════════════════════════════════════════════════
# Functional interface
# ═══════════════════════════════════════════════════════════════

def generate_data(model: TimescaleModel, theta: Sequence[float],
                  rng: Optional[np.random.Generator] = None) -> np.ndarray:
    return model.generate_data(theta, rng=rng)


def summary_stats(model: TimescaleModel, data: np.ndarray):
    return model.summary_stats(data)


def distance_function(model: TimescaleModel, sum_stats, other_sum_stats) -> float:
    return model.distance_function(sum_stats, other_sum_stats)
