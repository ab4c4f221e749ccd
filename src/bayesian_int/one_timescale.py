"""
BayesianINT — Single-Timescale Model
====================================
theta = [tau]. Trials are simulated as an OU process matching the observed
mean and variance; the summary statistic is the trial-averaged ACF over
n_lags lags, compared with the mean squared difference.

Usage:
    model = OneTimescaleModel.from_prior(data, [stats.uniform(0.1, 9.9)],
                                         dt=0.01, T=100.0, epsilon=0.1)
    informed = OneTimescaleModel.informed(data, dt=0.01, T=100.0)

License: MIT
"""

import numpy as np
from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

from .config import DEFAULT_SUMMARY, InformedPriorConfig
from .distances import linear_distance
from .models import ParamBound, TimescaleModel, _readonly
from .ornstein_uhlenbeck import generate_ou_process, n_timepoints
from .priors import INFORMED, informed_one_timescale_prior
from .sumstats import autocorrelation


def default_n_lags(dt: float, T: float, data_sum_stats=None) -> int:
    """ACF length used when none is given.

    The length of precomputed summary statistics wins; otherwise
    DEFAULT_SUMMARY.n_lags, capped at the recording length.
    """
    if data_sum_stats is not None:
        return int(np.size(data_sum_stats))
    return min(DEFAULT_SUMMARY.n_lags, n_timepoints(dt, T))


@dataclass(frozen=True, eq=False)
class OneTimescaleModel(TimescaleModel):
    """OU model with a single intrinsic timescale, fitted on the ACF."""
    n_lags: Optional[int] = None

    param_names: ClassVar[Tuple[str, ...]] = ('tau',)
    param_bounds: ClassVar[Tuple[ParamBound, ...]] = (ParamBound(0.0, include_low=False),)
    tag: ClassVar[str] = 'OneTimescale'

    def __post_init__(self):
        super().__post_init__()
        n_lags = self.n_lags
        if n_lags is None:
            n_lags = default_n_lags(self.dt, self.T, self.data_sum_stats)
        n_lags = int(n_lags)
        if not 1 <= n_lags <= self.ntime:
            raise ValueError(f"n_lags must be in [1, {self.ntime}], got {self.n_lags}")
        object.__setattr__(self, 'n_lags', n_lags)

        sum_stats = np.asarray(self.data_sum_stats, dtype=float)
        if sum_stats.shape != (n_lags,):
            raise ValueError(f"data_sum_stats must have shape ({n_lags},), "
                             f"got {sum_stats.shape}")
        object.__setattr__(self, 'data_sum_stats', _readonly(sum_stats))

    # ── Construction ────────────────────────────────────────────

    @classmethod
    def from_prior(cls, data, prior, *,
                   dt: float,
                   T: float,
                   epsilon: float = 0.1,
                   data_sum_stats=None,
                   num_trials: Optional[int] = None,
                   data_mean: Optional[float] = None,
                   data_var: Optional[float] = None,
                   n_lags: Optional[int] = None,
                   prior_config: Optional[InformedPriorConfig] = None,
                   verbose: bool = False) -> 'OneTimescaleModel':
        """Build a model with an explicit prior (or the 'informed' selector)."""
        kwargs = dict(dt=dt, T=T, epsilon=epsilon, data_sum_stats=data_sum_stats,
                      num_trials=num_trials, data_mean=data_mean, data_var=data_var,
                      n_lags=n_lags, verbose=verbose)
        if isinstance(prior, str) and prior == INFORMED:
            return cls.informed(data, prior_config=prior_config, **kwargs)
        return cls._build(data, prior, **kwargs)

    @classmethod
    def informed(cls, data, *,
                 dt: float,
                 T: float,
                 epsilon: float = 0.1,
                 data_sum_stats=None,
                 num_trials: Optional[int] = None,
                 data_mean: Optional[float] = None,
                 data_var: Optional[float] = None,
                 n_lags: Optional[int] = None,
                 prior_config: Optional[InformedPriorConfig] = None,
                 verbose: bool = False) -> 'OneTimescaleModel':
        """Build a model whose tau prior is centred on the observed ACW-50."""
        n_lags = default_n_lags(dt, T, data_sum_stats) if n_lags is None else n_lags
        if data_sum_stats is None:
            data_sum_stats = autocorrelation(data, n_lags)
        prior = informed_one_timescale_prior(data_sum_stats, dt, n_lags, prior_config)
        return cls._build(data, prior, dt=dt, T=T, epsilon=epsilon,
                          data_sum_stats=data_sum_stats, num_trials=num_trials,
                          data_mean=data_mean, data_var=data_var,
                          n_lags=n_lags, verbose=verbose)

    @classmethod
    def _build(cls, data, prior, *, dt, T, epsilon, data_sum_stats,
               num_trials, data_mean, data_var, n_lags, verbose):
        if n_lags is None:
            n_lags = default_n_lags(dt, T, data_sum_stats)
        data, num_trials, data_mean, data_var = cls._observed_moments(
            data, num_trials, data_mean, data_var)
        if data_sum_stats is None:
            data_sum_stats = autocorrelation(data, n_lags)
        model = cls(data=data, prior=prior, data_sum_stats=data_sum_stats,
                    epsilon=epsilon, dt=dt, T=T, num_trials=num_trials,
                    data_mean=data_mean, data_var=data_var, n_lags=n_lags)
        if verbose:
            print(model.describe())
            print(f"[{cls.tag}] ACF summary over {model.n_lags} lags "
                  f"({model.n_lags * dt:.3g} s)")
        return model

    # ── Capability contract ─────────────────────────────────────

    def generate_data(self, theta: Sequence[float],
                      rng: Optional[np.random.Generator] = None) -> np.ndarray:
        theta = self._check_theta(np.atleast_1d(np.asarray(theta, dtype=float)))
        ou = generate_ou_process(theta[0], self.data_var, self.dt, self.T,
                                 self.num_trials, rng=rng)
        return ou + self.data_mean

    def summary_stats(self, data: np.ndarray) -> np.ndarray:
        return autocorrelation(data, self.n_lags)

    def distance_function(self, sum_stats, other_sum_stats) -> float:
        return linear_distance(sum_stats, other_sum_stats)
