"""
BayesianINT — Timescale + Oscillation Model
===========================================
theta = [tau, freq, coeff]. Trials are an OU process mixed with a sinusoid
of frequency freq (Hz); coeff in [0, 1] is the share of variance carried by
the oscillation. The summary statistic is the trial-averaged PSD (DC bin
removed), compared in log space.

License: MIT
"""

import numpy as np
from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

from .config import DEFAULT_SUMMARY, PSD_METHODS, InformedPriorConfig
from .distances import logarithmic_distance
from .models import ParamBound, TimescaleModel, _readonly
from .ornstein_uhlenbeck import generate_ou_with_oscillation
from .priors import INFORMED, informed_oscillation_prior
from .sumstats import power_spectral_density


@dataclass(frozen=True, eq=False)
class OneTimescaleAndOscModel(TimescaleModel):
    """OU model with an additive oscillation, fitted on the PSD."""
    psd_method: str = DEFAULT_SUMMARY.psd_method

    param_names: ClassVar[Tuple[str, ...]] = ('tau', 'freq', 'coeff')
    param_bounds: ClassVar[Tuple[ParamBound, ...]] = (
        ParamBound(0.0, include_low=False),
        ParamBound(0.0, include_low=False),
        ParamBound(0.0, 1.0),
    )
    tag: ClassVar[str] = 'OneTimescaleAndOsc'

    def __post_init__(self):
        super().__post_init__()
        if self.psd_method not in PSD_METHODS:
            raise ValueError(f"Unknown PSD method: {self.psd_method}. "
                             f"Choose from {PSD_METHODS}")

        try:
            psd, freqs = self.data_sum_stats
        except (TypeError, ValueError):
            raise ValueError("data_sum_stats must be a (psd, freqs) pair") from None
        psd = np.asarray(psd, dtype=float)
        freqs = np.asarray(freqs, dtype=float)
        if psd.ndim != 1 or psd.shape != freqs.shape:
            raise ValueError(f"psd and freqs must be 1D of equal length, "
                             f"got {psd.shape} and {freqs.shape}")
        object.__setattr__(self, 'data_sum_stats', (_readonly(psd), _readonly(freqs)))

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
                   psd_method: str = DEFAULT_SUMMARY.psd_method,
                   prior_config: Optional[InformedPriorConfig] = None,
                   verbose: bool = False) -> 'OneTimescaleAndOscModel':
        """Build a model with an explicit prior (or the 'informed' selector)."""
        kwargs = dict(dt=dt, T=T, epsilon=epsilon, data_sum_stats=data_sum_stats,
                      num_trials=num_trials, data_mean=data_mean, data_var=data_var,
                      psd_method=psd_method, verbose=verbose)
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
                 psd_method: str = DEFAULT_SUMMARY.psd_method,
                 prior_config: Optional[InformedPriorConfig] = None,
                 verbose: bool = False) -> 'OneTimescaleAndOscModel':
        """Build a model with priors located from the observed PSD."""
        if data_sum_stats is None:
            data_sum_stats = power_spectral_density(data, 1.0 / dt, method=psd_method)
        psd, freqs = data_sum_stats
        prior = informed_oscillation_prior(psd, freqs, prior_config)
        return cls._build(data, prior, dt=dt, T=T, epsilon=epsilon,
                          data_sum_stats=data_sum_stats, num_trials=num_trials,
                          data_mean=data_mean, data_var=data_var,
                          psd_method=psd_method, verbose=verbose)

    @classmethod
    def _build(cls, data, prior, *, dt, T, epsilon, data_sum_stats,
               num_trials, data_mean, data_var, psd_method, verbose):
        data, num_trials, data_mean, data_var = cls._observed_moments(
            data, num_trials, data_mean, data_var)
        if data_sum_stats is None:
            data_sum_stats = power_spectral_density(data, 1.0 / dt, method=psd_method)
        model = cls(data=data, prior=prior, data_sum_stats=data_sum_stats,
                    epsilon=epsilon, dt=dt, T=T, num_trials=num_trials,
                    data_mean=data_mean, data_var=data_var, psd_method=psd_method)
        if verbose:
            freqs = model.data_sum_stats[1]
            print(model.describe())
            print(f"[{cls.tag}] PSD summary ({psd_method}): {len(freqs)} bins, "
                  f"{freqs[0]:.3g}-{freqs[-1]:.3g} Hz")
        return model

    # ── Capability contract ─────────────────────────────────────

    def generate_data(self, theta: Sequence[float],
                      rng: Optional[np.random.Generator] = None) -> np.ndarray:
        theta = self._check_theta(np.atleast_1d(np.asarray(theta, dtype=float)))
        return generate_ou_with_oscillation(theta, self.dt, self.T, self.num_trials,
                                            self.data_mean, self.data_var, rng=rng)

    def summary_stats(self, data: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return power_spectral_density(data, self.sampling_rate, method=self.psd_method)

    def distance_function(self, sum_stats, other_sum_stats) -> float:
        # Both PSDs come from the same (dt, T) grid, so the bins line up
        return logarithmic_distance(sum_stats[0], other_sum_stats[0])
