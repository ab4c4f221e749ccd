"""
BayesianINT — Prior Distributions
=================================
Priors are ordered sequences of scipy.stats frozen distributions, one per
free parameter. They can be given explicitly (frozen distributions or
PriorSpec entries) or "informed": centred on quick estimates computed from
the observed summary statistics.

Informed priors:
    one timescale:      tau   ~ Normal(tau_hat, tau_scale * tau_hat)
    timescale + osc:    tau   ~ Normal(tau_hat, tau_scale * tau_hat)
                        freq  ~ Normal(peak_freq, freq_sigma)
                        coeff ~ Uniform(coeff_bounds)

    tau_hat comes from the ACW-50 (ACF model) or from the Lorentzian knee
    frequency of the PSD (oscillatory model).

License: MIT
"""

import warnings
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from scipy import stats

from .config import DEFAULT_INFORMED_PRIOR, InformedPriorConfig
from .sumstats import (
    acw50, find_oscillation_peak, fit_lorentzian, tau_from_acw50, tau_from_knee,
)

INFORMED = 'informed'


# ═══════════════════════════════════════════════════════════════
# Explicit priors
# ═══════════════════════════════════════════════════════════════

@dataclass
class PriorSpec:
    """Specification for a single parameter prior distribution."""
    name: str
    distribution: str  # 'normal', 'uniform', 'halfnormal', 'beta', 'gamma'
    params: Dict  # Distribution parameters (e.g., {'mu': 1.0, 'sigma': 0.5})
    bounds: Optional[Tuple[float, float]] = None  # Hard bounds (truncation)

    def to_distribution(self):
        """Build the equivalent scipy.stats frozen distribution."""
        p = self.params
        if self.distribution == 'normal':
            if self.bounds:
                lower, upper = self.bounds
                return stats.truncnorm((lower - p['mu']) / p['sigma'],
                                       (upper - p['mu']) / p['sigma'],
                                       loc=p['mu'], scale=p['sigma'])
            return stats.norm(loc=p['mu'], scale=p['sigma'])

        elif self.distribution == 'uniform':
            return stats.uniform(loc=p['lower'], scale=p['upper'] - p['lower'])

        elif self.distribution == 'halfnormal':
            return stats.halfnorm(scale=p['sigma'])

        elif self.distribution == 'beta':
            # Beta distribution scaled to bounds
            lower, upper = self.bounds or (0.0, 1.0)
            return stats.beta(p['alpha'], p['beta'], loc=lower, scale=upper - lower)

        elif self.distribution == 'gamma':
            return stats.gamma(p['alpha'], scale=1.0 / p['beta'])

        raise ValueError(f"Unknown distribution: {self.distribution}")


def get_default_priors(oscillation: bool = False) -> List[PriorSpec]:
    """Weakly informative default priors.

    Args:
        oscillation: Include frequency and coefficient priors
    """
    priors = [
        PriorSpec(name='tau', distribution='uniform',
                  params={'lower': 0.1, 'upper': 10.0}),
    ]
    if oscillation:
        priors += [
            PriorSpec(name='freq', distribution='uniform',
                      params={'lower': 0.01, 'upper': 1.0}),
            PriorSpec(name='coeff', distribution='uniform',
                      params={'lower': 0.0, 'upper': 1.0}),
        ]
    return priors


def is_distribution(obj) -> bool:
    """True for objects usable as a prior entry (sampling + density)."""
    return callable(getattr(obj, 'rvs', None)) and callable(getattr(obj, 'logpdf', None))


def distribution_name(dist) -> str:
    """scipy name of a frozen distribution, e.g. 'norm' or 'uniform'."""
    return getattr(getattr(dist, 'dist', None), 'name', type(dist).__name__)


def validate_prior(prior: Sequence, param_names: Sequence[str]) -> tuple:
    """Check an explicit prior and convert PriorSpec entries.

    Returns:
        Tuple of frozen distributions, one per name in param_names
    """
    if isinstance(prior, str):
        raise ValueError(f"Unknown prior selector '{prior}'; use '{INFORMED}' "
                         "or a sequence of distributions")
    prior = list(prior)
    if len(prior) != len(param_names):
        raise ValueError(f"Prior has {len(prior)} entries, expected {len(param_names)} "
                         f"({', '.join(param_names)})")

    dists = []
    for name, entry in zip(param_names, prior):
        if isinstance(entry, PriorSpec):
            entry = entry.to_distribution()
        if not is_distribution(entry):
            raise ValueError(f"Prior for '{name}' is not a distribution: {entry!r}")
        dists.append(entry)
    return tuple(dists)


# ═══════════════════════════════════════════════════════════════
# Informed priors
# ═══════════════════════════════════════════════════════════════

def _tau_normal(tau_hat: float, config: InformedPriorConfig):
    tau_hat = max(float(tau_hat), config.min_tau)
    return stats.norm(loc=tau_hat, scale=config.tau_scale * tau_hat)


def informed_one_timescale_prior(data_sum_stats, dt: float, n_lags: int,
                                 config: Optional[InformedPriorConfig] = None) -> tuple:
    """Normal tau prior centred on the ACW-50 timescale of the observed ACF."""
    config = config or DEFAULT_INFORMED_PRIOR
    width = acw50(data_sum_stats, dt)
    if np.isnan(width):
        tau_hat = n_lags * dt
        warnings.warn(f"ACF never drops to 0.5 within {n_lags} lags; "
                      f"centring tau prior on the lag window ({tau_hat:.3g} s)")
    else:
        tau_hat = float(tau_from_acw50(width))
    return (_tau_normal(tau_hat, config),)


def informed_oscillation_prior(psd, freqs,
                               config: Optional[InformedPriorConfig] = None) -> tuple:
    """Priors for [tau, freq, coeff] from the observed PSD.

    tau is centred on the Lorentzian knee timescale and freq on the
    strongest peak above the Lorentzian background.
    """
    config = config or DEFAULT_INFORMED_PRIOR
    psd = np.asarray(psd, dtype=float)
    freqs = np.asarray(freqs, dtype=float)

    amp, knee = fit_lorentzian(psd, freqs)
    tau_hat = float(tau_from_knee(knee))

    peak = find_oscillation_peak(psd, freqs, fit=(amp, knee))
    if np.isnan(peak):
        peak = float(freqs[np.argmax(psd)])
        warnings.warn(f"No oscillation peak above the aperiodic background; "
                      f"centring frequency prior on the PSD maximum ({peak:.3g} Hz)")

    lower, upper = config.coeff_bounds
    return (
        _tau_normal(tau_hat, config),
        stats.norm(loc=peak, scale=config.freq_sigma),
        stats.uniform(loc=lower, scale=upper - lower),
    )
