"""
BayesianINT — Configuration Defaults
====================================
Dataclass containers for the tunable constants used when building models:
how wide the informed priors are and how summary statistics are computed.

Usage:
    from bayesian_int.config import InformedPriorConfig
    cfg = InformedPriorConfig(tau_scale=0.5)
    model = OneTimescaleModel.informed(data, dt=0.01, T=100.0,
                                       prior_config=cfg)
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class InformedPriorConfig:
    """Shape of the priors built by the ``informed`` constructors."""
    tau_scale: float = 1.0          # Normal sigma for tau, as a fraction of tau_hat
    min_tau: float = 1e-3           # Floor for tau_hat (s)
    freq_sigma: float = 0.1         # Normal sigma for the oscillation frequency (Hz)
    coeff_bounds: Tuple[float, float] = (0.0, 1.0)  # Uniform support for the coefficient


@dataclass(frozen=True)
class SummaryConfig:
    """Summary-statistic settings."""
    n_lags: int = 3000              # Autocorrelation lags kept (capped at ntime)
    psd_method: str = 'periodogram'  # 'periodogram' or 'welch'


DEFAULT_INFORMED_PRIOR = InformedPriorConfig()
DEFAULT_SUMMARY = SummaryConfig()

PSD_METHODS = ('periodogram', 'welch')
