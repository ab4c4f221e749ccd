"""
BayesianINT - Intrinsic Neural Timescales by Approximate Bayesian Computation

Ornstein-Uhlenbeck simulators, summary statistics (ACF / PSD), distance
functions and the model objects an ABC sampler consumes.
"""

__version__ = "0.1.0"

# Simulation
from .ornstein_uhlenbeck import (
    generate,
    generate_ou_process,
    generate_ou_with_oscillation,
)

# Summary statistics
from .sumstats import (
    comp_ac_fft,
    comp_ac_time,
    comp_psd,
    autocorrelation,
    power_spectral_density,
    acw50,
    acw0,
    tau_from_acw50,
    fit_lorentzian,
    tau_from_knee,
    find_oscillation_peak,
)

from .distances import linear_distance, logarithmic_distance
from .priors import PriorSpec, get_default_priors, INFORMED

# Models
from .models import ParamBound, TimescaleModel, generate_data, summary_stats, distance_function
from .one_timescale import OneTimescaleModel
from .one_timescale_and_osc import OneTimescaleAndOscModel

from .config import InformedPriorConfig, SummaryConfig

__all__ = [
    "generate",
    "generate_ou_process",
    "generate_ou_with_oscillation",
    "comp_ac_fft",
    "comp_ac_time",
    "comp_psd",
    "autocorrelation",
    "power_spectral_density",
    "acw50",
    "acw0",
    "tau_from_acw50",
    "fit_lorentzian",
    "tau_from_knee",
    "find_oscillation_peak",
    "linear_distance",
    "logarithmic_distance",
    "PriorSpec",
    "get_default_priors",
    "INFORMED",
    "ParamBound",
    "TimescaleModel",
    "generate_data",
    "summary_stats",
    "distance_function",
    "OneTimescaleModel",
    "OneTimescaleAndOscModel",
    "InformedPriorConfig",
    "SummaryConfig",
]
