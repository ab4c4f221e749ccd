"""
BayesianINT — Distance Functions
================================
Scalar dissimilarity between observed and simulated summary statistics.
ABC accepts a proposal when distance <= epsilon.
"""

import numpy as np


def _pair(a, b):
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"Summary statistics differ in shape: {a.shape} vs {b.shape}")
    if a.size == 0:
        raise ValueError("Summary statistics are empty")
    return a, b


def linear_distance(a, b) -> float:
    """Mean squared difference."""
    a, b = _pair(a, b)
    return float(np.mean((a - b) ** 2))


def logarithmic_distance(a, b) -> float:
    """Mean squared difference of log10 values (for PSDs)."""
    a, b = _pair(a, b)
    if np.any(a <= 0) or np.any(b <= 0):
        raise ValueError("Logarithmic distance needs strictly positive values")
    return float(np.mean((np.log10(a) - np.log10(b)) ** 2))
