"""
BayesianINT — Summary Statistics
================================
Reduces trial matrices [num_trials, ntime] to the summary statistics compared
during ABC: the autocorrelation function (ACF) or the power spectral density
(PSD). Also provides the quick timescale estimates used to centre informed
priors.

Key Features:
- FFT autocorrelation (O(n log n)) with a direct time-domain reference
- Periodogram / Welch PSD with the DC bin removed
- ACW-50 / ACW-0 and Lorentzian knee-frequency timescale estimates
- Oscillation peak detection above the aperiodic (Lorentzian) background

License: MIT
"""

import warnings
import numpy as np
from typing import Optional, Tuple
from scipy import signal
from scipy.fft import irfft, next_fast_len, rfft
from scipy.optimize import curve_fit

from .config import PSD_METHODS


def _as_trials(data) -> np.ndarray:
    data = np.atleast_2d(np.asarray(data, dtype=float))
    if data.ndim != 2:
        raise ValueError(f"Trial data must be 2D [trials, time], got shape {data.shape}")
    if data.shape[1] < 2:
        raise ValueError(f"Need at least 2 time points, got {data.shape[1]}")
    return data


def _check_n_lags(n_lags: int, ntime: int) -> int:
    n_lags = int(n_lags)
    if not 1 <= n_lags <= ntime:
        raise ValueError(f"n_lags must be in [1, {ntime}], got {n_lags}")
    return n_lags


# ═══════════════════════════════════════════════════════════════
# Autocorrelation
# ═══════════════════════════════════════════════════════════════

def comp_ac_fft(data, n_lags: int = None) -> np.ndarray:
    """Per-trial autocorrelation via zero-padded FFT.

    Args:
        data: [num_trials, ntime] (a 1D array is treated as one trial)
        n_lags: Lags to keep (default: all)

    Returns:
        [num_trials, n_lags] array, column 0 equal to 1
    """
    data = _as_trials(data)
    ntime = data.shape[1]
    n_lags = _check_n_lags(ntime if n_lags is None else n_lags, ntime)

    x = data - data.mean(axis=1, keepdims=True)
    # Padding to >= 2n-1 turns the circular correlation into a linear one
    nfft = next_fast_len(2 * ntime - 1)
    spectrum = rfft(x, n=nfft, axis=1)
    acov = irfft(spectrum * np.conj(spectrum), n=nfft, axis=1)[:, :n_lags]

    lag0 = acov[:, :1]
    if np.any(lag0 <= 0):
        raise ValueError("Autocorrelation undefined for a constant trial")
    return acov / lag0


def comp_ac_time(data, n_lags: int) -> np.ndarray:
    """Per-trial autocorrelation by direct summation.

    Same (biased, lag-0 normalised) estimator as comp_ac_fft; O(n * n_lags).
    """
    data = _as_trials(data)
    ntime = data.shape[1]
    n_lags = _check_n_lags(n_lags, ntime)

    x = data - data.mean(axis=1, keepdims=True)
    var = np.sum(x * x, axis=1)
    if np.any(var <= 0):
        raise ValueError("Autocorrelation undefined for a constant trial")

    ac = np.empty((x.shape[0], n_lags))
    for k in range(n_lags):
        ac[:, k] = np.sum(x[:, :ntime - k] * x[:, k:], axis=1)
    return ac / var[:, np.newaxis]


def autocorrelation(trials, n_lags: int) -> np.ndarray:
    """Trial-averaged autocorrelation, length n_lags."""
    return comp_ac_fft(trials, n_lags=n_lags).mean(axis=0)


# ═══════════════════════════════════════════════════════════════
# Power spectral density
# ═══════════════════════════════════════════════════════════════

def comp_psd(data, fs: float,
             method: str = 'periodogram') -> Tuple[np.ndarray, np.ndarray]:
    """Per-trial one-sided PSD.

    Args:
        data: [num_trials, ntime]
        fs: Sampling rate (Hz)
        method: 'periodogram' (full resolution) or 'welch'

    Returns:
        (psd [num_trials, nfreq], freqs [nfreq]) without the DC bin
    """
    data = _as_trials(data)
    if not fs > 0:
        raise ValueError(f"Sampling rate must be positive, got {fs}")

    if method == 'periodogram':
        freqs, psd = signal.periodogram(data, fs=fs, detrend='constant', axis=1)
    elif method == 'welch':
        nperseg = min(256, data.shape[1])
        freqs, psd = signal.welch(data, fs=fs, nperseg=nperseg,
                                  detrend='constant', axis=1)
    else:
        raise ValueError(f"Unknown PSD method: {method}. Choose from {PSD_METHODS}")

    return psd[:, 1:], freqs[1:]


def power_spectral_density(trials, fs: float,
                           method: str = 'periodogram') -> Tuple[np.ndarray, np.ndarray]:
    """Trial-averaged PSD and its frequency bins."""
    psd, freqs = comp_psd(trials, fs, method=method)
    return psd.mean(axis=0), freqs


# ═══════════════════════════════════════════════════════════════
# Quick timescale estimates
# ═══════════════════════════════════════════════════════════════

def _first_crossing(ac: np.ndarray, level: float, dt: float):
    ac = np.asarray(ac, dtype=float)
    if ac.ndim == 2:
        return np.array([_first_crossing(row, level, dt) for row in ac])
    below = np.flatnonzero(ac <= level)
    return below[0] * dt if below.size else np.nan


def acw50(ac, dt: float):
    """Time lag at which the ACF first drops to 0.5 (NaN if never)."""
    return _first_crossing(ac, 0.5, dt)


def acw0(ac, dt: float):
    """Time lag at which the ACF first reaches zero (NaN if never)."""
    return _first_crossing(ac, 0.0, dt)


def tau_from_acw50(acw50_value):
    """Exponential-decay timescale matching an ACW-50: exp(-t/tau) = 0.5."""
    return -np.asarray(acw50_value) / np.log(0.5)


def lorentzian(freqs, amplitude: float, knee: float):
    """Aperiodic PSD model A / (1 + (f / f_knee)^2)."""
    return amplitude / (1.0 + (np.asarray(freqs) / knee) ** 2)


def _log_lorentzian(freqs, log_amp, log_knee):
    return log_amp - np.log10(1.0 + (freqs / 10 ** log_knee) ** 2)


def fit_lorentzian(psd, freqs) -> Tuple[float, float]:
    """Fit a Lorentzian to a PSD in log space.

    Returns:
        (amplitude, knee_frequency)
    """
    psd = np.asarray(psd, dtype=float)
    freqs = np.asarray(freqs, dtype=float)
    if psd.shape != freqs.shape:
        raise ValueError(f"PSD and frequency shapes differ: {psd.shape} vs {freqs.shape}")
    if np.any(psd <= 0) or np.any(freqs <= 0):
        raise ValueError("Lorentzian fit needs strictly positive PSD and frequencies")

    amp0 = psd[:max(1, len(psd) // 100)].mean()
    half = np.flatnonzero(psd <= amp0 / 2)
    knee0 = freqs[half[0]] if half.size else freqs[len(freqs) // 2]

    try:
        popt, _ = curve_fit(_log_lorentzian, freqs, np.log10(psd),
                            p0=[np.log10(amp0), np.log10(knee0)])
    except RuntimeError as e:
        warnings.warn(f"Lorentzian fit did not converge ({e}); using half-power knee")
        return float(amp0), float(knee0)

    return float(10 ** popt[0]), float(10 ** popt[1])


def tau_from_knee(knee: float):
    """Timescale of an OU process whose PSD has the given knee frequency."""
    return 1.0 / (2 * np.pi * np.asarray(knee))


def find_oscillation_peak(psd, freqs, min_prominence: float = 0.5,
                          fit: Optional[Tuple[float, float]] = None) -> float:
    """Frequency of the strongest peak above the Lorentzian background.

    Args:
        psd, freqs: Trial-averaged PSD (no DC bin)
        min_prominence: Minimum excess over the fit, in decades
        fit: (amplitude, knee) from fit_lorentzian, to skip refitting

    Returns:
        Peak frequency (Hz), or NaN if no bin clears min_prominence
    """
    psd = np.asarray(psd, dtype=float)
    freqs = np.asarray(freqs, dtype=float)
    amp, knee = fit if fit is not None else fit_lorentzian(psd, freqs)
    residual = np.log10(psd) - np.log10(lorentzian(freqs, amp, knee))
    idx = int(np.argmax(residual))
    if residual[idx] < min_prominence:
        return np.nan
    return float(freqs[idx])
