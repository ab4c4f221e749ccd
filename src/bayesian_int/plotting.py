"""
BayesianINT — Diagnostic Plots
==============================
Observed vs simulated summary statistics, for eyeballing a fit or a set of
accepted ABC samples.

Creates:
1. ACF plot (OneTimescaleModel)
2. PSD plot, log-log (OneTimescaleAndOscModel)
3. Posterior predictive overlay for either model
"""

import numpy as np
from typing import Optional, Sequence
import matplotlib.pyplot as plt

from .one_timescale import OneTimescaleModel
from .one_timescale_and_osc import OneTimescaleAndOscModel


def _axes(ax):
    if ax is None:
        _, ax = plt.subplots(figsize=(7, 4))
    return ax


def _save(ax, save_path: Optional[str]):
    if save_path:
        ax.figure.savefig(save_path, dpi=150, bbox_inches='tight')


def plot_autocorrelation(model: OneTimescaleModel, simulated=None, ax=None,
                         save_path: Optional[str] = None):
    """Observed ACF, optionally against a simulated one."""
    ax = _axes(ax)
    lags = np.arange(model.n_lags) * model.dt
    ax.plot(lags, model.data_sum_stats, color='k', lw=2, label='observed')
    if simulated is not None:
        ax.plot(lags, simulated, color='tab:red', lw=1.5, label='simulated')
    ax.axhline(0.5, color='grey', ls=':', lw=1)
    ax.set_xlabel('Lag (s)')
    ax.set_ylabel('Autocorrelation')
    ax.legend()
    _save(ax, save_path)
    return ax


def plot_psd(model: OneTimescaleAndOscModel, simulated=None, ax=None,
             save_path: Optional[str] = None):
    """Observed PSD (log-log), optionally against a simulated (psd, freqs)."""
    ax = _axes(ax)
    psd, freqs = model.data_sum_stats
    ax.loglog(freqs, psd, color='k', lw=2, label='observed')
    if simulated is not None:
        ax.loglog(simulated[1], simulated[0], color='tab:red', lw=1.5, label='simulated')
    ax.set_xlabel('Frequency (Hz)')
    ax.set_ylabel('PSD')
    ax.legend()
    _save(ax, save_path)
    return ax


def plot_posterior_predictive(model, thetas: Sequence[Sequence[float]],
                              rng: Optional[np.random.Generator] = None,
                              ax=None, save_path: Optional[str] = None):
    """Overlay summary statistics simulated at each parameter vector in thetas."""
    ax = _axes(ax)
    rng = rng if rng is not None else np.random.default_rng()

    for i, theta in enumerate(thetas):
        stats = model.summary_stats(model.generate_data(theta, rng=rng))
        label = 'posterior predictive' if i == 0 else None
        if isinstance(model, OneTimescaleAndOscModel):
            ax.loglog(stats[1], stats[0], color='tab:blue', alpha=0.3, lw=1, label=label)
        else:
            lags = np.arange(len(stats)) * model.dt
            ax.plot(lags, stats, color='tab:blue', alpha=0.3, lw=1, label=label)

    if isinstance(model, OneTimescaleAndOscModel):
        return plot_psd(model, ax=ax, save_path=save_path)
    return plot_autocorrelation(model, ax=ax, save_path=save_path)
