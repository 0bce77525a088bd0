"""
otherside/core/anomaly/scoring.py — Scalar anomaly strength and quality grade.

Design:
    - score_anomaly() is the voice-band share of the half-spectrum
      magnitude. A silent spectrum scores 0.0 (no division by zero).
    - grade_quality() buckets (strength, noise) into an EVPQuality using
      fixed thresholds: strength must be high AND noise low.
"""

from __future__ import annotations

import numpy as np

from otherside.core.anomaly.types import VOICE_BAND, EVPQuality

# (min anomaly strength, max noise level exclusive, grade); first match wins
_QUALITY_THRESHOLDS: tuple[tuple[float, float, EVPQuality], ...] = (
    (0.8, 0.1, EVPQuality.EXCELLENT),
    (0.6, 0.2, EVPQuality.GOOD),
    (0.4, 0.4, EVPQuality.FAIR),
)


def score_anomaly(spectrum: np.ndarray, sample_rate: float) -> float:
    """Voice-band magnitude / total magnitude over bins 1..N/2-1.

    Args:
        spectrum:    Complex (or magnitude) spectrum of length N.
        sample_rate: Sample rate in Hz.

    Returns:
        Score in [0.0, 1.0]; 0.0 when the half-spectrum is silent.
    """
    n = len(spectrum)
    half = n // 2
    if half <= 1:
        return 0.0

    mags = np.abs(np.asarray(spectrum)[1:half])
    freqs = np.arange(1, half) * (sample_rate / n)
    total = float(np.sum(mags))
    if not total > 0.0:
        return 0.0

    band_lo, band_hi = VOICE_BAND
    voice = float(np.sum(mags[(freqs >= band_lo) & (freqs <= band_hi)]))
    return float(np.clip(voice / total, 0.0, 1.0))


def grade_quality(anomaly_strength: float, noise_level: float) -> EVPQuality:
    """Grade a result: EXCELLENT ≥0.8/<0.1, GOOD ≥0.6/<0.2, FAIR ≥0.4/<0.4, else POOR."""
    for min_strength, max_noise, grade in _QUALITY_THRESHOLDS:
        if anomaly_strength >= min_strength and noise_level < max_noise:
            return grade
    return EVPQuality.POOR
