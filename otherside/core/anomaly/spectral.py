"""
otherside/core/anomaly/spectral.py — Fixed-size transform and spectral features.

Design:
    - All functions are pure: (samples, sample_rate) → structured data.
    - The whole-buffer spectrum is a fixed FFT_SIZE-point transform: shorter
      buffers are zero-padded at the end, longer ones truncated to their
      first FFT_SIZE samples. This keeps the cost bounded regardless of
      buffer length.
    - Features are computed over bins 1..N/2-1 (DC and Nyquist excluded).
    - Degenerate input (empty buffer, silent spectrum) yields zeros, never
      NaN: every ratio is guarded.
"""

from __future__ import annotations

import numpy as np

from otherside.core.anomaly.types import FFT_SIZE, FrequencyPeak, SpectralSummary

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EPS = 1e-10  # keeps peak quality finite when both neighbours are silent
_ROLLOFF_FRACTION = 0.95
_PEAK_THRESHOLD_FACTOR = 5.0  # peak must exceed noise_threshold × 5
_MAX_PEAKS = 5


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------


def transform(samples: np.ndarray, fft_size: int = FFT_SIZE) -> np.ndarray:
    """Fixed-size complex FFT of the start of the buffer.

    Args:
        samples:  1-D sample array (any length, including 0).
        fft_size: Transform length (default 1024).

    Returns:
        Complex array of exactly `fft_size` bins.
    """
    x = np.asarray(samples, dtype=np.float64)
    frame = np.zeros(fft_size, dtype=np.float64)
    n = min(x.size, fft_size)
    frame[:n] = x[:n]
    return np.fft.fft(frame)


def bin_frequencies(sample_rate: float, fft_size: int = FFT_SIZE) -> np.ndarray:
    """Centre frequency of every bin: i · sample_rate / fft_size."""
    return np.arange(fft_size) * (sample_rate / fft_size)


# ---------------------------------------------------------------------------
# Time-domain features
# ---------------------------------------------------------------------------


def rms(samples: np.ndarray) -> float:
    """Root-mean-square amplitude. 0.0 for an empty buffer."""
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(x**2)))


def zero_crossing_rate(samples: np.ndarray) -> float:
    """Fraction of adjacent pairs whose sign differs (x >= 0 counts as positive)."""
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0:
        return 0.0
    positive = x >= 0.0
    crossings = int(np.count_nonzero(positive[1:] != positive[:-1]))
    return crossings / x.size


# ---------------------------------------------------------------------------
# Frequency-domain features
# ---------------------------------------------------------------------------


def _half_spectrum(spectrum: np.ndarray, sample_rate: float) -> tuple[np.ndarray, np.ndarray]:
    """Magnitudes and frequencies of bins 1..N/2-1."""
    n = len(spectrum)
    half = n // 2
    mags = np.abs(spectrum[1:half])
    freqs = np.arange(1, half) * (sample_rate / n) if n else np.array([], dtype=float)
    return mags, freqs


def spectral_centroid(spectrum: np.ndarray, sample_rate: float) -> float:
    """Σ(mag·freq) / Σ(mag) over bins 1..N/2-1. 0.0 for a silent spectrum."""
    mags, freqs = _half_spectrum(spectrum, sample_rate)
    total = float(np.sum(mags))
    if total <= 0.0:
        return 0.0
    return float(np.sum(mags * freqs) / total)


def spectral_rolloff(
    spectrum: np.ndarray, sample_rate: float, fraction: float = _ROLLOFF_FRACTION
) -> float:
    """Frequency of the first bin (from bin 1) where cumulative magnitude reaches
    `fraction` of the half-spectrum total. 0.0 for a silent spectrum."""
    mags, freqs = _half_spectrum(spectrum, sample_rate)
    total = float(np.sum(mags))
    if total <= 0.0:
        return 0.0
    cumulative = np.cumsum(mags)
    idx = int(np.searchsorted(cumulative, fraction * total, side="left"))
    idx = min(idx, len(freqs) - 1)
    return float(freqs[idx])


def find_peaks(
    magnitudes: np.ndarray,
    sample_rate: float,
    fft_size: int,
    noise_threshold: float,
    max_peaks: int = _MAX_PEAKS,
) -> tuple[FrequencyPeak, ...]:
    """Pick local maxima above 5 × noise_threshold.

    A bin i is a peak when mag[i] > mag[i-1], mag[i] > mag[i+1] and
    mag[i] > 5·noise_threshold. Bin 0 (DC) and the last bin are never peaks.

    Args:
        magnitudes:      Magnitude per bin, starting at bin 0.
        sample_rate:     Sample rate in Hz.
        fft_size:        Transform length used to produce the magnitudes.
        noise_threshold: Base noise threshold.
        max_peaks:       Maximum number of peaks returned (default 5).

    Returns:
        Up to `max_peaks` peaks sorted by magnitude, loudest first.
    """
    mags = np.asarray(magnitudes, dtype=np.float64)
    if mags.size < 3:
        return ()

    centre = mags[1:-1]
    left = mags[:-2]
    right = mags[2:]
    floor = noise_threshold * _PEAK_THRESHOLD_FACTOR
    is_peak = (centre > left) & (centre > right) & (centre > floor)
    indices = np.flatnonzero(is_peak) + 1

    peaks = [
        FrequencyPeak(
            frequency=float(i * sample_rate / fft_size),
            magnitude=float(mags[i]),
            quality=float(min(mags[i] / (mags[i - 1] + mags[i + 1] + _EPS), 1.0)),
        )
        for i in indices
    ]
    peaks.sort(key=lambda p: p.magnitude, reverse=True)
    return tuple(peaks[:max_peaks])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze(
    samples: np.ndarray,
    sample_rate: float,
    noise_threshold: float,
    spectrum: np.ndarray | None = None,
) -> SpectralSummary:
    """Compute RMS, zero-crossing rate, centroid, rolloff and dominant peaks.

    Args:
        samples:         1-D sample array.
        sample_rate:     Sample rate in Hz.
        noise_threshold: Base noise threshold for peak picking.
        spectrum:        Pre-computed transform(samples), to avoid
                         transforming twice. Computed when omitted.

    Returns:
        SpectralSummary. An empty buffer yields all zeros and no peaks.
    """
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0:
        return SpectralSummary(
            rms_energy=0.0,
            zero_crossing_rate=0.0,
            spectral_centroid=0.0,
            spectral_rolloff=0.0,
            dominant_frequencies=(),
        )

    if spectrum is None:
        spectrum = transform(x)
    n = len(spectrum)
    half_mags = np.abs(spectrum[: n // 2])

    return SpectralSummary(
        rms_energy=rms(x),
        zero_crossing_rate=zero_crossing_rate(x),
        spectral_centroid=spectral_centroid(spectrum, sample_rate),
        spectral_rolloff=spectral_rolloff(spectrum, sample_rate),
        dominant_frequencies=find_peaks(half_mags, sample_rate, n, noise_threshold),
    )
