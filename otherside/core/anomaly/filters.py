"""
otherside/core/anomaly/filters.py — Noise-reduction filter bank.

A first-order RC high-pass removes rumble below 80 Hz, then a bank of
biquad notches removes mains hum at 50/60 Hz and its harmonics.

Design:
    - All functions are pure: (samples, sample_rate) → new array of the
      same length. Inputs are never modified in place.
    - Recursions run through scipy.signal.lfilter with explicit initial
      conditions (zi) created per call, so no filter state survives a call
      and concurrent calls on the same FilterSpec are independent.
    - A notch centre that cannot be represented at the given sample rate (at
      or beyond Nyquist) passes the signal through unchanged.
    - Parameters that would make a recursion unstable (non-positive cutoff,
      notch bandwidth outside (0, sample_rate/2)) raise InvalidConfigError
      instead of producing NaN/Inf.
    - sample_rate <= 0 is the caller's responsibility (AudioConfig rejects it).
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy import signal as scipy_signal

from otherside.core.anomaly.types import HUM_FREQUENCIES, FilterSettings, FilterSpec
from otherside.core.errors import InvalidConfigError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HIGH_PASS_CUTOFF: float = 80.0  # Hz
NOTCH_BANDWIDTH: float = 2.0  # Hz


# ---------------------------------------------------------------------------
# Coefficient design
# ---------------------------------------------------------------------------


def high_pass_alpha(sample_rate: float, cutoff: float) -> float:
    """Smoothing coefficient of the RC high-pass: RC / (RC + dt)."""
    rc = 1.0 / (2.0 * math.pi * cutoff)
    dt = 1.0 / sample_rate
    return rc / (rc + dt)


def notch_coefficients(
    sample_rate: float, center: float, bandwidth: float
) -> tuple[np.ndarray, np.ndarray]:
    """Design a biquad notch.

    ω0 = 2π·f0/fs, Δω = 2π·bw/fs, α = sin(Δω/2)/2

        b = [1, -2cos ω0, 1] / a0
        a = [1+α, -2cos ω0, 1-α] / a0     (a0 = 1+α)

    Args:
        sample_rate: Sample rate in Hz.
        center:      Notch centre frequency in Hz, in (0, sample_rate/2).
        bandwidth:   Notch bandwidth in Hz, > 0.

    Returns:
        (b, a) normalised so that a[0] == 1.
    """
    w0 = 2.0 * math.pi * center / sample_rate
    dw = 2.0 * math.pi * bandwidth / sample_rate
    alpha = math.sin(dw / 2.0) / 2.0
    cos_w0 = math.cos(w0)

    a0 = 1.0 + alpha
    b = np.array([1.0, -2.0 * cos_w0, 1.0]) / a0
    a = np.array([a0, -2.0 * cos_w0, 1.0 - alpha]) / a0
    return b, a


# ---------------------------------------------------------------------------
# Filter stages
# ---------------------------------------------------------------------------


def high_pass(
    samples: np.ndarray, sample_rate: float, cutoff: float = HIGH_PASS_CUTOFF
) -> np.ndarray:
    """First-order RC high-pass.

    y[0] = x[0];  y[i] = alpha·(y[i-1] + x[i] - x[i-1])

    Args:
        samples:     1-D sample array.
        sample_rate: Sample rate in Hz (> 0).
        cutoff:      Cutoff frequency in Hz (default 80 Hz), > 0.

    Returns:
        New array of the same length. Empty in → empty out; a single
        sample passes through unchanged.

    Raises:
        InvalidConfigError: If cutoff is not a finite positive number.
    """
    if not (math.isfinite(cutoff) and cutoff > 0.0):
        raise InvalidConfigError("cutoff", cutoff, "must be a finite positive Hz")
    x = np.asarray(samples, dtype=np.float64)
    if x.size <= 1:
        return x.copy()

    alpha = high_pass_alpha(sample_rate, cutoff)
    b = np.array([alpha, -alpha])
    a = np.array([1.0, -alpha])
    # Transposed direct form: y[0] = b0·x[0] + zi[0]. Choosing
    # zi[0] = (1 - alpha)·x[0] yields y[0] = x[0], and the state it leaves
    # behind reproduces the recurrence exactly from index 1 on.
    zi = np.array([(1.0 - alpha) * x[0]])
    y, _ = scipy_signal.lfilter(b, a, x, zi=zi)
    return y


def notch(
    samples: np.ndarray,
    sample_rate: float,
    center: float,
    bandwidth: float = NOTCH_BANDWIDTH,
) -> np.ndarray:
    """Second-order IIR notch at `center` Hz.

    Indices 0 and 1 are computed from zero history:

        y[0] = b0·x[0]
        y[1] = b0·x[1] + b1·x[0] - a1·y[0]

    and the standard biquad difference equation applies from i = 2. That is
    exactly lfilter with a zeroed state vector.

    Args:
        samples:     1-D sample array.
        sample_rate: Sample rate in Hz (> 0).
        center:      Centre frequency in Hz.
        bandwidth:   Bandwidth in Hz (default 2 Hz), in (0, sample_rate/2).

    Returns:
        New array of the same length. If `center` is not strictly inside
        (0, sample_rate/2) the input is returned unchanged (as a copy).

    Raises:
        InvalidConfigError: If bandwidth is outside (0, sample_rate/2); the
                            pole would leave the unit circle.
    """
    if not (math.isfinite(bandwidth) and 0.0 < bandwidth < sample_rate / 2.0):
        raise InvalidConfigError(
            "bandwidth", bandwidth, f"must be inside (0, {sample_rate / 2.0:g}) Hz"
        )
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0 or not (0.0 < center < sample_rate / 2.0):
        return x.copy()

    b, a = notch_coefficients(sample_rate, center, bandwidth)
    zi = np.zeros(2)
    y, _ = scipy_signal.lfilter(b, a, x, zi=zi)
    return y


def apply_filter(samples: np.ndarray, sample_rate: float, spec: FilterSpec) -> np.ndarray:
    """Apply a single FilterSpec stage.

    Raises:
        ValueError:         If spec.kind is not a known filter kind.
        InvalidConfigError: If the stage parameters are unstable at sample_rate.
    """
    if spec.kind == "high_pass":
        return high_pass(samples, sample_rate, spec.frequency)
    if spec.kind == "notch":
        return notch(samples, sample_rate, spec.frequency, spec.bandwidth)
    raise ValueError(f"Unknown filter kind: {spec.kind!r}. Valid: ['high_pass', 'notch']")


def default_filter_chain() -> tuple[FilterSpec, ...]:
    """High-pass at 80 Hz followed by 2 Hz notches at every hum frequency."""
    return (FilterSpec("high_pass", HIGH_PASS_CUTOFF),) + tuple(
        FilterSpec("notch", f, NOTCH_BANDWIDTH) for f in HUM_FREQUENCIES
    )


def apply_filter_chain(
    samples: np.ndarray, sample_rate: float, chain: Sequence[FilterSpec]
) -> np.ndarray:
    """Run `samples` through every stage of `chain`, in order."""
    y = np.asarray(samples, dtype=np.float64).copy()
    for spec in chain:
        y = apply_filter(y, sample_rate, spec)
    return y


def apply_noise_reduction(samples: np.ndarray, sample_rate: float) -> np.ndarray:
    """Apply the default noise-reduction chain.

    Returns:
        Filtered copy with len(out) == len(samples).
    """
    return apply_filter_chain(samples, sample_rate, default_filter_chain())


def describe_chain(chain: Sequence[FilterSpec]) -> FilterSettings:
    """Summarise a filter chain for ProcessingMetadata."""
    high_pass_cutoff = next((s.frequency for s in chain if s.kind == "high_pass"), 0.0)
    notches = tuple(s.frequency for s in chain if s.kind == "notch")
    notch_bw = next((s.bandwidth for s in chain if s.kind == "notch"), 0.0)
    return FilterSettings(
        high_pass_cutoff=high_pass_cutoff,
        low_pass_cutoff=0.0,
        notch_filters=notches,
        notch_bandwidth=notch_bw,
        noise_reduction=bool(chain),
        dynamic_range=False,
    )
