"""
otherside/core/anomaly/pipeline.py — Top-level anomaly analysis entry point.

process_audio() wires the anomaly modules together:

    samples
        │
        ├─ apply_filter_chain()     [filters.py — high-pass + hum notches]
        │       ↓
        ├─ transform()              [spectral.py — fixed 1024-point FFT]
        ├─ analyze()                [spectral.py — RMS, ZCR, centroid, rolloff, peaks]
        ├─ detect_events()          [events.py — 50 ms Hann frames]
        │       ↓
        ├─ merge_events()           [events.py]
        │       ↓
        ├─ score_anomaly()          [scoring.py]
        └─ ProcessingResult

Design:
    - Pure function, no long-lived processor object: every call allocates
      its own filter state and arrays, so concurrent calls sharing one
      AudioConfig are independent.
    - Only this entry point enforces the non-empty precondition; the stages
      themselves degrade to zero-valued results on empty input.
    - No internal suspension points. Callers needing a deadline wrap the
      whole call.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime

import numpy as np

from otherside.core.anomaly.events import detect_events, merge_events
from otherside.core.anomaly.filters import (
    apply_filter_chain,
    default_filter_chain,
    describe_chain,
)
from otherside.core.anomaly.scoring import grade_quality, score_anomaly
from otherside.core.anomaly.spectral import analyze, rms, transform
from otherside.core.anomaly.types import FilterSpec, ProcessingMetadata, ProcessingResult
from otherside.core.config import DEFAULT_AUDIO_CONFIG, AudioConfig
from otherside.core.errors import EmptyInputError, InvalidConfigError, NonFiniteInputError

logger = logging.getLogger(__name__)


def _to_mono(x: np.ndarray) -> np.ndarray:
    """Mix a (C, N) multi-channel buffer down to (N,) by averaging channels.

    Raises:
        ValueError: If the buffer has more than two dimensions.
    """
    if x.ndim <= 1:
        return np.atleast_1d(x)
    if x.ndim > 2:
        raise ValueError(f"expected shape (N,) or (C, N), got {x.shape}")
    return np.mean(x, axis=0)


def _as_samples(samples: Sequence[float] | np.ndarray | None) -> np.ndarray:
    """Validate and copy the input buffer into a 1-D float64 array."""
    if samples is None:
        raise EmptyInputError()
    x = np.array(samples, dtype=np.float64)
    if x.size == 0:
        raise EmptyInputError()
    x = _to_mono(x)
    bad = int(np.count_nonzero(~np.isfinite(x)))
    if bad:
        raise NonFiniteInputError(bad)
    return x


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def process_audio(
    samples: Sequence[float] | np.ndarray | None,
    config: AudioConfig = DEFAULT_AUDIO_CONFIG,
    *,
    filter_chain: Sequence[FilterSpec] | None = None,
) -> ProcessingResult:
    """Run the full anomaly analysis pipeline over one buffer.

    Steps:
        1. Validate and copy the buffer (the caller's data is never mutated).
        2. Apply the noise-reduction filter chain.
        3. Compute the fixed-size spectrum and spectral summary.
        4. Detect candidate events and merge them.
        5. Score anomaly strength and grade quality.

    Args:
        samples:      Decoded PCM samples (float amplitudes, typically [-1, 1]),
                      shape (N,) or (C, N); multi-channel input is averaged
                      to mono.
        config:       Sample rate, bit depth and noise threshold.
        filter_chain: Override of the default filter chain
                      (high-pass 80 Hz + 2 Hz notches at 50/60/120/240 Hz).

    Returns:
        ProcessingResult for this buffer.

    Raises:
        EmptyInputError:     samples is None or empty.
        NonFiniteInputError: samples contains NaN or ±Inf.
        InvalidConfigError:  config.sample_rate <= 0, or a filter stage is
                             unstable at config.sample_rate.
        ValueError:          samples has more than two dimensions.
    """
    # Duck-typed configs skip AudioConfig.__post_init__.
    if config.sample_rate <= 0:
        raise InvalidConfigError("sample_rate", config.sample_rate, "must be positive")

    started = time.perf_counter()
    processed_at = datetime.now(UTC)
    x = _as_samples(samples)
    sr = config.sample_rate
    chain = tuple(default_filter_chain() if filter_chain is None else filter_chain)

    filtered = apply_filter_chain(x, sr, chain)
    spectrum = transform(filtered)
    summary = analyze(filtered, sr, config.noise_threshold, spectrum=spectrum)

    candidates = detect_events(filtered, sr, config.noise_threshold)
    events = merge_events(candidates)

    anomaly_strength = score_anomaly(spectrum, sr)
    noise_level = rms(filtered)
    quality = grade_quality(anomaly_strength, noise_level)

    elapsed = time.perf_counter() - started
    logger.debug(
        "process_audio: %d samples @ %d Hz, %d candidates -> %d events, "
        "strength=%.3f noise=%.4f (%.1f ms)",
        x.size,
        sr,
        len(candidates),
        len(events),
        anomaly_strength,
        noise_level,
        elapsed * 1000.0,
    )

    return ProcessingResult(
        waveform=_frozen(filtered),
        spectrum=_frozen(spectrum),
        spectral_analysis=summary,
        events=tuple(events),
        anomaly_strength=anomaly_strength,
        noise_level=noise_level,
        quality=quality,
        metadata=ProcessingMetadata(
            sample_rate=sr,
            bit_depth=config.bit_depth,
            duration=x.size / sr,
            filter_settings=describe_chain(chain),
            processed_at=processed_at,
            processing_time_sec=elapsed,
        ),
    )
