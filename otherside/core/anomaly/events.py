"""
otherside/core/anomaly/events.py — Windowed voice-band event detection and merging.

Detection scans the filtered buffer with ~50 ms Hann-windowed frames at 50%
overlap. Every voice-band bin (85–2000 Hz) whose magnitude clears the noise
gate becomes one candidate event spanning its frame. Merging then folds
candidates that overlap in time and sit within 100 Hz of each other.

Design:
    - Pure: numpy array + sr → list[AnomalyEvent].
    - The frame transform is an rfft of the frame itself (frame length, not
      the fixed whole-buffer FFT size), so bin spacing is sr / window.
    - A buffer shorter than one frame has no frames and yields no events.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from otherside.core.anomaly.types import VOICE_BAND, AnomalyEvent

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_WINDOW: int = 256  # samples
WINDOW_SEC: float = 0.05  # ~50 ms frames
GATE_FACTOR: float = 15.0  # magnitude must exceed noise_threshold × 15
CONFIDENCE_SCALE: float = 25.0  # confidence = magnitude / (noise_threshold × 25)
MIN_CONFIDENCE: float = 0.4  # strictly greater than
MERGE_FREQ_TOLERANCE: float = 100.0  # Hz, strictly less than


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------


def window_size(sample_rate: float) -> int:
    """Frame length in samples: max(256, round(0.05 · sample_rate))."""
    return max(MIN_WINDOW, int(round(WINDOW_SEC * sample_rate)))


def _describe(frequency: float, start: float, end: float) -> str:
    return f"Potential EVP at {frequency:.1f} Hz ({start:.3f}s - {end:.3f}s)"


def _describe_merged(frequency: float, start: float, end: float) -> str:
    return f"Merged EVP event at {frequency:.1f} Hz ({start:.3f}s - {end:.3f}s)"


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def detect_events(
    filtered: np.ndarray,
    sample_rate: float,
    noise_threshold: float,
) -> list[AnomalyEvent]:
    """Scan a filtered buffer for voice-band anomalies.

    For each frame (hop = window // 2) the Hann-windowed rfft is computed;
    bins with frequency in [85, 2000] Hz and magnitude > 15·noise_threshold
    are candidates, with confidence = min(magnitude / (25·noise_threshold), 1).
    Only candidates with confidence > 0.4 are kept.

    Args:
        filtered:        Filtered 1-D sample array.
        sample_rate:     Sample rate in Hz (> 0).
        noise_threshold: Base noise threshold (> 0).

    Returns:
        Unmerged candidate events in frame order, and by ascending frequency
        within a frame.
    """
    y = np.asarray(filtered, dtype=np.float64)
    win = window_size(sample_rate)
    if y.size < win:
        return []

    hop = win // 2
    taper = np.hanning(win)
    freqs = np.fft.rfftfreq(win, d=1.0 / sample_rate)
    band_lo, band_hi = VOICE_BAND
    in_band = np.flatnonzero((freqs >= band_lo) & (freqs <= band_hi))
    if in_band.size == 0:
        return []

    gate = noise_threshold * GATE_FACTOR
    scale = noise_threshold * CONFIDENCE_SCALE

    events: list[AnomalyEvent] = []
    for start in range(0, y.size - win + 1, hop):
        mags = np.abs(np.fft.rfft(y[start : start + win] * taper))
        band_mags = mags[in_band]
        hits = np.flatnonzero(band_mags > gate)
        if hits.size == 0:
            continue

        t_start = start / sample_rate
        t_end = (start + win) / sample_rate
        for h in hits:
            magnitude = float(band_mags[h])
            confidence = min(magnitude / scale, 1.0)
            if confidence <= MIN_CONFIDENCE:
                continue
            frequency = float(freqs[in_band[h]])
            events.append(
                AnomalyEvent(
                    start_time=t_start,
                    end_time=t_end,
                    frequency=frequency,
                    amplitude=magnitude,
                    confidence=confidence,
                    description=_describe(frequency, t_start, t_end),
                )
            )
    return events


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def merge_events(events: Iterable[AnomalyEvent]) -> list[AnomalyEvent]:
    """Coalesce temporally overlapping, spectrally adjacent events.

    Candidates are stably sorted by start time and walked once. A candidate
    merges into the running accumulator iff it starts no later than the
    accumulator ends AND its frequency is within 100 Hz (exclusive) of the
    accumulator's. A merge keeps the accumulator's start and frequency and
    takes the max of end_time, confidence and amplitude. Anything else closes
    the accumulator and opens a new one.

    Returns:
        Merged events sorted by start time. Zero or one input event is
        returned unchanged.
    """
    ordered = sorted(events, key=lambda e: e.start_time)
    if len(ordered) <= 1:
        return ordered

    merged: list[AnomalyEvent] = []
    current = ordered[0]
    for candidate in ordered[1:]:
        if (
            candidate.start_time <= current.end_time
            and abs(candidate.frequency - current.frequency) < MERGE_FREQ_TOLERANCE
        ):
            end_time = max(current.end_time, candidate.end_time)
            current = AnomalyEvent(
                start_time=current.start_time,
                end_time=end_time,
                frequency=current.frequency,
                amplitude=max(current.amplitude, candidate.amplitude),
                confidence=max(current.confidence, candidate.confidence),
                description=_describe_merged(current.frequency, current.start_time, end_time),
            )
        else:
            merged.append(current)
            current = candidate
    merged.append(current)
    return merged
