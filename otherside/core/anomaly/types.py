"""
otherside/core/anomaly/types.py — Frozen data types for anomaly analysis.

All types are frozen dataclasses: immutable value objects that are safe
to hand to the storage/serialization layer and to share between threads.

Design:
    - No I/O, no side effects, no state.
    - Sequences of records are tuples so the records stay hashable.
    - Sample data (waveform, spectrum) is held as numpy arrays with the
      WRITEABLE flag cleared by the pipeline; those two fields are excluded
      from equality and hashing.
    - Invariants are documented here and enforced at the creation sites
      (spectral.py, events.py, pipeline.py), except FilterSpec and
      AnomalyEvent which check their own fields.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal

import numpy as np

from otherside.core.errors import InvalidConfigError

# ---------------------------------------------------------------------------
# Constants shared across the anomaly modules
# ---------------------------------------------------------------------------

FFT_SIZE: int = 1024
"""Fixed transform length for the whole-buffer spectrum."""

VOICE_BAND: tuple[float, float] = (85.0, 2000.0)
"""Human voice band in Hz (inclusive on both ends)."""

HUM_FREQUENCIES: tuple[float, ...] = (50.0, 60.0, 120.0, 240.0)
"""Mains hum fundamentals and harmonics removed by the notch bank."""

FilterKind = Literal["high_pass", "notch"]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterSpec:
    """Description of a single filter stage.

    Filters own no cross-call state: a FilterSpec is pure configuration and
    each application allocates its own recursion state.

    Invariants:
        frequency > 0
        bandwidth > 0 when kind == "notch"

    The upper bandwidth limit depends on the sample rate and is checked by
    filters.notch() at application time.

    Raises:
        InvalidConfigError: If frequency or a notch bandwidth is not a
                            finite positive number.
    """

    kind: FilterKind
    """'high_pass' (first-order RC) or 'notch' (biquad)."""

    frequency: float
    """Cutoff (high-pass) or centre (notch) frequency in Hz."""

    bandwidth: float = 0.0
    """Notch bandwidth in Hz. Ignored for high-pass."""

    def __post_init__(self) -> None:
        if not (math.isfinite(self.frequency) and self.frequency > 0.0):
            raise InvalidConfigError("frequency", self.frequency, "must be a finite positive Hz")
        if self.kind == "notch" and not (math.isfinite(self.bandwidth) and self.bandwidth > 0.0):
            raise InvalidConfigError("bandwidth", self.bandwidth, "must be a finite positive Hz")


@dataclass(frozen=True)
class FilterSettings:
    """Filter chain actually applied to a buffer, reported in metadata."""

    high_pass_cutoff: float
    """High-pass cutoff in Hz."""

    low_pass_cutoff: float
    """Low-pass cutoff in Hz. 0.0 means no low-pass stage was applied."""

    notch_filters: tuple[float, ...]
    """Notch centre frequencies in Hz, in application order."""

    notch_bandwidth: float
    """Bandwidth shared by all notch stages, in Hz."""

    noise_reduction: bool = True
    """True when the filter chain ran."""

    dynamic_range: bool = False
    """Dynamic range compression. Not part of the chain; always False."""


# ---------------------------------------------------------------------------
# Spectral analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FrequencyPeak:
    """A local maximum in the magnitude spectrum.

    Invariants:
        frequency >= 0.0
        magnitude > 0.0
        0.0 <= quality <= 1.0
    """

    frequency: float
    """Bin centre frequency in Hz."""

    magnitude: float
    """Linear FFT magnitude at the bin."""

    quality: float
    """Peak sharpness: magnitude / (sum of neighbour magnitudes), capped at 1."""


@dataclass(frozen=True)
class SpectralSummary:
    """Scalar spectral features of a buffer.

    Invariants:
        rms_energy >= 0.0
        0.0 <= zero_crossing_rate <= 1.0
        len(dominant_frequencies) <= 5, sorted by magnitude descending
    """

    rms_energy: float
    """Root-mean-square amplitude of the time-domain samples."""

    zero_crossing_rate: float
    """Fraction of adjacent sample pairs whose sign differs."""

    spectral_centroid: float
    """Magnitude-weighted mean frequency in Hz (DC excluded)."""

    spectral_rolloff: float
    """Frequency in Hz below which 95% of the half-spectrum magnitude lies."""

    dominant_frequencies: tuple[FrequencyPeak, ...] = field(default_factory=tuple)
    """Up to five strongest peaks, loudest first."""


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnomalyEvent:
    """A voice-band anomaly (EVP candidate) located in time and frequency.

    Invariants:
        end_time > start_time
        0.0 <= confidence <= 1.0
        0.0 <= frequency <= sample_rate / 2

    Raises:
        ValueError: If end_time <= start_time.
    """

    start_time: float
    """Start of the event in seconds from the beginning of the buffer."""

    end_time: float
    """End of the event in seconds. Always > start_time."""

    frequency: float
    """Frequency of the anomalous component in Hz."""

    amplitude: float
    """Linear magnitude of the component in its analysis window."""

    confidence: float
    """Detection confidence in [0.0, 1.0]."""

    description: str
    """Human-readable summary embedding frequency and time bounds."""

    def __post_init__(self) -> None:
        if not self.end_time > self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) must be greater than start_time ({self.start_time})"
            )

    @property
    def duration(self) -> float:
        """Event length in seconds."""
        return self.end_time - self.start_time


# ---------------------------------------------------------------------------
# Quality grading
# ---------------------------------------------------------------------------


class EVPQuality(str, Enum):
    """Coarse quality rating derived from anomaly strength and noise level."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProcessingMetadata:
    """Context of a single pipeline run."""

    sample_rate: int
    """Sample rate in Hz."""

    bit_depth: int
    """Bit depth of the source recording (informational)."""

    duration: float
    """Buffer length in seconds: len(samples) / sample_rate."""

    filter_settings: FilterSettings
    """Filter chain applied before analysis."""

    processed_at: datetime
    """UTC timestamp at which processing started."""

    processing_time_sec: float = 0.0
    """Wall-clock time spent in the pipeline, in seconds."""


@dataclass(frozen=True)
class ProcessingResult:
    """Complete output of process_audio() for one buffer.

    Invariants:
        len(waveform) == number of input samples
        len(spectrum) == FFT_SIZE
        0.0 <= anomaly_strength <= 1.0
        noise_level >= 0.0
        events sorted by start_time
    """

    waveform: np.ndarray = field(compare=False, repr=False)
    """Filtered time-domain samples (read-only array)."""

    spectrum: np.ndarray = field(compare=False, repr=False)
    """Complex FFT_SIZE-point spectrum of the filtered samples (read-only)."""

    spectral_analysis: SpectralSummary
    """Scalar features and dominant peaks."""

    events: tuple[AnomalyEvent, ...]
    """Merged anomaly events, ordered by start time."""

    anomaly_strength: float
    """Share of half-spectrum magnitude inside the voice band, in [0, 1]."""

    noise_level: float
    """RMS of the filtered samples."""

    quality: EVPQuality
    """Quality rating from anomaly_strength and noise_level."""

    metadata: ProcessingMetadata
    """Sample rate, duration, filter settings and timing."""

    @property
    def event_count(self) -> int:
        """Number of merged events."""
        return len(self.events)
