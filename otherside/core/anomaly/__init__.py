"""
otherside/core/anomaly — Voice-band anomaly (EVP) analysis engine.

All functions are pure: numpy arrays (samples, sr) in → frozen dataclasses out.

Architecture note:
    scipy and numpy are pure computation libraries (no I/O, no side effects).
    scipy.signal runs the filter recursions; numpy.fft the transforms.

Public API:
    Types:     AnomalyEvent, FrequencyPeak, SpectralSummary, FilterSpec,
               FilterSettings, ProcessingMetadata, ProcessingResult, EVPQuality
    Filters:   apply_noise_reduction, high_pass, notch
    Spectral:  transform, analyze
    Events:    detect_events, merge_events
    Scoring:   score_anomaly, grade_quality
    Pipeline:  process_audio
"""

from otherside.core.anomaly.events import detect_events, merge_events
from otherside.core.anomaly.filters import apply_noise_reduction, high_pass, notch
from otherside.core.anomaly.pipeline import process_audio
from otherside.core.anomaly.scoring import grade_quality, score_anomaly
from otherside.core.anomaly.spectral import analyze, transform
from otherside.core.anomaly.types import (
    FFT_SIZE,
    HUM_FREQUENCIES,
    VOICE_BAND,
    AnomalyEvent,
    EVPQuality,
    FilterSettings,
    FilterSpec,
    FrequencyPeak,
    ProcessingMetadata,
    ProcessingResult,
    SpectralSummary,
)

__all__ = [
    # Types
    "AnomalyEvent",
    "EVPQuality",
    "FilterSettings",
    "FilterSpec",
    "FrequencyPeak",
    "ProcessingMetadata",
    "ProcessingResult",
    "SpectralSummary",
    "FFT_SIZE",
    "HUM_FREQUENCIES",
    "VOICE_BAND",
    # Stages
    "apply_noise_reduction",
    "high_pass",
    "notch",
    "transform",
    "analyze",
    "detect_events",
    "merge_events",
    "score_anomaly",
    "grade_quality",
    # Pipeline
    "process_audio",
]
