"""
otherside/api/schemas/anomaly.py — Pydantic schemas for anomaly analysis.

AudioAnalyzeRequest validates an incoming buffer + config; the *Out models
are the JSON shape of a ProcessingResult. All fields use snake_case.
The complex spectrum is exposed as per-bin magnitudes.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from otherside.core.anomaly.types import (
    AnomalyEvent,
    FilterSettings,
    FrequencyPeak,
    ProcessingMetadata,
    ProcessingResult,
    SpectralSummary,
)
from otherside.core.config import AudioConfig

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class AudioAnalyzeRequest(BaseModel):
    """Decoded samples plus the numeric configuration to analyse them with."""

    samples: list[float] = Field(..., min_length=1, description="PCM amplitudes, typically [-1, 1]")
    sample_rate: int = Field(44100, gt=0, description="Sample rate in Hz")
    bit_depth: int = Field(16, gt=0, description="Bit depth of the source (informational)")
    noise_threshold: float = Field(0.1, gt=0.0, description="Base noise threshold")

    @field_validator("samples")
    @classmethod
    def samples_finite(cls, v: list[float]) -> list[float]:
        bad = [i for i, s in enumerate(v) if not math.isfinite(s)]
        if bad:
            raise ValueError(
                f"samples contains {len(bad)} non-finite value(s), first at index {bad[0]}"
            )
        return v

    def to_config(self) -> AudioConfig:
        """Build the AudioConfig for process_audio()."""
        return AudioConfig(
            sample_rate=self.sample_rate,
            bit_depth=self.bit_depth,
            noise_threshold=self.noise_threshold,
        )


# ---------------------------------------------------------------------------
# Response sub-schemas
# ---------------------------------------------------------------------------


class FrequencyPeakOut(BaseModel):
    """A dominant spectral peak."""

    frequency: float = Field(..., ge=0.0)
    magnitude: float = Field(..., ge=0.0)
    quality: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_peak(cls, peak: FrequencyPeak) -> FrequencyPeakOut:
        return cls(frequency=peak.frequency, magnitude=peak.magnitude, quality=peak.quality)


class SpectralSummaryOut(BaseModel):
    """Scalar spectral features."""

    rms_energy: float = Field(..., ge=0.0)
    zero_crossing_rate: float = Field(..., ge=0.0, le=1.0)
    spectral_centroid: float
    spectral_rolloff: float
    dominant_frequencies: list[FrequencyPeakOut]

    @classmethod
    def from_summary(cls, summary: SpectralSummary) -> SpectralSummaryOut:
        return cls(
            rms_energy=summary.rms_energy,
            zero_crossing_rate=summary.zero_crossing_rate,
            spectral_centroid=summary.spectral_centroid,
            spectral_rolloff=summary.spectral_rolloff,
            dominant_frequencies=[
                FrequencyPeakOut.from_peak(p) for p in summary.dominant_frequencies
            ],
        )


class AnomalyEventOut(BaseModel):
    """A merged EVP event."""

    start_time: float = Field(..., ge=0.0)
    end_time: float = Field(..., gt=0.0)
    frequency: float = Field(..., ge=0.0)
    amplitude: float = Field(..., ge=0.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    description: str

    @classmethod
    def from_event(cls, event: AnomalyEvent) -> AnomalyEventOut:
        return cls(
            start_time=event.start_time,
            end_time=event.end_time,
            frequency=event.frequency,
            amplitude=event.amplitude,
            confidence=event.confidence,
            description=event.description,
        )


class FilterSettingsOut(BaseModel):
    """Filter chain applied before analysis."""

    high_pass_cutoff: float
    low_pass_cutoff: float
    notch_filters: list[float]
    notch_bandwidth: float
    noise_reduction: bool
    dynamic_range: bool

    @classmethod
    def from_settings(cls, settings: FilterSettings) -> FilterSettingsOut:
        return cls(
            high_pass_cutoff=settings.high_pass_cutoff,
            low_pass_cutoff=settings.low_pass_cutoff,
            notch_filters=list(settings.notch_filters),
            notch_bandwidth=settings.notch_bandwidth,
            noise_reduction=settings.noise_reduction,
            dynamic_range=settings.dynamic_range,
        )


class ProcessingMetadataOut(BaseModel):
    """Run context."""

    sample_rate: int = Field(..., gt=0)
    bit_depth: int = Field(..., gt=0)
    duration: float = Field(..., ge=0.0)
    processed_at: datetime
    processing_time_sec: float = Field(..., ge=0.0)
    filter_settings: FilterSettingsOut

    @classmethod
    def from_metadata(cls, metadata: ProcessingMetadata) -> ProcessingMetadataOut:
        return cls(
            sample_rate=metadata.sample_rate,
            bit_depth=metadata.bit_depth,
            duration=metadata.duration,
            processed_at=metadata.processed_at,
            processing_time_sec=metadata.processing_time_sec,
            filter_settings=FilterSettingsOut.from_settings(metadata.filter_settings),
        )


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class ProcessingResultOut(BaseModel):
    """JSON shape of a ProcessingResult."""

    waveform_data: list[float] = Field(default_factory=list, description="Filtered samples")
    frequency_magnitudes: list[float] = Field(
        default_factory=list, description="|FFT| per bin of the fixed-size spectrum"
    )
    spectral_analysis: SpectralSummaryOut
    evp_events: list[AnomalyEventOut]
    anomaly_strength: float = Field(..., ge=0.0, le=1.0)
    noise_level: float = Field(..., ge=0.0)
    quality: str
    metadata: ProcessingMetadataOut

    @classmethod
    def from_result(
        cls, result: ProcessingResult, *, include_waveform: bool = True
    ) -> ProcessingResultOut:
        """Convert a core ProcessingResult.

        Args:
            result:           Output of process_audio().
            include_waveform: Drop the (large) sample arrays when False.
        """
        return cls(
            waveform_data=result.waveform.tolist() if include_waveform else [],
            frequency_magnitudes=abs(result.spectrum).tolist() if include_waveform else [],
            spectral_analysis=SpectralSummaryOut.from_summary(result.spectral_analysis),
            evp_events=[AnomalyEventOut.from_event(e) for e in result.events],
            anomaly_strength=result.anomaly_strength,
            noise_level=result.noise_level,
            quality=result.quality.value,
            metadata=ProcessingMetadataOut.from_metadata(result.metadata),
        )
