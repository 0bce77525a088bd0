"""
otherside/api/schemas — Pydantic models at the JSON boundary.

Public API:
    Anomaly:  AudioAnalyzeRequest, ProcessingResultOut, AnomalyEventOut,
              FrequencyPeakOut, SpectralSummaryOut, ProcessingMetadataOut,
              FilterSettingsOut
    VOX:      VoxTriggerRequest, VoxResultOut
"""

from otherside.api.schemas.anomaly import (
    AnomalyEventOut,
    AudioAnalyzeRequest,
    FilterSettingsOut,
    FrequencyPeakOut,
    ProcessingMetadataOut,
    ProcessingResultOut,
    SpectralSummaryOut,
)
from otherside.api.schemas.vox import VoxResultOut, VoxTriggerRequest

__all__ = [
    "AudioAnalyzeRequest",
    "ProcessingResultOut",
    "AnomalyEventOut",
    "FrequencyPeakOut",
    "SpectralSummaryOut",
    "ProcessingMetadataOut",
    "FilterSettingsOut",
    "VoxTriggerRequest",
    "VoxResultOut",
]
