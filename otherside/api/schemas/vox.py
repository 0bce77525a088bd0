"""
otherside/api/schemas/vox.py — Pydantic schemas for VOX generation.

The request keeps the wire name ``temperature_fluctuation`` used by field
devices; it maps onto TriggerVector.temperature.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from otherside.core.config import DEFAULT_VOX_CONFIG, VoxConfig
from otherside.core.vox.generator import VoxResult
from otherside.core.vox.triggers import TriggerVector


class VoxTriggerRequest(BaseModel):
    """Environmental readings plus generation settings."""

    emf_anomaly: float = Field(0.0, allow_inf_nan=False, description="EMF anomaly reading")
    audio_anomaly: float = Field(
        0.0, allow_inf_nan=False, description="Audio anomaly strength, e.g. anomaly_strength"
    )
    temperature_fluctuation: float = Field(
        0.0, allow_inf_nan=False, description="Temperature fluctuation reading"
    )
    interference: float = Field(
        0.0, allow_inf_nan=False, description="Radio/electronic interference reading"
    )
    language_pack: str = Field(
        DEFAULT_VOX_CONFIG.default_language, min_length=1, description="Word pack name"
    )
    phonetic_bank_size: int = Field(
        DEFAULT_VOX_CONFIG.symbol_bank_size, ge=0, description="Requested symbol bank size"
    )
    trigger_threshold: float = Field(
        DEFAULT_VOX_CONFIG.trigger_threshold,
        ge=0.0,
        le=1.0,
        description="Minimum combined strength that produces output",
    )

    def to_triggers(self) -> TriggerVector:
        return TriggerVector(
            emf_anomaly=self.emf_anomaly,
            audio_anomaly=self.audio_anomaly,
            temperature=self.temperature_fluctuation,
            interference=self.interference,
        )

    def to_config(self) -> VoxConfig:
        return VoxConfig(
            default_language=self.language_pack,
            symbol_bank_size=self.phonetic_bank_size,
            trigger_threshold=self.trigger_threshold,
        )


class VoxResultOut(BaseModel):
    """JSON shape of a VoxResult."""

    generated_text: str
    bank_name: str
    language_pack: str
    trigger_strength: float = Field(..., ge=0.0, le=1.0)
    modulation_type: str
    generated_at: datetime
    frequency_data: list[float] = Field(default_factory=list, description="1 s FM tone samples")

    @classmethod
    def from_result(cls, result: VoxResult, *, include_waveform: bool = True) -> VoxResultOut:
        return cls(
            generated_text=result.generated_text,
            bank_name=result.bank_name,
            language_pack=result.language_pack,
            trigger_strength=result.trigger_strength,
            modulation_type=result.modulation_type,
            generated_at=result.generated_at,
            frequency_data=result.frequency_waveform.tolist() if include_waveform else [],
        )
