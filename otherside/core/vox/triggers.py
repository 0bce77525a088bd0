"""
otherside/core/vox/triggers.py — Environmental trigger vector and strength.

The trigger vector is a fixed-field record: the four known signals are
attributes, not dictionary keys. Free-form mappings coming from the outside
are converted exactly once, in TriggerVector.from_mapping(), which is the
only place unknown names are dropped.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from otherside.core.errors import NonFiniteInputError

logger = logging.getLogger(__name__)

TRIGGER_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "emf_anomaly": 0.3,
        "audio_anomaly": 0.4,
        "temperature": 0.1,
        "interference": 0.2,
    }
)
"""Weight of each named signal in the combined trigger strength."""


@dataclass(frozen=True)
class TriggerVector:
    """Weighted environmental signals feeding VOX generation.

    Values are raw sensor-derived readings, typically in [0, 1]; the
    combined strength is clipped, individual fields are not.

    Raises:
        NonFiniteInputError: If any reading is NaN or ±Inf.
    """

    emf_anomaly: float = 0.0
    """Electromagnetic field anomaly reading."""

    audio_anomaly: float = 0.0
    """Audio anomaly strength, e.g. ProcessingResult.anomaly_strength."""

    temperature: float = 0.0
    """Temperature fluctuation reading."""

    interference: float = 0.0
    """Radio/electronic interference reading."""

    def __post_init__(self) -> None:
        bad = sum(1 for value in self.as_dict().values() if not math.isfinite(value))
        if bad:
            raise NonFiniteInputError(bad, source="trigger vector")

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> TriggerVector:
        """Build a TriggerVector from a name → value mapping.

        Missing names default to 0.0. Unknown names are ignored (and logged
        at DEBUG level).
        """
        unknown = sorted(set(values) - set(TRIGGER_WEIGHTS))
        if unknown:
            logger.debug("TriggerVector: ignoring unknown trigger names %s", unknown)
        return cls(**{name: float(values[name]) for name in TRIGGER_WEIGHTS if name in values})

    def as_dict(self) -> dict[str, float]:
        """Return values as an ordered dict keyed by trigger name."""
        return {
            "emf_anomaly": self.emf_anomaly,
            "audio_anomaly": self.audio_anomaly,
            "temperature": self.temperature,
            "interference": self.interference,
        }

    @property
    def strength(self) -> float:
        """Weighted sum of the signals, clipped to [0.0, 1.0]."""
        total = (
            self.emf_anomaly * TRIGGER_WEIGHTS["emf_anomaly"]
            + self.audio_anomaly * TRIGGER_WEIGHTS["audio_anomaly"]
            + self.temperature * TRIGGER_WEIGHTS["temperature"]
            + self.interference * TRIGGER_WEIGHTS["interference"]
        )
        return min(max(total, 0.0), 1.0)
