"""
tests/test_anomaly_types.py — Tests for otherside/core/anomaly/types.py and
otherside/core/errors.py.
"""

from __future__ import annotations

from datetime import UTC, datetime

import numpy as np
import pytest

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
from otherside.core.errors import (
    BankNotFoundError,
    EmptyInputError,
    InvalidConfigError,
    NonFiniteInputError,
    OthersideError,
)


def _event(start: float = 0.0, end: float = 1.0) -> AnomalyEvent:
    return AnomalyEvent(
        start_time=start,
        end_time=end,
        frequency=440.0,
        amplitude=2.0,
        confidence=0.8,
        description="test",
    )


def _settings() -> FilterSettings:
    return FilterSettings(
        high_pass_cutoff=80.0,
        low_pass_cutoff=0.0,
        notch_filters=HUM_FREQUENCIES,
        notch_bandwidth=2.0,
    )


def _result(waveform: np.ndarray) -> ProcessingResult:
    return ProcessingResult(
        waveform=waveform,
        spectrum=np.zeros(FFT_SIZE, dtype=complex),
        spectral_analysis=SpectralSummary(0.0, 0.0, 0.0, 0.0),
        events=(_event(),),
        anomaly_strength=0.5,
        noise_level=0.1,
        quality=EVPQuality.FAIR,
        metadata=ProcessingMetadata(
            sample_rate=44100,
            bit_depth=16,
            duration=1.0,
            filter_settings=_settings(),
            processed_at=datetime(2024, 1, 1, tzinfo=UTC),
        ),
    )


class TestConstants:
    def test_values(self):
        assert FFT_SIZE == 1024
        assert VOICE_BAND == (85.0, 2000.0)
        assert HUM_FREQUENCIES == (50.0, 60.0, 120.0, 240.0)


class TestAnomalyEvent:
    def test_duration(self):
        assert _event(0.5, 2.0).duration == pytest.approx(1.5)

    @pytest.mark.parametrize("end", [1.0, 0.5])
    def test_end_not_after_start_raises(self, end: float):
        with pytest.raises(ValueError, match="must be greater than start_time"):
            _event(1.0, end)

    def test_frozen(self):
        e = _event()
        with pytest.raises((AttributeError, TypeError)):
            e.frequency = 100.0  # type: ignore[misc]

    def test_hashable(self):
        _ = {_event(): "ok"}


class TestValueTypes:
    def test_filter_spec_default_bandwidth(self):
        assert FilterSpec("high_pass", 80.0).bandwidth == 0.0

    @pytest.mark.parametrize("frequency", [0.0, -3000.0, float("nan"), float("inf")])
    def test_filter_spec_rejects_bad_frequency(self, frequency: float):
        with pytest.raises(InvalidConfigError, match="frequency"):
            FilterSpec("high_pass", frequency)

    @pytest.mark.parametrize("bandwidth", [0.0, -1.0, float("nan")])
    def test_notch_spec_rejects_bad_bandwidth(self, bandwidth: float):
        with pytest.raises(InvalidConfigError, match="bandwidth"):
            FilterSpec("notch", 60.0, bandwidth)

    def test_filter_settings_defaults(self):
        settings = _settings()
        assert settings.noise_reduction is True
        assert settings.dynamic_range is False

    def test_frequency_peak_frozen(self):
        p = FrequencyPeak(frequency=440.0, magnitude=3.0, quality=0.5)
        with pytest.raises((AttributeError, TypeError)):
            p.magnitude = 0.0  # type: ignore[misc]

    def test_summary_default_peaks(self):
        assert SpectralSummary(0.1, 0.2, 300.0, 900.0).dominant_frequencies == ()

    def test_quality_is_str_enum(self):
        assert EVPQuality("good") is EVPQuality.GOOD
        assert [q.value for q in EVPQuality] == ["excellent", "good", "fair", "poor"]


class TestProcessingResult:
    def test_arrays_excluded_from_equality(self):
        assert _result(np.zeros(4)) == _result(np.ones(8))

    def test_hashable(self):
        _ = {_result(np.zeros(4)): "ok"}

    def test_repr_omits_arrays(self):
        assert "waveform" not in repr(_result(np.zeros(4)))

    def test_event_count(self):
        assert _result(np.zeros(4)).event_count == 1

    def test_default_processing_time(self):
        assert _result(np.zeros(4)).metadata.processing_time_sec == 0.0


class TestErrors:
    def test_empty_input_message(self):
        err = EmptyInputError()
        assert isinstance(err, ValueError)
        assert isinstance(err, OthersideError)
        assert "empty audio data" in str(err)

    def test_non_finite_count(self):
        err = NonFiniteInputError(3)
        assert err.count == 3
        assert "3 non-finite" in str(err)

    def test_invalid_config_message(self):
        err = InvalidConfigError("bit_depth", 0, "must be positive")
        assert str(err) == "bit_depth must be positive, got 0"

    def test_bank_not_found(self):
        err = BankNotFoundError("klingon", ("english", "minimal"))
        assert isinstance(err, KeyError)
        assert isinstance(err, OthersideError)
        assert err.bank_name == "klingon"
        assert str(err) == "symbol bank 'klingon' not found (registered: ['english', 'minimal'])"
