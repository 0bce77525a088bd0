"""
tests/test_filters.py — Tests for otherside/core/anomaly/filters.py.

Signal conventions:
    - Mono: shape (N,), dtype float64, t = i / SR
    - Attenuation is measured on the second half of the buffer, after the
      filter transients have settled.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from otherside.core.anomaly.filters import (
    HIGH_PASS_CUTOFF,
    NOTCH_BANDWIDTH,
    apply_filter,
    apply_filter_chain,
    apply_noise_reduction,
    default_filter_chain,
    describe_chain,
    high_pass,
    high_pass_alpha,
    notch,
    notch_coefficients,
)
from otherside.core.anomaly.types import HUM_FREQUENCIES, FilterSpec
from otherside.core.errors import InvalidConfigError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SR = 44100


def _sine(freq_hz: float, amplitude: float = 0.5, seconds: float = 1.0, sr: int = SR) -> np.ndarray:
    n = int(round(seconds * sr))
    t = np.arange(n) / sr
    return amplitude * np.sin(2.0 * np.pi * freq_hz * t)


def _rms(x: np.ndarray) -> float:
    return float(np.sqrt(np.mean(np.asarray(x) ** 2)))


def _settled_ratio(out: np.ndarray, inp: np.ndarray) -> float:
    half = len(inp) // 2
    return _rms(out[half:]) / _rms(inp[half:])


# ---------------------------------------------------------------------------
# 1. High-pass
# ---------------------------------------------------------------------------


class TestHighPass:
    def test_alpha_formula(self):
        rc = 1.0 / (2.0 * math.pi * 80.0)
        dt = 1.0 / SR
        assert high_pass_alpha(SR, 80.0) == pytest.approx(rc / (rc + dt))

    def test_empty_in_empty_out(self):
        out = high_pass(np.array([]), SR)
        assert out.shape == (0,)

    def test_single_sample_passes_through(self):
        out = high_pass(np.array([0.7]), SR)
        assert out.tolist() == [0.7]

    def test_first_sample_unchanged(self):
        x = np.array([0.25, -0.5, 0.75, 0.1])
        assert high_pass(x, SR)[0] == pytest.approx(0.25)

    def test_matches_recurrence(self):
        rng = np.random.default_rng(7)
        x = rng.uniform(-1.0, 1.0, 64)
        alpha = high_pass_alpha(SR, HIGH_PASS_CUTOFF)
        expected = np.empty_like(x)
        expected[0] = x[0]
        for i in range(1, len(x)):
            expected[i] = alpha * (expected[i - 1] + x[i] - x[i - 1])
        np.testing.assert_allclose(high_pass(x, SR), expected, rtol=1e-12, atol=1e-12)

    def test_length_preserved(self):
        x = _sine(1000.0, seconds=0.1)
        assert len(high_pass(x, SR)) == len(x)

    def test_input_not_mutated(self):
        x = _sine(1000.0, seconds=0.1)
        before = x.copy()
        high_pass(x, SR)
        np.testing.assert_array_equal(x, before)

    def test_dc_decays_to_zero(self):
        out = high_pass(np.full(SR // 10, 0.5), SR)
        assert out[0] == pytest.approx(0.5)
        assert abs(out[-1]) < 1e-6

    def test_voice_band_tone_passes(self):
        x = _sine(1000.0)
        assert _settled_ratio(high_pass(x, SR), x) > 0.95

    @pytest.mark.parametrize("cutoff", [0.0, -3000.0, float("nan"), float("inf")])
    def test_invalid_cutoff_raises(self, cutoff: float):
        with pytest.raises(InvalidConfigError, match="cutoff"):
            high_pass(_sine(1000.0, seconds=0.05), SR, cutoff)


# ---------------------------------------------------------------------------
# 2. Notch
# ---------------------------------------------------------------------------


class TestNotch:
    def test_coefficients_normalised(self):
        b, a = notch_coefficients(SR, 60.0, 2.0)
        assert a[0] == pytest.approx(1.0)
        # Symmetric zeros on the unit circle: b0 == b2
        assert b[0] == pytest.approx(b[2])

    def test_unity_gain_at_dc(self):
        b, a = notch_coefficients(SR, 60.0, 2.0)
        assert np.sum(b) / np.sum(a) == pytest.approx(1.0)

    def test_zero_history_start(self):
        x = np.array([1.0, 0.5, -0.25, 0.0])
        b, a = notch_coefficients(SR, 60.0, 2.0)
        out = notch(x, SR, 60.0, 2.0)
        assert out[0] == pytest.approx(b[0] * x[0])
        assert out[1] == pytest.approx(b[0] * x[1] + b[1] * x[0] - a[1] * out[0])

    def test_removes_target_frequency(self):
        x = _sine(60.0, seconds=4.0)
        out = notch(x, SR, 60.0, NOTCH_BANDWIDTH)
        assert _settled_ratio(out, x) < 0.3

    def test_passes_distant_frequency(self):
        x = _sine(1000.0, seconds=1.0)
        out = notch(x, SR, 60.0, NOTCH_BANDWIDTH)
        assert _settled_ratio(out, x) > 0.95

    def test_empty_in_empty_out(self):
        assert notch(np.array([]), SR, 60.0).shape == (0,)

    @pytest.mark.parametrize("center", [0.0, -50.0, SR / 2.0, 30000.0])
    def test_center_outside_nyquist_passes_through(self, center: float):
        x = _sine(1000.0, seconds=0.05)
        out = notch(x, SR, center)
        np.testing.assert_array_equal(out, x)
        assert out is not x

    @pytest.mark.parametrize("bandwidth", [0.0, -2.0, SR / 2.0, 66150.0, float("nan")])
    def test_unstable_bandwidth_raises(self, bandwidth: float):
        x = _sine(60.0, seconds=0.05)
        with pytest.raises(InvalidConfigError, match="bandwidth"):
            notch(x, SR, 60.0, bandwidth)

    def test_wide_bandwidth_stays_finite(self):
        x = _sine(60.0, seconds=0.5)
        out = notch(x, SR, 60.0, SR / 2.0 - 1.0)
        assert np.all(np.isfinite(out))

    def test_no_state_between_calls(self):
        x = _sine(60.0, seconds=0.1)
        first = notch(x, SR, 60.0)
        second = notch(x, SR, 60.0)
        np.testing.assert_array_equal(first, second)


# ---------------------------------------------------------------------------
# 3. Chains
# ---------------------------------------------------------------------------


class TestFilterChain:
    def test_default_chain_order(self):
        chain = default_filter_chain()
        assert chain[0] == FilterSpec("high_pass", HIGH_PASS_CUTOFF)
        assert [s.frequency for s in chain[1:]] == list(HUM_FREQUENCIES)
        assert all(s.kind == "notch" and s.bandwidth == NOTCH_BANDWIDTH for s in chain[1:])

    def test_apply_filter_dispatch(self):
        x = _sine(1000.0, seconds=0.05)
        np.testing.assert_array_equal(
            apply_filter(x, SR, FilterSpec("high_pass", 80.0)), high_pass(x, SR, 80.0)
        )
        np.testing.assert_array_equal(
            apply_filter(x, SR, FilterSpec("notch", 60.0, 2.0)), notch(x, SR, 60.0, 2.0)
        )

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown filter kind"):
            apply_filter(np.zeros(4), SR, FilterSpec("band_pass", 100.0))  # type: ignore[arg-type]

    def test_bandwidth_checked_against_sample_rate(self):
        spec = FilterSpec("notch", 60.0, 5000.0)
        x = _sine(60.0, seconds=0.05)
        assert np.all(np.isfinite(apply_filter(x, SR, spec)))
        with pytest.raises(InvalidConfigError):
            apply_filter(x[:800], 8000, spec)

    def test_empty_chain_is_identity_copy(self):
        x = _sine(440.0, seconds=0.05)
        out = apply_filter_chain(x, SR, ())
        np.testing.assert_array_equal(out, x)
        assert out is not x

    def test_noise_reduction_preserves_length(self):
        x = _sine(440.0, seconds=0.3)
        assert len(apply_noise_reduction(x, SR)) == len(x)

    def test_noise_reduction_removes_50hz_hum(self):
        x = _sine(50.0, seconds=4.0)
        out = apply_noise_reduction(x, SR)
        assert _settled_ratio(out, x) < 0.5

    def test_noise_reduction_keeps_voice(self):
        x = _sine(1000.0, seconds=1.0)
        out = apply_noise_reduction(x, SR)
        assert _settled_ratio(out, x) > 0.9


class TestDescribeChain:
    def test_default_chain(self):
        settings = describe_chain(default_filter_chain())
        assert settings.high_pass_cutoff == HIGH_PASS_CUTOFF
        assert settings.notch_filters == HUM_FREQUENCIES
        assert settings.notch_bandwidth == NOTCH_BANDWIDTH
        assert settings.low_pass_cutoff == 0.0
        assert settings.noise_reduction is True
        assert settings.dynamic_range is False

    def test_empty_chain(self):
        settings = describe_chain(())
        assert settings.noise_reduction is False
        assert settings.notch_filters == ()
        assert settings.high_pass_cutoff == 0.0
