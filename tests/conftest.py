"""
Shared fixtures for the test suite.

Centralizes the synthetic signals and pre-processed results that several
test modules need, so each file does not rebuild them.
"""

import numpy as np
import pytest

from otherside.core.anomaly import ProcessingResult, process_audio
from otherside.core.anomaly.types import FFT_SIZE
from otherside.core.vox import VoxGenerator

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_SR: int = 44100
"""Standard sample rate for tests."""

_BIN_HZ: float = _SR / FFT_SIZE
"""Spacing of the fixed-size spectrum at _SR (about 43.07 Hz)."""


# ---------------------------------------------------------------------------
# Signal factories
# ---------------------------------------------------------------------------


def _sine(
    freq_hz: float, amplitude: float = 0.5, seconds: float = 1.0, sr: int = _SR
) -> np.ndarray:
    """Mono sine starting at phase 0, t = i / sr."""
    n = int(round(seconds * sr))
    t = np.arange(n) / sr
    return (amplitude * np.sin(2.0 * np.pi * freq_hz * t)).astype(np.float64)


def _noise(amplitude: float = 0.1, n: int = _SR, seed: int = 42) -> np.ndarray:
    """Gaussian white noise with a fixed seed."""
    rng = np.random.default_rng(seed)
    return (amplitude * rng.standard_normal(n)).astype(np.float64)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def voice_tone_result() -> ProcessingResult:
    """Quiet 1 s tone centred on spectrum bin 40 (about 1722.7 Hz), fully processed."""
    return process_audio(_sine(40 * _BIN_HZ, amplitude=0.1))


@pytest.fixture(scope="module")
def silence_result() -> ProcessingResult:
    """1 s of digital silence, fully processed."""
    return process_audio(np.zeros(_SR))


@pytest.fixture()
def vox_generator() -> VoxGenerator:
    """Generator with the built-in banks and language packs."""
    return VoxGenerator()


@pytest.fixture(scope="module")
def noise_result() -> ProcessingResult:
    """1 s of loud broadband noise, fully processed."""
    return process_audio(_noise(amplitude=0.3))
