"""
otherside/core/vox/synthesis.py — Frequency-modulated tone for VOX output.

A 1-second, 44.1 kHz buffer whose pitch wobbles around A4 at 5 Hz. Both the
modulation depth and the loudness scale with trigger strength:

    freq(t)   = 440 · (1 + 0.5·s·sin(2π·5·t))
    amplitude = 0.3 · s
    sample(t) = amplitude · sin(2π·freq(t)·t)
"""

from __future__ import annotations

import numpy as np

SYNTH_SAMPLE_RATE: int = 44100
SYNTH_DURATION_SEC: float = 1.0
BASE_FREQUENCY: float = 440.0  # A4
VIBRATO_RATE: float = 5.0  # Hz
MODULATION_DEPTH: float = 0.5
AMPLITUDE_SCALE: float = 0.3


def synthesize(strength: float) -> np.ndarray:
    """Render the VOX tone for a trigger strength in [0, 1].

    Returns:
        float64 array of SYNTH_SAMPLE_RATE × SYNTH_DURATION_SEC samples.
    """
    n = int(SYNTH_DURATION_SEC * SYNTH_SAMPLE_RATE)
    t = np.arange(n) / SYNTH_SAMPLE_RATE
    vibrato = np.sin(2.0 * np.pi * VIBRATO_RATE * t)
    freq = BASE_FREQUENCY * (1.0 + MODULATION_DEPTH * strength * vibrato)
    amplitude = AMPLITUDE_SCALE * strength
    return amplitude * np.sin(2.0 * np.pi * freq * t)
