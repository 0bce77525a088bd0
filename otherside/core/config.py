"""
Configuration dataclasses for the anomaly pipeline and the VOX generator.

These immutable config objects are shared read-only between concurrent
calls. Validation happens once, at construction time, so the pipeline
stages can assume sane values.

Environment loading mirrors the deployment defaults: a missing or
unparsable variable falls back to the dataclass default.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from otherside.core.errors import InvalidConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioConfig:
    """
    Configuration for audio anomaly processing.

    Attributes:
        sample_rate: Sample rate of the incoming buffer in Hz. Must be > 0.
        bit_depth: Bit depth of the source recording. Informational only,
            carried through to the result metadata.
        noise_threshold: Base magnitude threshold. Peak picking uses 5x this
            value, event detection 15x (gate) and 25x (confidence scale).

    Example:
        >>> config = AudioConfig(sample_rate=48000, noise_threshold=0.05)
        >>> result = process_audio(samples, config)
    """

    sample_rate: int = 44100
    bit_depth: int = 16
    noise_threshold: float = 0.1

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.sample_rate <= 0:
            raise InvalidConfigError("sample_rate", self.sample_rate, "must be positive")
        if self.bit_depth <= 0:
            raise InvalidConfigError("bit_depth", self.bit_depth, "must be positive")
        if not self.noise_threshold > 0:
            raise InvalidConfigError("noise_threshold", self.noise_threshold, "must be positive")


@dataclass(frozen=True)
class VoxConfig:
    """
    Configuration for trigger-driven VOX generation.

    Attributes:
        default_language: Name of the language pack used for the word tier.
            Unknown names degrade to an empty word list.
        symbol_bank_size: Requested bank size. < 20 selects the minimal
            bank, > 30 the extended bank, anything else the english bank.
        trigger_threshold: Minimum trigger strength (inclusive) that
            produces a result. In [0.0, 1.0].
    """

    default_language: str = "english"
    symbol_bank_size: int = 25
    trigger_threshold: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.symbol_bank_size < 0:
            raise InvalidConfigError(
                "symbol_bank_size", self.symbol_bank_size, "must be non-negative"
            )
        if not 0.0 <= self.trigger_threshold <= 1.0:
            raise InvalidConfigError(
                "trigger_threshold", self.trigger_threshold, "must be in [0.0, 1.0]"
            )


DEFAULT_AUDIO_CONFIG = AudioConfig()
"""44.1 kHz / 16-bit / noise threshold 0.1."""

DEFAULT_VOX_CONFIG = VoxConfig()
"""English words, english symbol bank, threshold 0.5."""


# ---------------------------------------------------------------------------
# Environment loading
# ---------------------------------------------------------------------------


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("config: %s=%r is not an integer, using %d", name, raw, default)
        return default


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config: %s=%r is not a number, using %s", name, raw, default)
        return default


def load_audio_config(environ: Mapping[str, str] | None = None) -> AudioConfig:
    """Build an AudioConfig from environment variables.

    Reads ``AUDIO_SAMPLE_RATE``, ``AUDIO_BIT_DEPTH`` and ``NOISE_THRESHOLD``.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Raises:
        InvalidConfigError: A variable parsed but is out of range
            (e.g. ``AUDIO_SAMPLE_RATE=0``).
    """
    env = os.environ if environ is None else environ
    return AudioConfig(
        sample_rate=_env_int(env, "AUDIO_SAMPLE_RATE", DEFAULT_AUDIO_CONFIG.sample_rate),
        bit_depth=_env_int(env, "AUDIO_BIT_DEPTH", DEFAULT_AUDIO_CONFIG.bit_depth),
        noise_threshold=_env_float(
            env, "NOISE_THRESHOLD", DEFAULT_AUDIO_CONFIG.noise_threshold
        ),
    )


def load_vox_config(environ: Mapping[str, str] | None = None) -> VoxConfig:
    """Build a VoxConfig from environment variables.

    Reads ``VOX_DEFAULT_LANGUAGE``, ``VOX_PHONETIC_BANK_SIZE`` and
    ``VOX_TRIGGER_THRESHOLD``.
    """
    env = os.environ if environ is None else environ
    return VoxConfig(
        default_language=env.get("VOX_DEFAULT_LANGUAGE") or DEFAULT_VOX_CONFIG.default_language,
        symbol_bank_size=_env_int(
            env, "VOX_PHONETIC_BANK_SIZE", DEFAULT_VOX_CONFIG.symbol_bank_size
        ),
        trigger_threshold=_env_float(
            env, "VOX_TRIGGER_THRESHOLD", DEFAULT_VOX_CONFIG.trigger_threshold
        ),
    )
