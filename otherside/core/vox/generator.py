"""
otherside/core/vox/generator.py — Trigger-driven VOX text and tone generation.

    TriggerVector
        │
        ├─ .strength                 [triggers.py — weighted sum, clipped]
        │       ↓  (< threshold → None)
        ├─ select_bank_name()        [banks.py]
        ├─ generate_text()           [this module — deterministic tiers]
        ├─ synthesize()              [synthesis.py — FM tone]
        └─ VoxResult

Design:
    - Deterministic: the same (strength, bank, language pack) always yields
      the same text. No randomness anywhere.
    - "Nothing generated" is None, typed VoxResult | None. Only a genuine
      misconfiguration (selected bank missing or empty) raises.
    - VoxGenerator holds read-only tables only, so one instance can serve
      concurrent callers.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

import numpy as np

from otherside.core.config import DEFAULT_VOX_CONFIG, VoxConfig
from otherside.core.errors import BankNotFoundError
from otherside.core.vox.banks import LANGUAGE_PACKS, SYMBOL_BANKS, select_bank_name
from otherside.core.vox.synthesis import synthesize
from otherside.core.vox.triggers import TriggerVector

logger = logging.getLogger(__name__)

MODULATION_TYPE: str = "amplitude"  # wire label expected by stored sessions and the UI
WORD_TIER_ABOVE: float = 0.7  # strength > 0.7 → whole word (if a pack is available)
COMBO_TIER_ABOVE: float = 0.4  # strength > 0.4 → concatenated symbols


@dataclass(frozen=True)
class VoxResult:
    """Output of a successful VOX generation.

    Invariants:
        trigger_threshold <= trigger_strength <= 1.0
        len(frequency_waveform) == 44100
    """

    generated_text: str
    """Word or concatenated phonetic symbols."""

    bank_name: str
    """Symbol bank used: 'minimal', 'english' or 'extended'."""

    trigger_strength: float
    """Combined trigger strength in [0.0, 1.0]."""

    frequency_waveform: np.ndarray = field(compare=False, repr=False)
    """1 s FM tone at 44.1 kHz (read-only array)."""

    modulation_type: str = MODULATION_TYPE
    """Synthesis technique used for frequency_waveform."""

    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    """UTC timestamp of generation."""

    language_pack: str = ""
    """Language pack requested by the config (may be unregistered)."""


def generate_text(strength: float, symbols: Sequence[str], words: Sequence[str]) -> str:
    """Pick text for a trigger strength.

    Tiers:
        strength > 0.7 and words non-empty:
            words[floor(s·len(words)) mod len(words)]
        strength > 0.4:
            floor(s·3)+1 symbols, the k-th at floor(s·len(symbols)·(k+1)) mod len(symbols)
        otherwise:
            symbols[floor(s·len(symbols)) mod len(symbols)]

    A strength above 0.7 with no words available uses the symbol tier.

    Returns:
        Generated text; "" when both tables are empty.
    """
    if strength > WORD_TIER_ABOVE and words:
        return words[math.floor(strength * len(words)) % len(words)]
    if not symbols:
        return ""
    n = len(symbols)
    if strength > COMBO_TIER_ABOVE:
        count = math.floor(strength * 3) + 1
        return "".join(symbols[math.floor(strength * n * (k + 1)) % n] for k in range(count))
    return symbols[math.floor(strength * n) % n]


@dataclass(frozen=True)
class VoxGenerator:
    """Generates VOX responses from trigger vectors.

    Attributes:
        symbol_banks: Bank name → ordered phonetic symbols.
        language_packs: Pack name → ordered words.
    """

    symbol_banks: Mapping[str, Sequence[str]] = field(default_factory=lambda: SYMBOL_BANKS)
    language_packs: Mapping[str, Sequence[str]] = field(default_factory=lambda: LANGUAGE_PACKS)

    def symbols_for(self, bank_name: str) -> Sequence[str]:
        """Symbols of a registered, non-empty bank.

        Raises:
            BankNotFoundError: The bank is not registered or has no symbols.
        """
        symbols = self.symbol_banks.get(bank_name)
        if not symbols:
            raise BankNotFoundError(bank_name, tuple(self.symbol_banks))
        return symbols

    def words_for(self, language: str) -> Sequence[str]:
        """Words of a language pack; an unregistered pack yields ()."""
        words = self.language_packs.get(language)
        if words is None:
            logger.warning(
                "VoxGenerator: language pack %r not registered, word tier disabled", language
            )
            return ()
        return words

    def generate(
        self,
        triggers: TriggerVector | Mapping[str, float],
        config: VoxConfig = DEFAULT_VOX_CONFIG,
    ) -> VoxResult | None:
        """Generate a VOX response, or None when triggers are too weak.

        Args:
            triggers: TriggerVector, or a name → value mapping converted via
                      TriggerVector.from_mapping (unknown names ignored).
            config:   Threshold, bank size and language pack.

        Returns:
            VoxResult when strength >= config.trigger_threshold, else None.

        Raises:
            BankNotFoundError: The bank selected by config.symbol_bank_size
                               has no registered symbols.
        """
        if isinstance(triggers, TriggerVector):
            vector = triggers
        else:
            vector = TriggerVector.from_mapping(triggers)
        strength = vector.strength

        if strength < config.trigger_threshold:
            logger.debug(
                "VoxGenerator: strength %.3f below threshold %.3f, nothing generated",
                strength,
                config.trigger_threshold,
            )
            return None

        bank_name = select_bank_name(config.symbol_bank_size)
        symbols = self.symbols_for(bank_name)
        words = self.words_for(config.default_language)

        text = generate_text(strength, symbols, words)
        waveform = synthesize(strength)
        waveform.setflags(write=False)

        logger.debug("VoxGenerator: strength=%.3f bank=%s text=%r", strength, bank_name, text)
        return VoxResult(
            generated_text=text,
            bank_name=bank_name,
            trigger_strength=strength,
            frequency_waveform=waveform,
            modulation_type=MODULATION_TYPE,
            language_pack=config.default_language,
        )


_DEFAULT_GENERATOR = VoxGenerator()


def generate_vox(
    triggers: TriggerVector | Mapping[str, float],
    config: VoxConfig = DEFAULT_VOX_CONFIG,
) -> VoxResult | None:
    """Generate with the built-in banks and language packs."""
    return _DEFAULT_GENERATOR.generate(triggers, config)
