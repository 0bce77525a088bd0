"""
otherside/core/vox/banks.py — Static symbol banks and language packs.

Symbol banks are ordered tuples of short phonetic tokens; language packs
are ordered tuples of whole words. Both are configuration data, exposed
through read-only mappings so they can be shared between threads.

Swapping these tables is the only localization mechanism.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Symbol banks
# ---------------------------------------------------------------------------

_ENGLISH_SYMBOLS: tuple[str, ...] = (
    # vowels
    "ah", "eh", "ih", "oh", "uh", "ay", "ey", "iy", "ow", "uw",
    # consonants
    "b", "d", "f", "g", "h", "k", "l", "m", "n", "p", "r", "s", "t", "v", "w", "y", "z",
    # digraphs
    "ch", "sh", "th", "ng", "zh",
)  # fmt: skip

_MINIMAL_SYMBOLS: tuple[str, ...] = ("a", "e", "i", "o", "u", "m", "n", "s", "t", "r", "l")

_EXTENDED_SYMBOLS: tuple[str, ...] = _ENGLISH_SYMBOLS + (
    "aa", "ae", "ao", "aw", "ax", "er", "ia", "ua", "ai", "ei",
)  # fmt: skip

SYMBOL_BANKS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "english": _ENGLISH_SYMBOLS,
        "minimal": _MINIMAL_SYMBOLS,
        "extended": _EXTENDED_SYMBOLS,
    }
)

# ---------------------------------------------------------------------------
# Language packs
# ---------------------------------------------------------------------------

LANGUAGE_PACKS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "english": (
            "yes", "no", "here", "there", "go", "stay", "help", "stop", "come", "leave",
            "light", "dark", "cold", "warm", "see", "hear", "feel", "know", "remember",
            "hello", "goodbye", "please", "sorry", "thank", "name", "who", "what", "when", "where",
        ),
        "simple": ("yes", "no", "go", "stop", "here", "help", "see", "hear"),
    }
)  # fmt: skip

# ---------------------------------------------------------------------------
# Bank selection
# ---------------------------------------------------------------------------

MINIMAL_BELOW: int = 20  # size < 20 → minimal
EXTENDED_ABOVE: int = 30  # size > 30 → extended


def select_bank_name(symbol_bank_size: int) -> str:
    """Map a requested bank size to a bank name.

    < 20 → 'minimal', > 30 → 'extended', otherwise 'english'.
    """
    if symbol_bank_size < MINIMAL_BELOW:
        return "minimal"
    if symbol_bank_size > EXTENDED_ABOVE:
        return "extended"
    return "english"
