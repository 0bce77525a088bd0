"""
otherside/core/vox — Trigger-driven VOX text/tone generation.

Independent of the anomaly pipeline: its input is a small TriggerVector of
environmental readings, not a sample buffer.

Public API:
    Types:      TriggerVector, VoxResult, VoxGenerator
    Tables:     SYMBOL_BANKS, LANGUAGE_PACKS, TRIGGER_WEIGHTS
    Functions:  generate_vox, generate_text, select_bank_name, synthesize
"""

from otherside.core.vox.banks import LANGUAGE_PACKS, SYMBOL_BANKS, select_bank_name
from otherside.core.vox.generator import VoxGenerator, VoxResult, generate_text, generate_vox
from otherside.core.vox.synthesis import synthesize
from otherside.core.vox.triggers import TRIGGER_WEIGHTS, TriggerVector

__all__ = [
    "TriggerVector",
    "VoxResult",
    "VoxGenerator",
    "SYMBOL_BANKS",
    "LANGUAGE_PACKS",
    "TRIGGER_WEIGHTS",
    "generate_vox",
    "generate_text",
    "select_bank_name",
    "synthesize",
]
