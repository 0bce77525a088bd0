"""
otherside/core/errors.py — Exception hierarchy for the analysis core.

Every error raised on purpose by otherside.core derives from OthersideError,
and also from the builtin it specialises (ValueError / KeyError) so callers
that only know the builtin still catch it.

Below-threshold VOX generation is NOT an error: it returns None.
"""

from __future__ import annotations


class OthersideError(Exception):
    """Base class for all errors raised by otherside.core."""


class EmptyInputError(OthersideError, ValueError):
    """Raised when the top-level pipeline receives an empty sample buffer."""

    def __init__(self) -> None:
        super().__init__("empty audio data: at least one sample is required")


class NonFiniteInputError(OthersideError, ValueError):
    """Raised when numeric input (samples or trigger readings) contains NaN or ±Inf.

    Args:
        count: Number of non-finite values found.
        source: What was being validated, used in the message.
    """

    def __init__(self, count: int, source: str = "audio data") -> None:
        self.count = count
        self.source = source
        super().__init__(f"{source} contains {count} non-finite value(s)")


class InvalidConfigError(OthersideError, ValueError):
    """Raised when a configuration value is outside its valid range.

    Args:
        field: Name of the offending configuration field.
        value: The rejected value.
        reason: Human-readable constraint, e.g. "must be positive".
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason}, got {value!r}")


class BankNotFoundError(OthersideError, KeyError):
    """Raised when a symbol bank is selected that has no registered symbols.

    Args:
        bank_name: Name of the missing (or empty) bank.
        available: Names of the banks that are registered.
    """

    def __init__(self, bank_name: str, available: tuple[str, ...] = ()) -> None:
        self.bank_name = bank_name
        self.available = available
        super().__init__(bank_name)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the key; keep the message readable.
        return f"symbol bank {self.bank_name!r} not found (registered: {list(self.available)})"
