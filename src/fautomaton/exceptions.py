"""Custom exceptions for fautomaton."""

from typing import Any


class AutomatonError(Exception):
    """Base exception for all fautomaton errors."""

    pass


class InvalidAutomatonError(AutomatonError):
    """Raised when an automaton violates a construction invariant."""

    def __init__(self, message: str, invariant: str = "") -> None:
        self.invariant = invariant
        super().__init__(message)

    def __str__(self) -> str:
        if self.invariant:
            return f"{super().__str__()} (invariant: {self.invariant})"
        return super().__str__()


class InvalidStateError(AutomatonError):
    """Raised when a state label does not belong to the automaton."""

    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(f"Invalid state {state!r}")


class InvalidSymbolError(AutomatonError):
    """Raised when a symbol is neither epsilon nor part of the alphabet."""

    def __init__(self, symbol: Any) -> None:
        self.symbol = symbol
        super().__init__(f"Invalid symbol {symbol!r}")


class PreconditionError(AutomatonError):
    """Raised when an operation's precondition is not met."""

    pass


class InvariantViolationError(PreconditionError):
    """Raised when concatenating a left operand without exactly one final state."""

    pass


class StateLimitError(AutomatonError):
    """Raised when a construction produces more states than allowed."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Automaton size exceeds limit: {limit} states")


class ConfigurationError(AutomatonError, ValueError):
    """Raised when a configuration value is out of range."""

    pass
