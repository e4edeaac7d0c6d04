"""Configuration for automaton constructions."""

from dataclasses import dataclass

from fautomaton.exceptions import ConfigurationError

DEFAULT_MAX_STATES = 100000


@dataclass(frozen=True)
class Config:
    """Limits applied by constructions that can blow up.

    Attributes:
        max_states: Maximum number of states a subset or product
            construction may produce before giving up.
    """

    max_states: int = DEFAULT_MAX_STATES

    def __post_init__(self) -> None:
        if self.max_states < 1:
            raise ConfigurationError("max_states must be positive")

    @classmethod
    def default(cls) -> "Config":
        """Create a default configuration."""
        return cls()

    @classmethod
    def unlimited(cls) -> "Config":
        """Create a configuration without a practical state limit."""
        return cls(max_states=2**62)
