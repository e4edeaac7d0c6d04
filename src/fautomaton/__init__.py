"""
fautomaton - finite automata over arbitrary symbol alphabets.

Build NFAs and DFAs, run them on input sequences and combine them with the
classical language operations: complement, union, intersection,
concatenation, iteration, mirror, determinization and minimization.

Example usage:
    >>> from fautomaton import Automaton
    >>> a = Automaton.create(["0", "1"], 2, 0, [1], [(0, 1, "1")])
    >>> a.apply("1").status
    True
    >>> a.accepts("11")
    False

Derived automata carry composite state labels; normalize them back to
integers when needed:
    dfa = nfa.determinize().minimize().normalize()
"""

from fautomaton.automaton import (
    EPSILON,
    NO_TRANSITION,
    Automaton,
    Image,
    RunResult,
    Transition,
    canonical_label,
    complement,
    completion,
    concat,
    determinize,
    equivalence_classes,
    intersection,
    iteration,
    minimize,
    mirror,
    same_label,
    union,
    unordered_pairs,
)
from fautomaton.config import Config
from fautomaton.exceptions import (
    AutomatonError,
    ConfigurationError,
    InvalidAutomatonError,
    InvalidStateError,
    InvalidSymbolError,
    InvariantViolationError,
    PreconditionError,
    StateLimitError,
)

__version__ = "0.1.0"

__all__ = [
    # Core types
    "EPSILON",
    "NO_TRANSITION",
    "Automaton",
    "Image",
    "RunResult",
    "Transition",
    # Operations
    "complement",
    "completion",
    "concat",
    "determinize",
    "equivalence_classes",
    "intersection",
    "iteration",
    "minimize",
    "mirror",
    "union",
    # Label utilities
    "canonical_label",
    "same_label",
    "unordered_pairs",
    # Configuration
    "Config",
    # Exceptions
    "AutomatonError",
    "ConfigurationError",
    "InvalidAutomatonError",
    "InvalidStateError",
    "InvalidSymbolError",
    "InvariantViolationError",
    "PreconditionError",
    "StateLimitError",
    # Version
    "__version__",
]
