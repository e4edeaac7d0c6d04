"""Automaton module: data structure, execution and transformations."""

from fautomaton.automaton.fa import (
    EPSILON,
    NO_TRANSITION,
    Automaton,
    Image,
    RunResult,
    Transition,
)
from fautomaton.automaton.labels import canonical_label, same_label, unordered_pairs
from fautomaton.automaton.combinators import (
    complement,
    completion,
    concat,
    intersection,
    iteration,
    mirror,
    union,
)
from fautomaton.automaton.subset import determinize
from fautomaton.automaton.minimize import equivalence_classes, minimize

__all__ = [
    "EPSILON",
    "NO_TRANSITION",
    "Automaton",
    "Image",
    "RunResult",
    "Transition",
    "canonical_label",
    "same_label",
    "unordered_pairs",
    "complement",
    "completion",
    "concat",
    "intersection",
    "iteration",
    "mirror",
    "union",
    "determinize",
    "equivalence_classes",
    "minimize",
]
