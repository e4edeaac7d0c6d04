"""Algebraic operations on automata.

Every function here returns a new automaton and leaves its operands
untouched. Product constructions label their states with ``(left, right)``
pairs; call :meth:`Automaton.normalize` to get back to integer labels.
"""

import logging
from typing import Callable, List

from fautomaton.automaton.fa import EPSILON, Automaton, Transition
from fautomaton.automaton.labels import Label
from fautomaton.config import Config
from fautomaton.exceptions import (
    InvariantViolationError,
    PreconditionError,
    StateLimitError,
)

logger = logging.getLogger(__name__)


def _fresh_label(automaton: Automaton) -> int:
    """Smallest integer label, starting at the state count, not yet in use."""
    label = automaton.size()
    while automaton.has_state(label):
        label += 1
    return label


def _finals_in_order(automaton: Automaton) -> List[Label]:
    return [state for state in automaton.states if state in automaton.final_states]


def complement(automaton: Automaton) -> Automaton:
    """Swap final and non-final states of a deterministic complete automaton.

    Raises:
        PreconditionError: If the automaton is not deterministic and complete.
    """
    if not automaton.is_deterministic_complete():
        raise PreconditionError(
            "Complement requires a deterministic complete automaton; "
            "determinize and complete it first"
        )
    return Automaton.from_labels(
        automaton.alphabet,
        automaton.states,
        automaton.initial_state,
        [s for s in automaton.states if s not in automaton.final_states],
        automaton.transitions,
    )


def completion(automaton: Automaton) -> Automaton:
    """Route every missing move of a deterministic automaton to a sink state.

    The sink is non-final and loops on every symbol. Completing the
    zero-state automaton yields a lone sink, which is also the initial state.

    Raises:
        PreconditionError: If the automaton is already complete or is not
            deterministic.
    """
    if automaton.is_deterministic_complete():
        raise PreconditionError("Automaton is already deterministic and complete")
    if not automaton.is_deterministic():
        raise PreconditionError("Completion requires a deterministic automaton")

    sink = _fresh_label(automaton)
    transitions = list(automaton.transitions)
    for state in automaton.states + (sink,):
        for symbol in automaton.alphabet:
            if state == sink or not automaton.transition(state, symbol):
                transitions.append(Transition(state, sink, symbol))

    initial = sink if automaton.initial_state is None else automaton.initial_state
    return Automaton.from_labels(
        automaton.alphabet,
        automaton.states + (sink,),
        initial,
        automaton.final_states,
        transitions,
    )


def _product(
    left: Automaton,
    right: Automaton,
    is_final: Callable[[bool, bool], bool],
    config: Config,
) -> Automaton:
    if not (left.is_deterministic() and right.is_deterministic()):
        raise PreconditionError(
            "Product constructions require deterministic operands; determinize first"
        )
    if set(left.alphabet) != set(right.alphabet):
        raise PreconditionError("Operands must share the same alphabet")

    config = config or Config.default()
    if left.size() * right.size() > config.max_states:
        raise StateLimitError(config.max_states)

    states = [(a, b) for a in left.states for b in right.states]
    transitions: List[Transition] = []
    for a, b in states:
        for symbol in left.alphabet:
            first = left.transition(a, symbol)
            second = right.transition(b, symbol)
            if first.is_single and second.is_single:
                transitions.append(
                    Transition((a, b), (first.single, second.single), symbol)
                )

    initial = (left.initial_state, right.initial_state) if states else None

    finals = [
        (a, b)
        for a, b in states
        if is_final(a in left.final_states, b in right.final_states)
    ]
    logger.debug(
        "Product of %d x %d states: %d transitions, %d final",
        left.size(),
        right.size(),
        len(transitions),
        len(finals),
    )
    return Automaton.from_labels(left.alphabet, states, initial, finals, transitions)


def union(left: Automaton, right: Automaton, config: Config = None) -> Automaton:
    """Product automaton accepting what either operand accepts.

    A pair moves only when both components move, so both operands must be
    deterministic and complete.

    Raises:
        PreconditionError: If an operand is nondeterministic or incomplete, or
            the alphabets differ.
        StateLimitError: If the product exceeds ``config.max_states``.
    """
    if not (left.is_complete() and right.is_complete()):
        raise PreconditionError(
            "Union requires complete operands; call completion() first"
        )
    return _product(left, right, lambda a, b: a or b, config)


def intersection(left: Automaton, right: Automaton, config: Config = None) -> Automaton:
    """Product automaton accepting what both operands accept.

    Raises:
        PreconditionError: If an operand is nondeterministic or the alphabets
            differ.
        StateLimitError: If the product exceeds ``config.max_states``.
    """
    return _product(left, right, lambda a, b: a and b, config)


def mirror(automaton: Automaton) -> Automaton:
    """Reverse every transition, swapping the roles of initial and final states.

    A single final state becomes the initial state. With several final states
    the result does not start from the first of them, which would drop the
    words ending in the others; a fresh initial state reaches every former
    final state through an epsilon move instead.

    Raises:
        PreconditionError: If the automaton has no final state.
    """
    finals = _finals_in_order(automaton)
    if not finals:
        raise PreconditionError("Cannot mirror an automaton without final states")

    states = automaton.states
    transitions = [t.reversed() for t in automaton.transitions]
    if len(finals) == 1:
        initial = finals[0]
    else:
        initial = _fresh_label(automaton)
        states = states + (initial,)
        transitions.extend(Transition(initial, state, EPSILON) for state in finals)

    return Automaton.from_labels(
        automaton.alphabet, states, initial, [automaton.initial_state], transitions
    )


def concat(left: Automaton, right: Automaton) -> Automaton:
    """Chain two automata by fusing the left final state with the right initial state.

    Both operands are normalized first. The right states other than its
    initial state are numbered after the left states.

    Raises:
        InvariantViolationError: If the left operand does not have exactly one
            final state.
        PreconditionError: If the right operand has no states.
    """
    if len(left.final_states) != 1:
        raise InvariantViolationError(
            "The left operand of a concatenation must have exactly one final state"
        )
    if right.initial_state is None:
        raise PreconditionError("Cannot concatenate with an automaton without states")

    left = left.normalize()
    right = right.normalize()
    (joint,) = left.final_states

    mapping = {}
    next_index = left.size()
    for state in right.states:
        if state == right.initial_state:
            mapping[state] = joint
        else:
            mapping[state] = next_index
            next_index += 1

    transitions = list(left.transitions)
    transitions.extend(
        Transition(mapping[t.source], mapping[t.target], t.symbol)
        for t in right.transitions
    )
    return Automaton.create(
        alphabet=tuple(dict.fromkeys(left.alphabet + right.alphabet)),
        number_of_states=left.size() + right.size() - 1,
        initial_state=left.initial_state,
        final_states=[mapping[state] for state in right.final_states],
        transitions=transitions,
    )


def iteration(automaton: Automaton, accept_empty: bool = True) -> Automaton:
    """Kleene iteration: loop from every final state back to the initial state.

    Args:
        automaton: The automaton to iterate.
        accept_empty: Also accept the empty sequence (Kleene star) through a
            fresh accepting initial state. When False, only the loops are
            added (Kleene plus).
    """
    if automaton.initial_state is None:
        if accept_empty:
            return Automaton.create(automaton.alphabet, 1, 0, [0])
        return Automaton.from_labels(automaton.alphabet, (), None)

    initial = automaton.initial_state
    states = automaton.states
    finals = _finals_in_order(automaton)
    transitions = list(automaton.transitions)
    transitions.extend(Transition(state, initial, EPSILON) for state in finals)

    if accept_empty:
        start = _fresh_label(automaton)
        states = states + (start,)
        transitions.append(Transition(start, initial, EPSILON))
        finals.append(start)
        initial = start

    return Automaton.from_labels(
        automaton.alphabet, states, initial, finals, transitions
    )
