"""DFA minimization by partition refinement.

This is the plain quadratic refinement: every pass compares all pairs of
states inside each class and splits the class until no pair in it can be
told apart by one symbol.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Set

from fautomaton.automaton.fa import Automaton, Image, Transition
from fautomaton.automaton.labels import Label, unordered_pairs
from fautomaton.exceptions import PreconditionError

logger = logging.getLogger(__name__)


ClassMap = Dict[Label, Optional[int]]


def _target_class(image: Image, class_of: ClassMap) -> Optional[int]:
    # A missing move and a move into a dead state land in the same class.
    if not image:
        return None
    return class_of[image.single]


def _distinguishable(
    automaton: Automaton, first: Label, second: Label, class_of: ClassMap
) -> bool:
    for symbol in automaton.alphabet:
        if _target_class(automaton.transition(first, symbol), class_of) != (
            _target_class(automaton.transition(second, symbol), class_of)
        ):
            return True
    return False


def _split(
    automaton: Automaton, group: List[Label], class_of: ClassMap
) -> List[List[Label]]:
    if len(group) < 2:
        return [group]

    distinct: Set[FrozenSet[Label]] = {
        frozenset(pair)
        for pair in unordered_pairs(group)
        if _distinguishable(automaton, pair[0], pair[1], class_of)
    }
    if not distinct:
        return [group]

    blocks: List[List[Label]] = []
    for state in group:
        for block in blocks:
            if frozenset((block[0], state)) not in distinct:
                block.append(state)
                break
        else:
            blocks.append([state])
    return blocks


def _live_states(automaton: Automaton) -> Set[Label]:
    """States from which some final state can be reached."""
    predecessors: Dict[Label, List[Label]] = {}
    for t in automaton.transitions:
        predecessors.setdefault(t.target, []).append(t.source)

    live = set(automaton.final_states)
    stack = list(live)
    while stack:
        for source in predecessors.get(stack.pop(), ()):
            if source not in live:
                live.add(source)
                stack.append(source)
    return live


def equivalence_classes(automaton: Automaton) -> List[List[Label]]:
    """Partition the reachable states of a DFA into equivalence classes.

    States that cannot reach a final state form a single class, together with
    the implicit target of missing moves.

    Raises:
        PreconditionError: If the automaton is not deterministic.
    """
    if not automaton.is_deterministic():
        raise PreconditionError("Minimization requires a deterministic automaton")

    reachable = automaton.reachable_states()
    states = [state for state in automaton.states if state in reachable]
    live = _live_states(automaton)
    dead = [state for state in states if state not in live]
    finals = [state for state in states if state in automaton.final_states]
    others = [
        state
        for state in states
        if state in live and state not in automaton.final_states
    ]
    classes = [group for group in (others, finals) if group]

    passes = 0
    while True:
        passes += 1
        class_of: ClassMap = dict.fromkeys(dead)
        class_of.update(
            (state, index) for index, group in enumerate(classes) for state in group
        )
        refined: List[List[Label]] = []
        for group in classes:
            refined.extend(_split(automaton, group, class_of))
        if len(refined) == len(classes):
            break
        classes = refined
    if dead:
        classes.append(dead)

    logger.debug(
        "Partition refinement: %d states -> %d classes in %d passes",
        len(states),
        len(classes),
        passes,
    )
    return classes


def minimize(automaton: Automaton) -> Automaton:
    """Build the minimal DFA equivalent to ``automaton``.

    Unreachable states are dropped. States of the result are frozensets of
    equivalent states of ``automaton``.

    Raises:
        PreconditionError: If the automaton is not deterministic.
    """
    classes = [frozenset(group) for group in equivalence_classes(automaton)]
    if not classes:
        return Automaton.from_labels(automaton.alphabet, (), None)

    class_of: Dict[Label, FrozenSet[Label]] = {
        state: group for group in classes for state in group
    }
    transitions: List[Transition] = []
    for state in automaton.states:
        if state not in class_of:
            continue
        for symbol in automaton.alphabet:
            image = automaton.transition(state, symbol)
            if image:
                transitions.append(
                    Transition(class_of[state], class_of[image.single], symbol)
                )

    return Automaton.from_labels(
        automaton.alphabet,
        classes,
        class_of[automaton.initial_state],
        [group for group in classes if group & automaton.final_states],
        transitions,
    )
