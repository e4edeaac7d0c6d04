"""Determinization by subset construction."""

import logging
from collections import deque
from typing import Deque, Dict, FrozenSet, List, Set

from fautomaton.automaton.fa import Automaton, Transition
from fautomaton.automaton.labels import Label
from fautomaton.config import Config
from fautomaton.exceptions import PreconditionError, StateLimitError

logger = logging.getLogger(__name__)


def determinize(automaton: Automaton, config: Config = None) -> Automaton:
    """Convert an NFA, epsilon moves included, to an equivalent DFA.

    States of the result are frozensets of states of ``automaton``. Subsets
    with no successor on a symbol get no transition on it, so the result may
    be incomplete.

    Args:
        automaton: A nondeterministic automaton.
        config: Limits for the construction.

    Returns:
        The deterministic automaton, reachable subsets only.

    Raises:
        PreconditionError: If the automaton is already deterministic.
        StateLimitError: If more than ``config.max_states`` subsets appear.
    """
    if automaton.is_deterministic():
        raise PreconditionError("Automaton is already deterministic")
    config = config or Config.default()

    initial = automaton.epsilon_closure([automaton.initial_state])
    # Insertion ordered, doubles as the list of discovered subsets.
    discovered: Dict[FrozenSet[Label], None] = {initial: None}
    queue: Deque[FrozenSet[Label]] = deque([initial])
    transitions: List[Transition] = []

    while queue:
        subset = queue.popleft()
        for symbol in automaton.alphabet:
            image: Set[Label] = set()
            for state in subset:
                image |= automaton.epsilon_closure(automaton.transition(state, symbol))
            if not image:
                continue

            target = frozenset(image)
            transitions.append(Transition(subset, target, symbol))
            if target not in discovered:
                if len(discovered) >= config.max_states:
                    raise StateLimitError(config.max_states)
                discovered[target] = None
                queue.append(target)

    finals = [subset for subset in discovered if subset & automaton.final_states]
    logger.debug(
        "Subset construction: %d states -> %d subsets (%d final)",
        automaton.size(),
        len(discovered),
        len(finals),
    )
    return Automaton.from_labels(
        automaton.alphabet, list(discovered), initial, finals, transitions
    )
