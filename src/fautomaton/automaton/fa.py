"""Finite automata with epsilon transitions.

An :class:`Automaton` is an immutable value: it is validated once when built
and every operation on it (combinators, determinization, minimization and
normalization) returns a new automaton.
"""

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import (
    Any,
    Deque,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
)

from fautomaton.automaton.labels import Label, canonical_label
from fautomaton.config import Config
from fautomaton.exceptions import (
    AutomatonError,
    InvalidAutomatonError,
    InvalidStateError,
    InvalidSymbolError,
    PreconditionError,
)

Symbol = Hashable

# Marker for spontaneous moves; never a member of an alphabet.
EPSILON = None


@dataclass(frozen=True)
class Transition:
    """A single edge of an automaton.

    Attributes:
        source: Label of the state the edge leaves.
        target: Label of the state the edge enters.
        symbol: Symbol consumed by the edge, or EPSILON.
    """

    source: Label
    target: Label
    symbol: Optional[Symbol] = EPSILON

    @property
    def is_epsilon(self) -> bool:
        return self.symbol is EPSILON

    def reversed(self) -> "Transition":
        """Return the same edge pointing the other way."""
        return Transition(self.target, self.source, self.symbol)

    @classmethod
    def coerce(cls, value: Any) -> "Transition":
        """Build a transition from a Transition, a mapping or a tuple.

        Mappings use the keys ``from``, ``to`` and ``symbol``; tuples are
        ``(source, target)`` or ``(source, target, symbol)``.
        """
        if isinstance(value, Transition):
            source, target, symbol = value.source, value.target, value.symbol
        elif isinstance(value, Mapping):
            try:
                source, target = value["from"], value["to"]
            except KeyError as e:
                raise InvalidAutomatonError(
                    f"Transition {value!r} is missing {e}", "transitions"
                ) from e
            symbol = value.get("symbol", EPSILON)
        else:
            try:
                items = tuple(value)
            except TypeError as e:
                raise InvalidAutomatonError(
                    f"Cannot read a transition from {value!r}", "transitions"
                ) from e
            if len(items) == 2:
                source, target = items
                symbol = EPSILON
            elif len(items) == 3:
                source, target, symbol = items
            else:
                raise InvalidAutomatonError(
                    f"Cannot read a transition from {value!r}", "transitions"
                )
        transition = cls(canonical_label(source), canonical_label(target), symbol)
        try:
            hash(transition)
        except TypeError as e:
            raise InvalidAutomatonError(
                f"Transition {transition} has an unhashable part", "transitions"
            ) from e
        return transition

    def __str__(self) -> str:
        symbol = "ε" if self.is_epsilon else repr(self.symbol)
        return f"{{ {self.source!r}, {symbol} => {self.target!r} }}"


@dataclass(frozen=True)
class Image:
    """Targets of the transition function for one (state, symbol) pair.

    An empty image means there is no transition; more than one target means
    the automaton is nondeterministic on that pair.
    """

    targets: Tuple[Label, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.targets

    @property
    def is_single(self) -> bool:
        return len(self.targets) == 1

    @property
    def is_multiple(self) -> bool:
        return len(self.targets) > 1

    @property
    def single(self) -> Label:
        """The only target; raises PreconditionError otherwise."""
        if not self.is_single:
            raise PreconditionError(
                f"Expected exactly one target, found {len(self.targets)}"
            )
        return self.targets[0]

    def __iter__(self) -> Iterator[Label]:
        return iter(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def __bool__(self) -> bool:
        return bool(self.targets)


NO_TRANSITION = Image()


@dataclass
class RunResult:
    """Outcome of running an automaton over a sequence.

    Attributes:
        status: False when the run got stuck before the end of the input.
        march: Epsilon-closed live-state sets, one per consumed prefix.
    """

    status: bool
    march: List[FrozenSet[Label]] = field(default_factory=list)

    @property
    def last(self) -> FrozenSet[Label]:
        """Live states after the last consumed symbol."""
        return self.march[-1] if self.march else frozenset()


@dataclass(frozen=True)
class Automaton:
    """Finite automaton, possibly nondeterministic with epsilon transitions.

    Attributes:
        alphabet: Symbols the automaton reads, in a stable order.
        states: State labels, in a stable order.
        initial_state: Initial state label; None only when there are no states.
        final_states: Accepting state labels.
        transitions: Edges of the automaton, duplicates removed.
    """

    alphabet: Tuple[Symbol, ...] = ()
    states: Tuple[Label, ...] = ()
    initial_state: Optional[Label] = None
    final_states: FrozenSet[Label] = frozenset()
    transitions: Tuple[Transition, ...] = ()
    _symbols: FrozenSet[Symbol] = field(
        default=frozenset(), init=False, repr=False, compare=False
    )
    _state_set: FrozenSet[Label] = field(
        default=frozenset(), init=False, repr=False, compare=False
    )
    _delta: Dict[Tuple[Label, Optional[Symbol]], Tuple[Label, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        try:
            alphabet = tuple(dict.fromkeys(self.alphabet))
        except TypeError as e:
            raise InvalidAutomatonError(
                "Alphabet symbols must be hashable", "alphabet"
            ) from e
        if EPSILON in alphabet:
            raise InvalidAutomatonError(
                "Alphabet contains the epsilon marker", "alphabet"
            )

        states = tuple(canonical_label(state) for state in self.states)
        try:
            state_set = frozenset(states)
        except TypeError as e:
            raise InvalidAutomatonError(
                "State labels must be hashable", "states"
            ) from e
        if len(state_set) != len(states):
            raise InvalidAutomatonError("Duplicate state labels", "states")
        if None in state_set:
            raise InvalidAutomatonError("None is not a valid state label", "states")

        initial = canonical_label(self.initial_state)
        if initial is None:
            if states:
                raise InvalidAutomatonError("Invalid initial state", "initial_state")
        elif initial not in state_set:
            raise InvalidAutomatonError(
                f"Invalid initial state {initial!r}", "initial_state"
            )

        finals = frozenset(canonical_label(state) for state in self.final_states)
        for state in finals:
            if state not in state_set:
                raise InvalidAutomatonError(
                    f"Invalid final state {state!r}", "final_states"
                )

        symbols = frozenset(alphabet)
        transitions = tuple(
            dict.fromkeys(Transition.coerce(t) for t in self.transitions)
        )
        delta: Dict[Tuple[Label, Optional[Symbol]], List[Label]] = {}
        for t in transitions:
            valid = (
                t.source in state_set
                and t.target in state_set
                and (t.is_epsilon or t.symbol in symbols)
            )
            if not valid:
                raise InvalidAutomatonError(f"Invalid transition {t}", "transitions")
            delta.setdefault((t.source, t.symbol), []).append(t.target)

        object.__setattr__(self, "alphabet", alphabet)
        object.__setattr__(self, "states", states)
        object.__setattr__(self, "initial_state", initial)
        object.__setattr__(self, "final_states", finals)
        object.__setattr__(self, "transitions", transitions)
        object.__setattr__(self, "_symbols", symbols)
        object.__setattr__(self, "_state_set", state_set)
        object.__setattr__(
            self, "_delta", {key: tuple(value) for key, value in delta.items()}
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        alphabet: Iterable[Symbol] = (),
        number_of_states: int = 0,
        initial_state: Optional[int] = None,
        final_states: Iterable[int] = (),
        transitions: Iterable[Any] = (),
    ) -> "Automaton":
        """Build an automaton whose states are labelled ``0..n-1``.

        Args:
            alphabet: The input symbols.
            number_of_states: How many states to create.
            initial_state: Index of the initial state; None for zero states.
            final_states: Indexes of the accepting states.
            transitions: Transition objects, ``(from, to, symbol)`` tuples or
                ``{"from", "to", "symbol"}`` mappings.

        Raises:
            InvalidAutomatonError: If any construction invariant is violated.
        """
        if (
            isinstance(number_of_states, bool)
            or not isinstance(number_of_states, int)
            or number_of_states < 0
        ):
            raise InvalidAutomatonError(
                f"Invalid number of states {number_of_states!r}", "number_of_states"
            )
        return cls(
            alphabet=tuple(alphabet),
            states=tuple(range(number_of_states)),
            initial_state=initial_state,
            final_states=frozenset(final_states),
            transitions=tuple(transitions),
        )

    @classmethod
    def from_labels(
        cls,
        alphabet: Iterable[Symbol],
        states: Iterable[Label],
        initial_state: Optional[Label],
        final_states: Iterable[Label] = (),
        transitions: Iterable[Any] = (),
    ) -> "Automaton":
        """Build an automaton over arbitrary hashable state labels."""
        return cls(
            alphabet=tuple(alphabet),
            states=tuple(states),
            initial_state=initial_state,
            final_states=frozenset(canonical_label(s) for s in final_states),
            transitions=tuple(transitions),
        )

    def size(self) -> int:
        """Return the number of states."""
        return len(self.states)

    def has_state(self, state: Any) -> bool:
        return canonical_label(state) in self._state_set

    # ------------------------------------------------------------------
    # Transition function
    # ------------------------------------------------------------------

    def _check_state(self, state: Any) -> Label:
        label = canonical_label(state)
        try:
            known = label in self._state_set
        except TypeError:
            known = False
        if not known:
            raise InvalidStateError(state)
        return label

    def _check_symbol(self, symbol: Optional[Symbol]) -> None:
        if symbol is EPSILON:
            return
        try:
            known = symbol in self._symbols
        except TypeError:
            known = False
        if not known:
            raise InvalidSymbolError(symbol)

    def transition(self, state: Label, symbol: Optional[Symbol] = EPSILON) -> Image:
        """Resolve the targets of ``state`` on ``symbol``.

        Args:
            state: A state label of this automaton.
            symbol: An alphabet symbol; EPSILON when omitted.

        Returns:
            The image of the pair, empty when no transition matches.

        Raises:
            InvalidStateError: If the state is unknown.
            InvalidSymbolError: If the symbol is not in the alphabet.
        """
        label = self._check_state(state)
        self._check_symbol(symbol)
        targets = self._delta.get((label, symbol))
        if not targets:
            return NO_TRANSITION
        return Image(targets)

    def epsilon_closure(self, states: Iterable[Label]) -> FrozenSet[Label]:
        """Return every state reachable through epsilon moves, inputs included.

        Raises:
            InvalidStateError: If any input label is unknown.
        """
        closure: Set[Label] = set()
        stack: List[Label] = []
        for state in states:
            label = self._check_state(state)
            if label not in closure:
                closure.add(label)
                stack.append(label)

        while stack:
            current = stack.pop()
            for target in self._delta.get((current, EPSILON), ()):
                if target not in closure:
                    closure.add(target)
                    stack.append(target)

        return frozenset(closure)

    def reachable_states(self) -> FrozenSet[Label]:
        """Return the states reachable from the initial state by any move."""
        if self.initial_state is None:
            return frozenset()
        successors: Dict[Label, List[Label]] = {}
        for t in self.transitions:
            successors.setdefault(t.source, []).append(t.target)

        seen: Set[Label] = {self.initial_state}
        queue: Deque[Label] = deque([self.initial_state])
        while queue:
            current = queue.popleft()
            for target in successors.get(current, ()):
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        return frozenset(seen)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def apply(self, sequence: Iterable[Symbol]) -> RunResult:
        """Simulate the automaton over ``sequence`` without building a DFA.

        The run never raises: an unknown symbol or a dead end makes it stop
        with ``status=False`` and the march consumed so far.
        """
        march: List[FrozenSet[Label]] = []
        try:
            if self.initial_state is None:
                march.append(frozenset())
            else:
                march.append(self.epsilon_closure([self.initial_state]))

            for symbol in sequence:
                if symbol is EPSILON:
                    raise InvalidSymbolError(symbol)
                candidates: Set[Label] = set()
                for state in march[-1]:
                    candidates.update(self.transition(state, symbol))
                if not candidates:
                    return RunResult(False, march)
                closure = self.epsilon_closure(candidates)
                if not closure:
                    return RunResult(False, march)
                march.append(closure)
        except AutomatonError:
            return RunResult(False, march)

        return RunResult(True, march)

    def accepts(self, sequence: Iterable[Symbol]) -> bool:
        """Check whether a complete run over ``sequence`` ends in a final state."""
        result = self.apply(sequence)
        return result.status and bool(result.last & self.final_states)

    # ------------------------------------------------------------------
    # Structural properties
    # ------------------------------------------------------------------

    def is_deterministic(self) -> bool:
        """No epsilon moves and at most one target per (state, symbol)."""
        for (_, symbol), targets in self._delta.items():
            if symbol is EPSILON or len(targets) > 1:
                return False
        return True

    def is_complete(self) -> bool:
        """Every state has a move on every symbol.

        The zero-state automaton is never complete: it has no state to run
        from.
        """
        if self.initial_state is None:
            return False
        return all(
            (state, symbol) in self._delta
            for state in self.states
            for symbol in self.alphabet
        )

    def is_deterministic_complete(self) -> bool:
        return self.is_deterministic() and self.is_complete()

    def normalize(self) -> "Automaton":
        """Relabel states to ``0..n-1`` following their order in ``states``.

        Structurally equal labels map to the same index. The receiver is left
        untouched; a new automaton is returned.
        """
        index = {label: i for i, label in enumerate(self.states)}
        initial = None
        if self.initial_state is not None:
            initial = index[self.initial_state]
        return Automaton.create(
            alphabet=self.alphabet,
            number_of_states=len(self.states),
            initial_state=initial,
            final_states=[index[state] for state in self.final_states],
            transitions=[
                Transition(index[t.source], index[t.target], t.symbol)
                for t in self.transitions
            ],
        )

    # ------------------------------------------------------------------
    # Derived automata
    # ------------------------------------------------------------------

    def complement(self) -> "Automaton":
        from fautomaton.automaton.combinators import complement

        return complement(self)

    def completion(self) -> "Automaton":
        from fautomaton.automaton.combinators import completion

        return completion(self)

    def union(self, other: "Automaton", config: Config = None) -> "Automaton":
        from fautomaton.automaton.combinators import union

        return union(self, other, config)

    def intersection(self, other: "Automaton", config: Config = None) -> "Automaton":
        from fautomaton.automaton.combinators import intersection

        return intersection(self, other, config)

    def mirror(self) -> "Automaton":
        from fautomaton.automaton.combinators import mirror

        return mirror(self)

    def concat(self, other: "Automaton") -> "Automaton":
        from fautomaton.automaton.combinators import concat

        return concat(self, other)

    def iteration(self, accept_empty: bool = True) -> "Automaton":
        from fautomaton.automaton.combinators import iteration

        return iteration(self, accept_empty)

    def determinize(self, config: Config = None) -> "Automaton":
        from fautomaton.automaton.subset import determinize

        return determinize(self, config)

    def minimize(self) -> "Automaton":
        from fautomaton.automaton.minimize import minimize

        return minimize(self)
