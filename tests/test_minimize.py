"""Tests for DFA minimization by partition refinement."""


import pytest

from fautomaton import (
    Automaton,
    PreconditionError,
    equivalence_classes,
    minimize,
)

from helpers import same_language


def redundant_ends_with_a():
    """Four states, two of them duplicates of the other two."""
    return Automaton.create(
        ["a", "b"],
        4,
        0,
        [1, 3],
        [
            (0, 1, "a"),
            (0, 2, "b"),
            (1, 1, "a"),
            (1, 2, "b"),
            (2, 3, "a"),
            (2, 2, "b"),
            (3, 3, "a"),
            (3, 2, "b"),
        ],
    )


def at_least_two():
    """0 -a-> 1 -a-> 2 -a-> 2, 2 final: words of length >= 2."""
    return Automaton.create(["a"], 3, 0, [2], [(0, 1, "a"), (1, 2, "a"), (2, 2, "a")])


def mod_three_with_copies():
    """Counts "a" modulo 3 with every residue duplicated: 6 states, 3 classes."""
    transitions = []
    for i in range(6):
        transitions.append((i, (i + 1) % 6, "a"))
        transitions.append((i, (i + 3) % 6, "b"))
    return Automaton.create(["a", "b"], 6, 0, [0, 3], transitions)


def trap_and_missing_move():
    """Accepts only "a": 2 is an explicit trap, 3 has no moves at all."""
    return Automaton.create(
        ["a", "b"],
        4,
        0,
        [1],
        [(0, 1, "a"), (1, 3, "a"), (0, 2, "b"), (2, 2, "a"), (2, 2, "b")],
    )


DFAS = [
    redundant_ends_with_a,
    at_least_two,
    mod_three_with_copies,
    trap_and_missing_move,
]


# =============================================================================
# PARTITION REFINEMENT
# =============================================================================


class TestMinimize:
    """Collapsing equivalent states."""

    def test_merges_duplicate_states(self):
        m = redundant_ends_with_a().minimize()
        assert m.size() == 2
        assert set(m.states) == {frozenset({0, 2}), frozenset({1, 3})}
        assert m.initial_state == frozenset({0, 2})
        assert m.final_states == frozenset({frozenset({1, 3})})

    def test_large_classes(self):
        m = mod_three_with_copies().minimize()
        assert m.size() == 3
        assert set(m.states) == {
            frozenset({0, 3}),
            frozenset({1, 4}),
            frozenset({2, 5}),
        }

    def test_two_element_class_is_split(self):
        # Non-finals {0, 1} start as one class; only "1 -a-> final" tells them apart.
        m = at_least_two().minimize()
        assert m.size() == 3
        assert set(m.states) == {frozenset({0}), frozenset({1}), frozenset({2})}

    def test_dead_states_merge_with_missing_moves(self):
        m = trap_and_missing_move().minimize()
        assert m.size() == 3
        assert set(m.states) == {
            frozenset({0}),
            frozenset({1}),
            frozenset({2, 3}),
        }
        assert m.transition(frozenset({1}), "a").single == frozenset({2, 3})
        assert m.transition(frozenset({1}), "b").is_empty

    def test_dead_class_is_kept_in_complete_dfas(self):
        m = trap_and_missing_move().completion().minimize()
        assert m.size() == 3
        assert m.is_deterministic_complete()

    def test_partial_dfa(self):
        a = Automaton.create(["a", "b"], 3, 0, [2], [(0, 1, "a"), (1, 2, "b")])
        m = a.minimize()
        assert m.size() == 3
        assert same_language(a, m)

    def test_drops_unreachable_states(self):
        a = Automaton.create(
            ["a"], 3, 0, [0], [(0, 0, "a"), (1, 2, "a"), (2, 1, "a")]
        )
        m = a.minimize()
        assert m.states == (frozenset({0}),)

    @pytest.mark.parametrize("build", DFAS)
    def test_preserves_language(self, build):
        dfa = build()
        assert same_language(dfa, dfa.minimize())

    @pytest.mark.parametrize("build", DFAS)
    def test_never_increases_state_count(self, build):
        dfa = build()
        assert dfa.minimize().size() <= dfa.size()

    @pytest.mark.parametrize("build", DFAS)
    def test_minimizing_twice(self, build):
        once = build().minimize()
        twice = once.minimize()
        assert twice.size() == once.size()
        assert same_language(once, twice)

    def test_result_is_deterministic(self):
        assert mod_three_with_copies().minimize().is_deterministic()

    def test_zero_state_automaton(self):
        assert Automaton.create(["a"], 0).minimize().size() == 0

    def test_all_states_final(self):
        a = Automaton.create(["a"], 2, 0, [0, 1], [(0, 1, "a"), (1, 0, "a")])
        assert minimize(a).size() == 1

    def test_requires_deterministic_automaton(self):
        nfa = Automaton.create(["a"], 2, 0, [1], [(0, 0, "a"), (0, 1, "a")])
        with pytest.raises(PreconditionError):
            nfa.minimize()


class TestEquivalenceClasses:
    """The partition behind minimize()."""

    def test_classes(self):
        classes = equivalence_classes(redundant_ends_with_a())
        assert sorted(sorted(group) for group in classes) == [[0, 2], [1, 3]]

    def test_without_final_states(self):
        a = Automaton.create(["a"], 2, 0, [], [(0, 1, "a"), (1, 0, "a")])
        assert equivalence_classes(a) == [[0, 1]]

    def test_dead_states_share_a_class(self):
        classes = equivalence_classes(trap_and_missing_move())
        assert sorted(sorted(group) for group in classes) == [[0], [1], [2, 3]]


# =============================================================================
# PIPELINES
# =============================================================================


class TestPipeline:
    """Determinize, complete, minimize and normalize."""

    def test_nfa_to_minimal_dfa(self):
        nfa = Automaton.create(
            ["a", "b"],
            5,
            0,
            [3, 4],
            [(0, 1, "a"), (0, 2, "a"), (1, 3, "b"), (2, 4, "b")],
        )
        dfa = nfa.determinize().completion().minimize().normalize()
        assert dfa.size() == 4
        assert dfa.states == (0, 1, 2, 3)
        assert dfa.is_deterministic_complete()
        assert same_language(nfa, dfa)

    def test_union_then_minimize(self):
        a = Automaton.create(["a"], 2, 0, [1], [(0, 1, "a"), (1, 0, "a")])
        u = a.union(a).minimize()
        assert u.size() == 2
        assert same_language(a, u)
