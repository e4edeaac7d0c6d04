"""Tests for determinization by subset construction."""

import logging

import pytest

from fautomaton import (
    EPSILON,
    Automaton,
    Config,
    PreconditionError,
    StateLimitError,
    determinize,
)

from helpers import same_language


def ends_with_ab():
    """(a|b)*ab"""
    return Automaton.create(
        ["a", "b"], 3, 0, [2], [(0, 0, "a"), (0, 0, "b"), (0, 1, "a"), (1, 2, "b")]
    )


def nth_from_last(n):
    """Words whose n-th symbol from the end is "a"; its DFA needs 2**n states."""
    transitions = [(0, 0, "a"), (0, 0, "b"), (0, 1, "a")]
    for i in range(1, n):
        transitions.extend([(i, i + 1, "a"), (i, i + 1, "b")])
    return Automaton.create(["a", "b"], n + 1, 0, [n], transitions)


def epsilon_nfa():
    """0 -e-> 1, 1 -a-> 2, 0 -b-> 2, 2 final."""
    return Automaton.create(
        ["a", "b"], 3, 0, [2], [(0, 1, EPSILON), (1, 2, "a"), (0, 2, "b")]
    )


# =============================================================================
# SUBSET CONSTRUCTION
# =============================================================================


class TestDeterminize:
    """NFA to DFA conversion."""

    def test_result_is_deterministic(self):
        dfa = ends_with_ab().determinize()
        assert dfa.is_deterministic()

    def test_states_are_subsets(self):
        dfa = ends_with_ab().determinize()
        assert dfa.initial_state == frozenset({0})
        assert set(dfa.states) == {
            frozenset({0}),
            frozenset({0, 1}),
            frozenset({0, 2}),
        }
        assert dfa.final_states == frozenset({frozenset({0, 2})})

    def test_preserves_language(self):
        nfa = ends_with_ab()
        assert same_language(nfa, nfa.determinize())

    def test_epsilon_moves(self):
        nfa = epsilon_nfa()
        dfa = determinize(nfa)
        assert dfa.initial_state == frozenset({0, 1})
        assert dfa.transition(frozenset({0, 1}), "a").single == frozenset({2})
        assert dfa.transition([1, 0], "b").single == frozenset({2})
        assert dfa.size() == 2
        assert same_language(nfa, dfa)

    def test_initial_subset_can_be_final(self):
        nfa = Automaton.create(["a"], 2, 0, [1], [(0, 1, EPSILON), (1, 1, "a")])
        dfa = nfa.determinize()
        assert dfa.initial_state in dfa.final_states
        assert dfa.accepts("")
        assert dfa.accepts("aaa")

    def test_empty_images_are_skipped(self):
        dfa = epsilon_nfa().determinize()
        assert dfa.transition(frozenset({2}), "a").is_empty
        assert not dfa.is_complete()

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_exponential_blowup(self, n):
        dfa = nth_from_last(n).determinize()
        assert dfa.size() == 2 ** n
        assert same_language(nth_from_last(n), dfa)

    def test_normalized_result(self):
        dfa = nth_from_last(3).determinize().normalize()
        assert dfa.states == tuple(range(8))
        assert dfa.initial_state == 0
        assert same_language(nth_from_last(3), dfa)

    def test_logs_the_construction(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fautomaton.automaton.subset"):
            ends_with_ab().determinize()
        assert "Subset construction" in caplog.text


class TestDeterminizePreconditions:
    """Determinization is only defined for nondeterministic automata."""

    def test_rejects_deterministic_automata(self):
        dfa = ends_with_ab().determinize()
        with pytest.raises(PreconditionError):
            dfa.determinize()

    def test_rejects_zero_state_automaton(self):
        with pytest.raises(PreconditionError):
            Automaton.create(["a"], 0).determinize()

    def test_state_limit(self):
        with pytest.raises(StateLimitError) as info:
            nth_from_last(4).determinize(Config(max_states=5))
        assert info.value.limit == 5

    def test_limit_equal_to_size_is_accepted(self):
        assert nth_from_last(3).determinize(Config(max_states=8)).size() == 8
