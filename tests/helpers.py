"""Word enumeration helpers shared by the language-level test suites."""

from itertools import product


def words(alphabet, max_length):
    """Every word over ``alphabet`` up to ``max_length`` symbols."""
    for length in range(max_length + 1):
        for letters in product(alphabet, repeat=length):
            yield "".join(letters)


def language(automaton, max_length=4):
    """Accepted words up to ``max_length``, the sample used for equivalence checks."""
    return {w for w in words(automaton.alphabet, max_length) if automaton.accepts(w)}


def same_language(first, second, max_length=5):
    return all(
        first.accepts(w) == second.accepts(w)
        for w in words(first.alphabet, max_length)
    )
