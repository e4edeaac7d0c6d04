"""Structural-equality helpers for state labels.

Fresh automata are labelled with integers. Derived constructions produce
composite labels: tuples for product pairs and frozensets for subsets and
equivalence classes. Both hash and compare by content, so dict and set
lookups on labels are structural, never identity based.
"""

from typing import Any, Hashable, Iterable, List, Tuple

Label = Hashable


def canonical_label(value: Any) -> Label:
    """Convert a caller-supplied label to its hashable canonical form.

    Tuples keep their order (product pairs). Lists, sets and frozensets
    become frozensets, so groups compare equal regardless of order.
    """
    if isinstance(value, tuple):
        return tuple(canonical_label(item) for item in value)
    if isinstance(value, (list, set, frozenset)):
        return frozenset(canonical_label(item) for item in value)
    return value


def same_label(first: Any, second: Any) -> bool:
    """Check whether two labels denote the same state."""
    return canonical_label(first) == canonical_label(second)


def unordered_pairs(group: Iterable[Label]) -> List[Tuple[Label, Label]]:
    """Enumerate every unordered pair of distinct members of a group.

    Members are deduplicated structurally and each pair is listed once,
    in first-seen order.

    Args:
        group: The labels to pair up.

    Returns:
        List of (earlier, later) pairs.
    """
    members: List[Label] = list(dict.fromkeys(canonical_label(m) for m in group))
    pairs: List[Tuple[Label, Label]] = []
    for i, first in enumerate(members):
        for second in members[i + 1 :]:
            pairs.append((first, second))
    return pairs

