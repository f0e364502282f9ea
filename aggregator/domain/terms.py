"""
Grouping of flat term lists by taxonomy.
"""

from typing import Dict, Iterable, List

from .records import Term


def group_terms(terms: Iterable[Term]) -> Dict[str, List[Term]]:
    """
    Group terms by the name of their taxonomy.

    Taxonomies keep the order in which they were first seen and terms
    keep their order within each taxonomy. Nothing is deduplicated.

    Args:
        terms: Term records in any order

    Returns:
        Mapping of taxonomy name to its terms
    """
    grouped: Dict[str, List[Term]] = {}
    for term in terms:
        grouped.setdefault(term.taxonomy, []).append(term)
    return grouped
