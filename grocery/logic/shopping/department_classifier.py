"""Department classifier.

Maps an item name to exactly one shopping department by keyword substring
matching against the ordered DEPARTMENT_TAXONOMY table. The table is
immutable module-level data, so classification is a pure function that is
safe to call from any task or thread.
"""
from typing import List, Optional, Sequence, Tuple

from grocery.utilities.constants import DEFAULT_DEPARTMENT, DEPARTMENT_TAXONOMY

Taxonomy = Sequence[Tuple[str, Sequence[str]]]


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def classify_department(name: str, taxonomy: Optional[Taxonomy] = None) -> str:
    """Return the department for an item name.

    Args:
        name: Free-text item name (any case, surrounding whitespace ignored).
        taxonomy: Ordered (department, keywords) pairs; defaults to DEPARTMENT_TAXONOMY.

    Returns:
        The first department, in table order, having a keyword that occurs in
        the lowercased name; DEFAULT_DEPARTMENT when nothing matches.
    """
    n = _normalize(name)
    if not n:
        return DEFAULT_DEPARTMENT
    for department, keywords in (DEPARTMENT_TAXONOMY if taxonomy is None else taxonomy):
        for keyword in keywords:
            if keyword in n:
                return department
    return DEFAULT_DEPARTMENT


def known_departments(taxonomy: Optional[Taxonomy] = None) -> List[str]:
    """Department names in priority order, followed by the default."""
    names = [dept for dept, _ in (DEPARTMENT_TAXONOMY if taxonomy is None else taxonomy)]
    if DEFAULT_DEPARTMENT not in names:
        names.append(DEFAULT_DEPARTMENT)
    return names


__all__ = ['classify_department', 'known_departments']
