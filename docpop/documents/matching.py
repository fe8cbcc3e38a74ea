##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Filter evaluation and sorting for plain documents.

Filters are dictionaries in the familiar document-database style:

    {"active": True}
    {"age": {"$gte": 12, "$lte": 15}}
    {"$or": [{"role": "admin"}, {"tags": {"$in": ["staff"]}}]}

Stores that can't push a filter down to their backend evaluate it here with
`matches`. Stores that can look up documents by identifier use
`extract_id_candidates` to find the identifiers a filter is restricted to.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from docpop.documents.paths import MISSING, get_path
from docpop.exceptions import InvalidSpec


LOG = logging.getLogger(__name__)

SortSpec = Union[str, Dict[str, int], Sequence[Tuple[str, int]]]


def _equals(value: Any, expected: Any) -> bool:
    if value is MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(value: Any, expected: Any) -> bool:
        if value is MISSING or value is None:
            return False
        try:
            return op(value, expected)
        except TypeError:
            return False

    return compare


def _in(value: Any, expected: Any) -> bool:
    if not isinstance(expected, (list, tuple, set, frozenset)):
        raise InvalidSpec(f"$in/$nin expect a list, got {type(expected).__name__}.")
    if value is MISSING:
        return None in expected
    if isinstance(value, list):
        return any(item in expected for item in value)
    return value in expected


def _exists(value: Any, expected: Any) -> bool:
    return (value is not MISSING) == bool(expected)


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": _equals,
    "$ne": lambda value, expected: not _equals(value, expected),
    "$gt": _compare(lambda a, b: a > b),
    "$gte": _compare(lambda a, b: a >= b),
    "$lt": _compare(lambda a, b: a < b),
    "$lte": _compare(lambda a, b: a <= b),
    "$in": _in,
    "$nin": lambda value, expected: not _in(value, expected),
    "$exists": _exists,
}


def _is_operator_dict(condition: Any) -> bool:
    return isinstance(condition, dict) and bool(condition) and all(str(key).startswith("$") for key in condition)


def validate_filter(query: Optional[Dict]):
    """
    Check a filter for unknown operators and malformed logical clauses.

    Args:
        query: The filter dictionary, or None.

    Raises:
        InvalidSpec: If the filter is malformed.
    """
    if query is None:
        return
    if not isinstance(query, dict):
        raise InvalidSpec(f"A filter must be a dict, got {type(query).__name__}.")

    for key, condition in query.items():
        if key in ("$and", "$or"):
            if not isinstance(condition, (list, tuple)) or not condition:
                raise InvalidSpec(f"'{key}' expects a non-empty list of filters.")
            for sub_query in condition:
                validate_filter(sub_query)
        elif str(key).startswith("$"):
            raise InvalidSpec(f"Unknown top-level filter operator '{key}'.")
        elif _is_operator_dict(condition):
            for operator in condition:
                if operator not in OPERATORS:
                    raise InvalidSpec(f"Unknown filter operator '{operator}' on field '{key}'.")


def matches(document: Dict, query: Optional[Dict]) -> bool:
    """
    Evaluate a filter against a document.

    Args:
        document: The document to test.
        query: The filter dictionary. None and `{}` match everything.

    Returns:
        True if the document satisfies every condition of the filter.

    Raises:
        InvalidSpec: If the filter uses an unknown operator.
    """
    if not query:
        return True

    for key, condition in query.items():
        if key == "$and":
            if not all(matches(document, sub_query) for sub_query in condition):
                return False
        elif key == "$or":
            if not any(matches(document, sub_query) for sub_query in condition):
                return False
        elif str(key).startswith("$"):
            raise InvalidSpec(f"Unknown top-level filter operator '{key}'.")
        else:
            value = get_path(document, key, MISSING)
            if _is_operator_dict(condition):
                for operator, expected in condition.items():
                    try:
                        evaluate = OPERATORS[operator]
                    except KeyError as exc:
                        raise InvalidSpec(f"Unknown filter operator '{operator}' on field '{key}'.") from exc
                    if not evaluate(value, expected):
                        return False
            elif not _equals(value, condition):
                return False
    return True


def extract_id_candidates(query: Optional[Dict], id_field: str) -> Optional[List[Any]]:
    """
    Find the identifiers a filter restricts the result to, if it does.

    Only conditions that every matching document must satisfy are considered:
    a top-level equality or `$in` on `id_field`, possibly inside a top-level
    `$and`. The caller still has to evaluate the whole filter afterwards.

    Args:
        query: The filter dictionary.
        id_field: The identifier field.

    Returns:
        The candidate identifiers, or None if the filter doesn't restrict them.
    """
    if not query:
        return None

    clauses = [query] + [sub_query for sub_query in query.get("$and", []) if isinstance(sub_query, dict)]
    for clause in clauses:
        if id_field not in clause:
            continue
        condition = clause[id_field]
        if _is_operator_dict(condition):
            if "$in" in condition:
                return list(condition["$in"])
            if "$eq" in condition:
                return [condition["$eq"]]
        else:
            return [condition]
    return None


def normalize_sort(sort: Optional[SortSpec]) -> List[Tuple[str, int]]:
    """
    Convert any accepted sort form to a list of `(field, direction)` pairs.

    Accepted forms are `{"age": -1, "name": 1}`, `[("age", -1)]`, and
    `"-age name"`. Directions may also be given as "asc"/"desc".

    Args:
        sort: The sort specification, or None.

    Returns:
        A list of `(field, 1 | -1)` pairs; empty when there is nothing to sort by.

    Raises:
        InvalidSpec: If the sort specification is malformed.
    """
    if not sort:
        return []

    if isinstance(sort, str):
        pairs = [(name[1:], -1) if name.startswith("-") else (name.lstrip("+"), 1) for name in sort.split()]
    elif isinstance(sort, dict):
        pairs = list(sort.items())
    elif isinstance(sort, (list, tuple)):
        pairs = [(item, 1) if isinstance(item, str) else tuple(item) for item in sort]
    else:
        raise InvalidSpec(f"Unsupported sort type {type(sort).__name__}.")

    normalized = []
    for pair in pairs:
        if len(pair) != 2:
            raise InvalidSpec(f"Invalid sort entry {pair!r}.")
        field, direction = pair
        if isinstance(direction, str):
            direction = {"asc": 1, "ascending": 1, "desc": -1, "descending": -1}.get(direction.lower(), direction)
        if not field or direction not in (1, -1):
            raise InvalidSpec(f"Invalid sort entry {pair!r}; direction must be 1 or -1.")
        normalized.append((field, direction))
    return normalized


def _sort_key(value: Any) -> Tuple:
    if value is MISSING or value is None:
        return (0,)
    if isinstance(value, bool):
        return (1, "bool", value)
    if isinstance(value, (int, float)):
        return (1, "number", value)
    if isinstance(value, str):
        return (1, "str", value)
    return (1, type(value).__name__, repr(value))


def sort_documents(documents: List[Dict], sort: Optional[SortSpec]) -> List[Dict]:
    """
    Sort documents by one or more fields.

    Missing values sort before present ones in ascending order. Values of
    different types are grouped by type before being compared.

    Args:
        documents: The documents to sort. The list itself is not modified.
        sort: The sort specification in any accepted form.

    Returns:
        A new, sorted list.
    """
    ordered = list(documents)
    # Stable sorts applied from the least to the most significant field
    for field, direction in reversed(normalize_sort(sort)):
        ordered.sort(key=lambda doc, name=field: _sort_key(get_path(doc, name, MISSING)), reverse=direction < 0)
    return ordered
