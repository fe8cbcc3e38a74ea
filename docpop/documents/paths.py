##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Helpers for reading and writing values at dotted field paths.

A path such as `comments.author` walks into `comments`, and when that value
is a list of subdocuments it continues into every element. `iter_slots`
exposes each concrete location as a `(container, key)` pair so callers can
both read and replace the value there.
"""

from typing import Any, Dict, Iterator, List, Tuple


MISSING = object()


def split_path(path: str) -> List[str]:
    """
    Split a dotted path into its segments.

    Args:
        path: A dotted path (e.g. "author.company").

    Returns:
        The list of segments.
    """
    return [segment for segment in path.split(".") if segment]


def iter_slots(document: Dict, path: str) -> Iterator[Tuple[Dict, str]]:
    """
    Yield every `(container, key)` location addressed by `path`.

    The final key does not have to exist in the container; intermediate
    segments must resolve to dictionaries, or to lists whose dictionary
    elements are walked in order. Anything else ends that branch.

    Args:
        document: The document to walk.
        path: A dotted path.

    Yields:
        Tuples of the dictionary holding the last segment and that segment.
    """
    segments = split_path(path)
    if not segments:
        return

    def walk(node: Any, index: int) -> Iterator[Tuple[Dict, str]]:
        if isinstance(node, list):
            for item in node:
                yield from walk(item, index)
            return
        if not isinstance(node, dict):
            return
        key = segments[index]
        if index == len(segments) - 1:
            yield node, key
            return
        if key in node:
            yield from walk(node[key], index + 1)

    yield from walk(document, 0)


def get_path(document: Dict, path: str, default: Any = None) -> Any:
    """
    Read the value at a dotted path, without walking into lists.

    Args:
        document: The document to read from.
        path: A dotted path.
        default: The value returned when the path does not exist.

    Returns:
        The value at `path` or `default`.
    """
    node = document
    for segment in split_path(path):
        if not isinstance(node, dict) or segment not in node:
            return default
        node = node[segment]
    return node


def set_path(document: Dict, path: str, value: Any):
    """
    Write a value at a dotted path, creating intermediate dictionaries.

    Args:
        document: The document to modify in place.
        path: A dotted path.
        value: The value to store.

    Raises:
        ValueError: If an intermediate segment holds a non-dict value.
    """
    segments = split_path(path)
    if not segments:
        raise ValueError("Cannot set a value at an empty path.")

    node = document
    for segment in segments[:-1]:
        child = node.get(segment, MISSING)
        if child is MISSING:
            child = {}
            node[segment] = child
        elif not isinstance(child, dict):
            raise ValueError(f"Cannot set '{path}': '{segment}' is not a subdocument.")
        node = child
    node[segments[-1]] = value


def delete_path(document: Dict, path: str):
    """
    Remove the value at a dotted path if it exists.

    Args:
        document: The document to modify in place.
        path: A dotted path.
    """
    segments = split_path(path)
    node = document
    for segment in segments[:-1]:
        node = node.get(segment) if isinstance(node, dict) else None
        if node is None:
            return
    if isinstance(node, dict):
        node.pop(segments[-1], None)
