##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Field projections: which fields of a document are returned.

A projection is either an inclusion list ("only these fields") or an
exclusion list ("everything but these fields"). They can be written in any
of the following ways and all parse to the same `Projection`:

    "name age -_id"
    ["name", "age", "-_id"]
    {"name": 1, "age": 1, "_id": 0}

The two kinds can't be mixed, with one exception: the identifier may be
excluded from an inclusion projection.
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, Tuple

from docpop.documents.paths import MISSING, delete_path, get_path, set_path
from docpop.exceptions import InvalidSpec


class Projection:
    """
    An immutable set of included and excluded field paths.

    Attributes:
        include (Tuple[str]): Field paths to keep, in the order they were given.
        exclude (Tuple[str]): Field paths to drop.

    Methods:
        parse: Build a projection from any of the accepted forms.
        validate: Reject projections that mix inclusion and exclusion.
        with_field: Return a projection guaranteed to keep a field.
        excludes: Check whether a field is explicitly excluded.
        apply: Produce a projected copy of a document.
        to_dict: Convert back to the `{field: 1|0}` form.
    """

    __slots__ = ("include", "exclude")

    def __init__(self, include: Iterable[str] = (), exclude: Iterable[str] = ()):
        self.include: Tuple[str, ...] = tuple(dict.fromkeys(include))
        self.exclude: Tuple[str, ...] = tuple(dict.fromkeys(exclude))

    @classmethod
    def parse(cls, value: Any) -> "Projection":
        """
        Build a projection from a string, a list of names, a dict, or another projection.

        Args:
            value: The projection in any accepted form. `None` and empty values
                produce an empty projection (the full document).

        Returns:
            The parsed `Projection`.

        Raises:
            InvalidSpec: If `value` has an unsupported type or a dict value is not 0/1.
        """
        if value is None:
            return cls()
        if isinstance(value, Projection):
            return value

        include, exclude = [], []
        if isinstance(value, str):
            names = value.replace(",", " ").split()
        elif isinstance(value, (list, tuple, set, frozenset)):
            names = list(value)
        elif isinstance(value, dict):
            for name, flag in value.items():
                if flag in (1, True):
                    include.append(name)
                elif flag in (0, False):
                    exclude.append(name)
                else:
                    raise InvalidSpec(f"Projection value for '{name}' must be 0 or 1, got {flag!r}.")
            return cls(include, exclude)
        else:
            raise InvalidSpec(f"Unsupported projection type {type(value).__name__}.")

        for name in names:
            if not isinstance(name, str) or not name.strip("-+"):
                raise InvalidSpec(f"Invalid projection field {name!r}.")
            if name.startswith("-"):
                exclude.append(name[1:])
            else:
                include.append(name.lstrip("+"))
        return cls(include, exclude)

    @property
    def is_empty(self) -> bool:
        """True if the projection keeps the full document."""
        return not self.include and not self.exclude

    @property
    def is_inclusion(self) -> bool:
        """True if the projection lists the fields to keep."""
        return bool(self.include)

    def validate(self, id_field: str = "_id"):
        """
        Reject projections that mix inclusion and exclusion.

        Args:
            id_field: The identifier field, which may always be excluded.

        Raises:
            InvalidSpec: If both kinds are present for fields other than `id_field`.
        """
        if self.include and any(name != id_field for name in self.exclude):
            raise InvalidSpec(
                f"Cannot mix inclusion {list(self.include)} and exclusion {list(self.exclude)} "
                f"in one projection (only '{id_field}' may be excluded)."
            )

    def excludes(self, field: str) -> bool:
        """
        Check whether a field is explicitly excluded.

        Args:
            field: The field path.

        Returns:
            True if `field` appears in the exclusion list.
        """
        return field in self.exclude

    def with_field(self, field: str) -> "Projection":
        """
        Return a projection that keeps `field` in addition to what this one keeps.

        Args:
            field: The field path to keep.

        Returns:
            A new projection, or this one if it already keeps `field`.
        """
        if self.is_empty:
            return self
        exclude = [name for name in self.exclude if name != field]
        include = list(self.include)
        if include and field not in include:
            include.append(field)
        if include == list(self.include) and exclude == list(self.exclude):
            return self
        return Projection(include, exclude)

    def apply(self, document: Dict, id_field: str = "_id") -> Dict:
        """
        Produce a projected deep copy of a document.

        Args:
            document: The document to project. It is not modified.
            id_field: The identifier field, kept by inclusion projections
                unless explicitly excluded.

        Returns:
            A new dictionary holding only the projected fields.
        """
        if self.is_empty:
            return deepcopy(document)

        if self.include:
            projected: Dict = {}
            names = list(self.include)
            if id_field not in names and id_field not in self.exclude:
                names.insert(0, id_field)
            for name in names:
                if name in self.exclude:
                    continue
                value = get_path(document, name, MISSING)
                if value is not MISSING:
                    set_path(projected, name, deepcopy(value))
            return projected

        projected = deepcopy(document)
        for name in self.exclude:
            delete_path(projected, name)
        return projected

    def to_dict(self) -> Dict[str, int]:
        """
        Convert the projection to the `{field: 1|0}` form.

        Returns:
            A dictionary mapping field paths to 1 (include) or 0 (exclude).
        """
        result = {name: 1 for name in self.include}
        result.update({name: 0 for name in self.exclude})
        return result

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Projection):
            return NotImplemented
        return set(self.include) == set(other.include) and set(self.exclude) == set(other.exclude)

    def __hash__(self) -> int:
        return hash((frozenset(self.include), frozenset(self.exclude)))

    def __repr__(self) -> str:
        return f"Projection({self.to_dict()})"
