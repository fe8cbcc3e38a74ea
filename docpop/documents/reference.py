##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Values that live inside documents before and after population.

A reference field usually holds a raw identifier and the target collection
comes from the `ReferenceSpec`. A `Reference` carries its own collection,
which lets one field point at documents of different collections.

`ABSENT` is what the resolver writes where a reference is unset or points
at nothing.
"""

from dataclasses import dataclass
from typing import Any, Dict


class _Absent:
    """Singleton marker for a reference that resolved to nothing."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: Dict) -> "_Absent":
        return self

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


@dataclass(frozen=True)
class Reference:
    """
    An identifier paired with the collection it lives in.

    Attributes:
        collection: Name of the collection holding the referenced document.
        id: Identifier of the referenced document.
    """

    collection: str
    id: Any

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the reference to a JSON-friendly dictionary.

        Returns:
            A dictionary with `$ref` and `$id` keys.
        """
        return {"$ref": self.collection, "$id": self.id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reference":
        """
        Build a reference from the dictionary produced by `to_dict`.

        Args:
            data: A dictionary with `$ref` and `$id` keys.

        Returns:
            The matching `Reference`.
        """
        return cls(collection=data["$ref"], id=data["$id"])

    @staticmethod
    def is_reference_dict(value: Any) -> bool:
        """
        Check whether a value is the dictionary form of a reference.

        Args:
            value: Any value read from a document.

        Returns:
            True if `value` is a dict holding exactly `$ref` and `$id`.
        """
        return isinstance(value, dict) and set(value) == {"$ref", "$id"}


def is_unset(value: Any) -> bool:
    """
    Check whether a value read at a reference path counts as unset.

    Args:
        value: The raw value.

    Returns:
        True for `None` and `ABSENT`.
    """
    return value is None or value is ABSENT
