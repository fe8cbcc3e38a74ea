##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `documents` package holds the helpers that operate on plain documents
(dictionaries) independently of any store.

Modules:
    reference: The `Reference` value type and the `ABSENT` marker.
    paths: Reading and writing values at dotted field paths.
    projection: Parsing and applying field projections.
    matching: Evaluating filter dictionaries and sorting documents.
"""

from docpop.documents.matching import matches, normalize_sort, sort_documents
from docpop.documents.paths import get_path, iter_slots, set_path
from docpop.documents.projection import Projection
from docpop.documents.reference import ABSENT, Reference


__all__ = [
    "ABSENT",
    "Projection",
    "Reference",
    "get_path",
    "iter_slots",
    "matches",
    "normalize_sort",
    "set_path",
    "sort_documents",
]
