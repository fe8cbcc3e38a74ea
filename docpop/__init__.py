##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
docpop: Document reference population.

This module contains the source code for docpop. The most commonly used
entry points are re-exported here:

    - `resolve` / `ReferenceResolver`: substitute referenced documents.
    - `ReferenceSpec`: describe one path to populate.
    - `Query`: build and execute a query with population.
    - `ABSENT` / `Reference`: the values the resolver reads and writes.
"""

__version__ = "0.3.0"
VERSION = __version__

# These imports sit below the version constants since setup.py reads VERSION
# from this module.
from docpop.documents.reference import ABSENT, Reference  # noqa: E402
from docpop.populate.query import Query  # noqa: E402
from docpop.populate.reference_spec import ReferenceSpec  # noqa: E402
from docpop.populate.resolver import ReferenceResolver, resolve  # noqa: E402


__all__ = [
    "ABSENT",
    "Query",
    "Reference",
    "ReferenceResolver",
    "ReferenceSpec",
    "VERSION",
    "resolve",
]
