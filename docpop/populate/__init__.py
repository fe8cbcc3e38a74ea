##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `populate` package replaces reference identifiers with the documents
they point at.

Modules:
    reference_spec: `ReferenceSpec`, the description of one path to populate.
    resolver: `ReferenceResolver` and `resolve`, the batched resolution pass.
    query: `Query`, a builder that runs a root query and populates its results.
"""

from docpop.populate.query import Query
from docpop.populate.reference_spec import ReferenceSpec, normalize_specs
from docpop.populate.resolver import ReferenceResolver, resolve


__all__ = ["Query", "ReferenceResolver", "ReferenceSpec", "normalize_specs", "resolve"]
