##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `abstracts` package provides ABC classes that can be used throughout
docpop's codebase.

Modules:
    factory: Contains `BaseFactory`, used to manage pluggable components in docpop.
"""

from docpop.abstracts.factory import BaseFactory


__all__ = ["BaseFactory"]
