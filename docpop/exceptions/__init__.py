##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Module of all docpop-specific exception types.

Two of these matter to callers of the resolver and they are never confused
with one another:

- `InvalidSpec`: the caller handed in something malformed. Fatal to the call.
- `StoreUnavailable`: the document store could not answer. Surfaced as-is,
  never retried here and never turned into an absent reference.
"""

__all__ = (
    "DocpopError",
    "InvalidSpec",
    "StoreUnavailable",
    "StoreNotSupportedError",
)


class DocpopError(Exception):
    """
    Base class for every error raised by docpop.
    """


class InvalidSpec(DocpopError):
    """
    Exception to signal a malformed reference spec, projection, filter,
    or sort given by the caller.
    """


class StoreUnavailable(DocpopError):
    """
    Exception to signal that the document store failed to answer a query
    (I/O error, lost connection, timeout, or cancellation).
    """


class StoreNotSupportedError(DocpopError):
    """
    Exception to signal that the requested document store is not supported.
    """
