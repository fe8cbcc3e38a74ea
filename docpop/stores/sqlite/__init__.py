##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
SQLite-based document store for docpop.

This package persists documents in a local SQLite database file.

Modules:
    sqlite_connection: Provides a context-managed SQLite connection with safe configuration.
    sqlite_store: Implements the `DocumentStore` interface using SQLite.
"""

from docpop.stores.sqlite.sqlite_store import SQLiteStore


__all__ = ["SQLiteStore"]
