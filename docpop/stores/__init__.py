##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `stores` package contains the document stores the resolver reads from.

Every store implements the `DocumentStore` interface from `store_base`. The
concrete stores live in their own modules so that importing this package
does not import any database client.

Subpackages:
    sqlite: A store that keeps every collection in one SQLite table.
    redis: A store that keeps each collection in a Redis hash.

Modules:
    store_base: The abstract `DocumentStore` interface.
    memory_store: A thread-safe in-process store.
    store_factory: The `StoreFactory` used to create stores by name.
"""
