##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Redis-based document store for docpop.

This package keeps every collection in a Redis hash.

Modules:
    redis_store: Implements the `DocumentStore` interface using Redis.
"""

from docpop.stores.redis.redis_store import RedisStore


__all__ = ["RedisStore"]
