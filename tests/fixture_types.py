##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
It's hard to type hint pytest fixtures in a way that makes it clear
that the variable being used is a fixture. This module will created
aliases for these fixtures in order to make it easier to track what's
happening.

The types here will be defined as such:
- `FixtureCallable`: A fixture that returns a function
- `FixtureDict`: A fixture that returns a dictionary
- `FixtureList`: A fixture that returns a list
- `FixtureMemoryStore`: A fixture that returns a `MemoryStore`
- `FixtureRedis`: A fixture that returns a Redis client
- `FixtureSQLiteStore`: A fixture that returns a `SQLiteStore`
- `FixtureStr`: A fixture that returns a string
"""

from collections.abc import Callable
from typing import Annotated, Dict, List, TypeVar

import pytest
from redis import Redis

from docpop.stores.memory_store import MemoryStore
from docpop.stores.sqlite.sqlite_store import SQLiteStore


K = TypeVar("K")
V = TypeVar("V")

FixtureCallable = Annotated[Callable, pytest.fixture]
FixtureDict = Annotated[Dict[K, V], pytest.fixture]
FixtureList = Annotated[List[K], pytest.fixture]
FixtureMemoryStore = Annotated[MemoryStore, pytest.fixture]
FixtureRedis = Annotated[Redis, pytest.fixture]
FixtureSQLiteStore = Annotated[SQLiteStore, pytest.fixture]
FixtureStr = Annotated[str, pytest.fixture]
