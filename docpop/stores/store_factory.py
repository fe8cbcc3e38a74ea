##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Store factory for selecting and instantiating document stores in docpop.

This module defines the `StoreFactory` class, which maps store names (and
aliases) to `DocumentStore` implementations, and `create_store_from_config`,
which builds the store described by the `store` section of the app config.

The factory raises a clear error if an unsupported store is requested.
"""

import logging
from types import SimpleNamespace
from typing import Any, Dict, Type

from docpop.abstracts import BaseFactory
from docpop.exceptions import StoreNotSupportedError
from docpop.stores.memory_store import MemoryStore
from docpop.stores.redis.redis_store import RedisStore
from docpop.stores.sqlite.sqlite_store import SQLiteStore
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)

# Which settings of the `store` config section each built-in store accepts
STORE_SETTINGS = {
    "memory": [],
    "sqlite": ["path", "timeout"],
    "redis": ["server", "port", "db", "password", "key_prefix", "ssl"],
}


class StoreFactory(BaseFactory):
    """
    Factory class for managing and instantiating supported document stores.

    Attributes:
        _registry (Dict[str, DocumentStore]): Maps canonical store names to store classes.
        _aliases (Dict[str, str]): Maps alternate names to canonical store names.

    Methods:
        register: Register a new store class and optional aliases.
        list_available: Return a list of supported store names.
        create: Instantiate a store class by name or alias.
        get_component_info: Return metadata about a registered store.
    """

    def _register_builtins(self):
        """
        Register built-in store implementations.
        """
        self.register("memory", MemoryStore)
        self.register("sqlite", SQLiteStore, aliases=["sqlite3"])
        self.register("redis", RedisStore, aliases=["rediss"])

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of DocumentStore.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass DocumentStore.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, DocumentStore):
            raise TypeError(f"{component_class} must inherit from DocumentStore")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering store plugins.

        Returns:
            The entry point namespace for docpop store plugins.
        """
        return "docpop.stores"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Raise an appropriate exception for unsupported stores.

        Args:
            msg: The message to add to the error being raised.

        Raises:
            StoreNotSupportedError: Always.
        """
        raise StoreNotSupportedError(msg)


store_factory = StoreFactory()


def create_store_from_config(store_config: SimpleNamespace, id_field: str = "_id") -> DocumentStore:
    """
    Build the store described by the `store` section of the app config.

    Only the settings the chosen store understands are passed to it; a
    `rediss` store name turns on TLS.

    Args:
        store_config: The `store` section of a `Config` object.
        id_field: The field that holds each document's identifier.

    Returns:
        A ready-to-use `DocumentStore`.

    Raises:
        StoreNotSupportedError: If the configured store name is unknown.
    """
    name = getattr(store_config, "name", "sqlite")
    canonical = store_factory.canonical_name(name)
    kwargs: Dict[str, Any] = {"id_field": id_field}
    for setting in STORE_SETTINGS.get(canonical, []):
        value = getattr(store_config, setting, None)
        if value is not None:
            kwargs[setting] = value
    if name == "rediss":
        kwargs["ssl"] = True

    LOG.debug(f"Creating '{name}' store with settings {sorted(kwargs)}.")
    return store_factory.create(name, kwargs)
