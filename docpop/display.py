##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Manages formatting for displaying information to the console.
"""
import logging
import os
from typing import Any, Dict, Optional

from tabulate import tabulate

from docpop.config import Config
from docpop.config.configfile import default_config_info
from docpop.exceptions import DocpopError
from docpop.stores.store_base import DocumentStore
from docpop.utils import get_package_versions


LOG = logging.getLogger("docpop")


def get_store_info(store: DocumentStore) -> Dict[str, Any]:
    """
    Gather the name, version, and collections of a store.

    Connection problems are reported in the returned table rather than raised.

    Args:
        store: The store to inspect.

    Returns:
        A dictionary of display labels to values.
    """
    info: Dict[str, Any] = {"store": store.get_name()}
    try:
        info["store version"] = store.get_version()
        collections = store.list_collections()
        info["collections"] = ", ".join(collections) if collections else "(none)"
    except DocpopError as exc:
        LOG.debug(f"Could not reach the '{store.get_name()}' store: {exc}")
        info["store version"] = f"Store error: {exc}"
    return info


def display_config_info(config: Optional[Config] = None, store: Optional[DocumentStore] = None):
    """
    Prints useful configuration information for docpop to the console.

    Args:
        config: The loaded application config, if any.
        store: The store built from `config`, if any.
    """
    print("docpop Configuration")
    print("-" * 25)
    print("")

    conf = default_config_info()
    if config is not None and config.populate is not None:
        conf["id field"] = config.populate.id_field
        conf["max workers"] = config.populate.max_workers
    if store is not None:
        conf.update(get_store_info(store))

    print(tabulate(conf.items(), tablefmt="presto"))


def print_info(config: Optional[Config] = None, store: Optional[DocumentStore] = None):
    """
    Provide version and location information about python and packages to
    facilitate user troubleshooting. Also provides info about the configured store.

    Args:
        config: The loaded application config, if any.
        store: The store built from `config`, if any.
    """
    display_config_info(config, store)

    print("")
    print("Python Configuration")
    print("-" * 25)
    print("")
    package_list = ["pip", "docpop", "coloredlogs", "pyyaml", "redis", "tabulate"]
    print(get_package_versions(package_list))
    pythonpath = os.environ.get("PYTHONPATH")
    print(f"$PYTHONPATH: {pythonpath}")
