##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Utility functions to support docpop CLI command handlers.

These helpers add the options shared by the data commands, turn them into a
`Config` and a `DocumentStore`, and parse the `--populate` options of `find`.
"""

import logging
from argparse import ArgumentParser, Namespace
from typing import Any, List, Optional, Tuple

from docpop.config import Config
from docpop.config.configfile import load_app_config
from docpop.populate.reference_spec import ReferenceSpec
from docpop.stores.store_base import DocumentStore
from docpop.stores.store_factory import create_store_from_config
from docpop.utils import load_json_argument


LOG = logging.getLogger("docpop")


def add_store_arguments(parser: ArgumentParser):
    """
    Add the options every command that talks to a store accepts.

    Args:
        parser: The parser of the command.
    """
    parser.add_argument(
        "--local",
        action="store_true",
        help="Ignore any app.yaml and use the default local SQLite store.",
    )
    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Directory holding the app.yaml to use. Default: search the usual locations.",
    )


def get_config_and_store(args: Namespace) -> Tuple[Config, DocumentStore]:
    """
    Load the app config selected by the CLI options and build its store.

    Args:
        args: Parsed CLI arguments holding `local` and `config_dir`.

    Returns:
        The loaded config and the store it describes.
    """
    config = load_app_config(getattr(args, "config_dir", None), local=getattr(args, "local", False))
    store = create_store_from_config(config.store, id_field=config.populate.id_field)
    LOG.debug(f"Using the '{store.get_name()}' store.")
    return config, store


def parse_populate_args(
    populate: Optional[List[str]], populate_json: Optional[str] = None
) -> List[Any]:
    """
    Turn the `--populate` and `--populate-json` options into reference specs.

    `--populate` values look like `PATH` or `PATH:TARGET`; a bare path relies
    on the `--ref` mapping to find its target.

    Args:
        populate: The values of every `--populate` option.
        populate_json: The value of `--populate-json`, a JSON spec or list of specs.

    Returns:
        A list of `ReferenceSpec` objects and spec dicts.

    Raises:
        ValueError: If `--populate-json` is not valid JSON.
    """
    specs: List[Any] = []
    for value in populate or []:
        path, _, target = value.partition(":")
        specs.append(ReferenceSpec(path=path, target=target) if target else path)
    if populate_json:
        decoded = load_json_argument(populate_json, "--populate-json")
        specs.extend(decoded if isinstance(decoded, list) else [decoded])
    return specs


def parse_refs_args(refs: Optional[List[str]]) -> dict:
    """
    Turn `--ref PATH=COLLECTION` options into a mapping.

    Args:
        refs: The values of every `--ref` option.

    Returns:
        A mapping of field path to target collection.

    Raises:
        ValueError: If a value has no `=`.
    """
    result = {}
    for value in refs or []:
        if "=" not in value:
            raise ValueError(f"--ref requires the format PATH=COLLECTION, got '{value}'.")
        path, collection = value.split("=", 1)
        result[path] = collection
    return result
