##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module provides functionality for locating, loading, and creating docpop
application configuration files, and for filling in default settings.

There is no module-level configuration object: callers load a `Config` with
`load_app_config` and build a store from it where they need one.
"""
import logging
import os
import shutil
from importlib import resources
from typing import Dict, Optional

from docpop.config import Config
from docpop.config.config_filepaths import APP_FILENAME, CONFIG_PATH_FILE, DEFAULT_DB_PATH, DOCPOP_HOME
from docpop.utils import load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

STORE_DEFAULTS: Dict = {
    "name": "sqlite",
    "path": DEFAULT_DB_PATH,
    "server": "localhost",
    "port": 6379,
    "db": 0,
    "password": None,
    "key_prefix": "docpop",
}

POPULATE_DEFAULTS: Dict = {
    "id_field": "_id",
    "max_workers": 1,
    "timeout": None,
}


def load_config(filepath: str) -> Optional[Dict]:
    """
    Reads a docpop YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath: The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    return load_yaml(filepath) or {}


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the docpop application configuration file (`app.yaml`).

    This function searches for the configuration file based on a given directory or,
    if no directory is provided, uses a fallback sequence:
      1. Check for `app.yaml` in the current working directory.
      2. Check if `CONFIG_PATH_FILE` exists and points to a valid config file.
      3. Check for `app.yaml` in the `DOCPOP_HOME` directory.

    If a `path` is explicitly provided, the function checks only that directory
    for `app.yaml`.

    Args:
        path: A specific directory to look for `app.yaml`.

    Returns:
        The full path to the `app.yaml` file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        if os.path.isfile(CONFIG_PATH_FILE):
            with open(CONFIG_PATH_FILE, "r") as f:
                config_path = f.read().strip()
            if os.path.isfile(config_path):
                return config_path

        path_app = os.path.join(DOCPOP_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def get_default_config() -> Dict:
    """
    Creates a minimal default configuration for local mode.

    Local mode keeps its documents in a SQLite file under `DOCPOP_HOME` so
    that data loaded by one command is visible to the next.

    Returns:
        A configuration dictionary with essential default values.
    """
    return {
        "store": {"name": "sqlite", "path": DEFAULT_DB_PATH},
        "populate": {},
    }


def load_defaults(config: Dict):
    """
    Fill in the settings a configuration file leaves out.

    Missing (or empty) sections are created, missing keys take the values of
    `STORE_DEFAULTS` and `POPULATE_DEFAULTS`, and a `~` in the SQLite path is expanded.

    Args:
        config: The configuration dictionary to be updated with default values.
    """
    for section, defaults in (("store", STORE_DEFAULTS), ("populate", POPULATE_DEFAULTS)):
        if not isinstance(config.get(section), dict):
            config[section] = {}
        for key, value in defaults.items():
            config[section].setdefault(key, value)

    path = config["store"].get("path")
    if isinstance(path, str) and path != ":memory:":
        config["store"]["path"] = os.path.expanduser(path)


def get_config(path: Optional[str] = None, local: bool = False) -> Dict:
    """
    Loads a docpop configuration file and returns a dictionary containing the configuration data.

    Args:
        path: The directory path to search for the configuration file.
            If `None`, default search paths are used.
        local: If True, skip the file and use the local-mode defaults.

    Returns:
        A dictionary containing all the configuration data with defaults applied.

    Raises:
        ValueError: If the configuration file cannot be found and it's not a local run.
    """
    if local:
        LOG.info("Using default configuration (local mode)")
        config = get_default_config()
        load_defaults(config)
        return config

    filepath: Optional[str] = find_config_file(path)
    if filepath is None:
        raise ValueError(
            "Cannot find a docpop config file! Run 'docpop config create' and edit the file "
            f"'{os.path.join(DOCPOP_HOME, APP_FILENAME)}', or pass --local."
        )
    config: Dict = load_config(filepath)
    if not isinstance(config, dict):
        raise ValueError(f"The config file '{filepath}' must hold a mapping at the top level.")
    load_defaults(config)
    return config


def load_app_config(path: Optional[str] = None, local: bool = False) -> Config:
    """
    Load the application configuration into a `Config` object.

    Args:
        path: The directory path to search for the configuration file.
        local: If True, use the local-mode defaults instead of a file.

    Returns:
        The loaded `Config`.
    """
    return Config(get_config(path, local=local))


def is_debug() -> bool:
    """
    Determines whether the application is running in debug mode.

    Returns:
        True if `DOCPOP_DEBUG` is set to `1` in the environment, otherwise False.
    """
    if "DOCPOP_DEBUG" in os.environ and int(os.environ["DOCPOP_DEBUG"]) == 1:
        return True
    return False


def default_config_info() -> Dict:
    """
    Returns information about docpop's default configurations.

    Returns:
        A dictionary containing the following keys:\n
            - `config_file` (str): Path to the docpop configuration file.
            - `is_debug` (bool): Whether debug mode is enabled.
            - `docpop_home` (str): Path to the docpop home directory.
            - `docpop_home_exists` (bool): True if the docpop home directory exists, otherwise False.
    """
    return {
        "config_file": find_config_file(),
        "is_debug": is_debug(),
        "docpop_home": DOCPOP_HOME,
        "docpop_home_exists": os.path.exists(DOCPOP_HOME),
    }


def create_template_config(output_dir: str = DOCPOP_HOME) -> str:
    """
    Copy the template `app.yaml` into `output_dir` unless a config already exists there.

    Args:
        output_dir: The directory to write `app.yaml` to.

    Returns:
        The path of the config file.
    """
    config_file = os.path.join(os.path.abspath(os.path.expanduser(output_dir)), APP_FILENAME)
    if os.path.isfile(config_file):
        LOG.info(f"The config file already exists, '{config_file}'.")
        return config_file

    os.makedirs(os.path.dirname(config_file), exist_ok=True)
    template = resources.files("docpop.data").joinpath(APP_FILENAME)
    with resources.as_file(template) as template_file:
        shutil.copy(template_file, config_file)
    LOG.info(f"The file '{config_file}' is ready to be edited for your system.")
    return config_file


def save_config_path(config_file: str, config_path_file: str = CONFIG_PATH_FILE):
    """
    Record `config_file` as the active configuration in `config_path_file`.

    Args:
        config_file: The configuration file to activate.
        config_path_file: The file the path is written to.

    Raises:
        FileNotFoundError: If `config_file` does not exist.
    """
    config_file = os.path.abspath(config_file)
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Cannot set config path. File does not exist: '{config_file}'")

    os.makedirs(os.path.dirname(config_path_file), exist_ok=True)
    with open(config_path_file, "w") as f:
        f.write(config_file)
    LOG.info(f"Configuration path saved to '{config_path_file}'.")
