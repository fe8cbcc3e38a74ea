##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Module for docpop utilities.
"""
import json
import logging
import sys
from copy import deepcopy
from importlib.metadata import PackageNotFoundError, distribution
from types import SimpleNamespace
from typing import Any, Dict, List

import yaml
from tabulate import tabulate

from docpop.serialize import loads_document


LOG = logging.getLogger(__name__)


def load_yaml(filepath: str) -> Dict:
    """
    Safely read a YAML file and return its contents.

    Args:
        filepath: The file path to the YAML file to be read.

    Returns:
        A dict representing the contents of the YAML file.
    """
    with open(filepath, "r") as _file:
        return yaml.safe_load(_file)


def load_json_argument(text: str, option: str) -> Any:
    """
    Parse a JSON value given on the command line.

    Args:
        text: The raw option value.
        option: The option name, used in the error message.

    Returns:
        The decoded value.

    Raises:
        ValueError: If `text` is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"The value of {option} is not valid JSON: {exc}") from exc


def load_documents_file(filepath: str) -> List[Dict]:
    """
    Read the documents stored in a JSON file.

    The file may hold one object or a list of objects.

    Args:
        filepath: The path to the JSON file.

    Returns:
        A list of documents.

    Raises:
        ValueError: If the file doesn't hold an object or a list of objects.
    """
    with open(filepath, "r") as _file:
        contents = loads_document(_file.read())

    if isinstance(contents, dict):
        contents = [contents]
    if not isinstance(contents, list) or not all(isinstance(doc, dict) for doc in contents):
        raise ValueError(f"'{filepath}' must contain a JSON object or a list of JSON objects.")
    LOG.debug(f"Read {len(contents)} document(s) from '{filepath}'.")
    return contents


def nested_dict_to_namespaces(dic: Dict) -> SimpleNamespace:
    """
    Convert a nested dictionary into a nested SimpleNamespace structure.

    Args:
        dic: The nested dictionary to be converted.

    Returns:
        A SimpleNamespace object representing the nested structure of the input dictionary.

    Raises:
        TypeError: If the input is not a dictionary.
    """

    def recurse(dic):
        if not isinstance(dic, dict):
            return dic
        for key, val in list(dic.items()):
            dic[key] = recurse(val)
        return SimpleNamespace(**dic)

    if not isinstance(dic, dict):
        raise TypeError(f"{dic} is not a dict")

    new_dic = deepcopy(dic)
    return recurse(new_dic)


def get_package_versions(package_list: List[str]) -> str:
    """
    Generate a formatted table of installed package versions and their locations.

    If a package is not installed, it is reported as "Not installed". The
    output includes the Python version and its executable location at the top of the table.

    Args:
        package_list: A list of package names to check for installed versions.

    Returns:
        A formatted string representing a table of package names, their versions,
            and installation locations.
    """
    table = []
    for package in package_list:
        try:
            dist = distribution(package)
            table.append([package, dist.version, str(dist.locate_file(""))])
        except PackageNotFoundError:
            table.append([package, "Not installed", "N/A"])

    table.insert(0, ["python", sys.version.split()[0], sys.executable])
    table_str = tabulate(table, headers=["Package", "Version", "Location"], tablefmt="simple")
    return f"Python Packages\n\n{table_str}\n"
