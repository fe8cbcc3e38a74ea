##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
import os
from glob import glob

import pytest

from tests.fixture_types import FixtureDict


#######################################
# Loading in Module Specific Fixtures #
#######################################


fixture_glob = os.path.join("tests", "fixtures", "**", "*.py")
pytest_plugins = [
    fixture_file.replace(os.sep, ".").replace(".py", "")
    for fixture_file in glob(fixture_glob, recursive=True)
    if not fixture_file.endswith("__init__.py")
]


#######################################
######### Fixture Definitions #########
#######################################


@pytest.fixture
def blog_data() -> FixtureDict[str, list]:
    """
    A small blog: posts reference users and tags, users reference companies.

    Returns:
        A mapping of collection name to its documents.
    """
    return {
        "companies": [
            {"_id": 7, "name": "Acme", "country": "US"},
            {"_id": 8, "name": "Globex", "country": "CA"},
        ],
        "users": [
            {"_id": 10, "name": "Ada", "email": "ada@example.com", "companyId": 7},
            {"_id": 11, "name": "Grace", "email": "grace@example.com", "companyId": 8},
            {"_id": 12, "name": "Linus", "email": "linus@example.com", "companyId": None},
        ],
        "tags": [
            {"_id": 1, "label": "python", "active": True, "rank": 3},
            {"_id": 2, "label": "legacy", "active": False, "rank": 1},
            {"_id": 3, "label": "storage", "active": True, "rank": 2},
        ],
        "posts": [
            {"_id": 100, "title": "Batched queries", "authorId": 10, "tagIds": [1, 2, 3]},
            {"_id": 101, "title": "Redis hashes", "authorId": 11, "tagIds": [3]},
            {"_id": 102, "title": "Drafts", "authorId": 10, "tagIds": []},
            {"_id": 103, "title": "Anonymous", "tagIds": [2]},
        ],
    }
