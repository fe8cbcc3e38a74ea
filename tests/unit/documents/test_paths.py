##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `paths.py` module.
"""

import pytest

from docpop.documents.paths import MISSING, delete_path, get_path, iter_slots, set_path, split_path


def test_split_path_ignores_empty_segments():
    """Test that leading, trailing, and doubled dots don't produce empty segments."""
    assert split_path("author.company") == ["author", "company"]
    assert split_path(".author..company.") == ["author", "company"]
    assert split_path("") == []


class TestIterSlots:
    """Tests for the `iter_slots` function."""

    def test_top_level_field(self):
        """Test that a top-level path yields the document itself."""
        document = {"authorId": 1}
        assert list(iter_slots(document, "authorId")) == [(document, "authorId")]

    def test_missing_last_key_still_yields(self):
        """Test that the last key does not have to exist."""
        document = {"title": "x"}
        slots = list(iter_slots(document, "authorId"))
        assert len(slots) == 1
        assert slots[0][0] is document

    def test_walks_into_lists_of_subdocuments(self):
        """Test that lists of subdocuments are walked element by element."""
        document = {"comments": [{"userId": 1}, {"userId": 2}, "not a dict", {"text": "no user"}]}
        slots = list(iter_slots(document, "comments.userId"))
        assert [container.get(key) for container, key in slots] == [1, 2, None]
        assert all(key == "userId" for _, key in slots)

    def test_missing_intermediate_yields_nothing(self):
        """Test that a missing or scalar intermediate segment ends the walk."""
        assert not list(iter_slots({"title": "x"}, "author.companyId"))
        assert not list(iter_slots({"author": 5}, "author.companyId"))

    def test_empty_path_yields_nothing(self):
        """Test that an empty path addresses nothing."""
        assert not list(iter_slots({"a": 1}, ""))


class TestGetSetDelete:
    """Tests for `get_path`, `set_path`, and `delete_path`."""

    def test_get_path(self):
        """Test reading nested values and the default for missing ones."""
        document = {"author": {"company": {"name": "Acme"}}, "tags": [{"label": "x"}]}
        assert get_path(document, "author.company.name") == "Acme"
        assert get_path(document, "author.missing") is None
        assert get_path(document, "author.missing", MISSING) is MISSING
        # Lists are not walked
        assert get_path(document, "tags.label", "default") == "default"

    def test_set_path_creates_intermediate_dicts(self):
        """Test that `set_path` creates the subdocuments it needs."""
        document = {}
        set_path(document, "author.company.name", "Acme")
        assert document == {"author": {"company": {"name": "Acme"}}}

    def test_set_path_rejects_non_dict_intermediate(self):
        """Test that `set_path` refuses to overwrite a scalar intermediate."""
        with pytest.raises(ValueError, match="is not a subdocument"):
            set_path({"author": 5}, "author.name", "Ada")

    def test_set_path_rejects_empty_path(self):
        """Test that `set_path` refuses an empty path."""
        with pytest.raises(ValueError, match="empty path"):
            set_path({}, "", 1)

    def test_delete_path(self):
        """Test that `delete_path` removes existing values and ignores missing ones."""
        document = {"author": {"name": "Ada", "email": "a@example.com"}}
        delete_path(document, "author.email")
        delete_path(document, "author.missing")
        delete_path(document, "missing.field")
        assert document == {"author": {"name": "Ada"}}
