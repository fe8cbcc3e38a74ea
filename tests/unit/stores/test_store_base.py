##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `store_base.py` module.
"""

import pytest

from docpop.documents.projection import Projection
from docpop.stores.store_base import DocumentStore


class ListStore(DocumentStore):
    """A minimal store keeping one list per collection."""

    def __init__(self, id_field: str = "_id"):
        super().__init__("list", id_field=id_field)
        self.data = {}

    def find(self, collection, filter=None, projection=None, sort=None):  # pylint: disable=redefined-builtin
        return self._finish_query(self.data.get(collection, []), filter, projection, sort)

    def insert(self, collection, documents):
        prepared = [self._prepare_for_insert(doc) for doc in documents]
        self.data.setdefault(collection, []).extend(prepared)
        return [doc[self.id_field] for doc in prepared]

    def list_collections(self):
        return sorted(self.data)

    def flush(self):
        self.data.clear()

    def get_version(self):
        return "1.0"


class TestDocumentStore:
    """Tests for the shared behavior of `DocumentStore`."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that `DocumentStore` itself can't be instantiated."""
        with pytest.raises(TypeError):
            DocumentStore("abstract")  # pylint: disable=abstract-class-instantiated

    def test_get_name(self):
        """Test that the store reports its name."""
        assert ListStore().get_name() == "list"

    def test_prepare_for_insert_assigns_missing_ids(self):
        """Test that documents without an identifier get a uuid4 hex one."""
        store = ListStore()
        original = {"name": "Ada"}
        prepared = store._prepare_for_insert(original)
        assert len(prepared["_id"]) == 32
        assert "_id" not in original

    def test_prepare_for_insert_keeps_existing_ids(self):
        """Test that existing identifiers, including falsy ones, are kept."""
        store = ListStore(id_field="uid")
        assert store._prepare_for_insert({"uid": 0})["uid"] == 0

    def test_prepare_for_insert_rejects_non_dicts(self):
        """Test that only dictionaries can be stored."""
        with pytest.raises(TypeError, match="must be dicts"):
            ListStore()._prepare_for_insert(["not", "a", "dict"])

    def test_finish_query(self):
        """Test that filter, sort, and projection are applied in that order."""
        store = ListStore()
        store.insert("tags", [{"_id": 1, "rank": 2, "active": True}, {"_id": 2, "rank": 1, "active": False}, {"_id": 3, "rank": 3, "active": True}])

        results = store.find("tags", {"active": True}, Projection.parse("rank -_id"), "-rank")
        assert results == [{"rank": 3}, {"rank": 2}]

    def test_finish_query_accepts_projection_forms(self):
        """Test that a projection may be given in any accepted form."""
        store = ListStore()
        store.insert("users", [{"_id": 1, "name": "Ada", "email": "a@example.com"}])
        assert store.find("users", projection={"email": 0}) == [{"_id": 1, "name": "Ada"}]
