##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `query.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from docpop.documents.reference import ABSENT
from docpop.exceptions import InvalidSpec, StoreUnavailable
from docpop.populate.query import Query
from docpop.populate.reference_spec import ReferenceSpec
from tests.fixture_types import FixtureMemoryStore, FixtureSQLiteStore


REFS = {"authorId": "users", "tagIds": "tags"}


def post_ids(documents):
    return [doc["_id"] for doc in documents]


class TestQueryBuilding:
    """Tests for building a query without running it."""

    def test_building_does_not_touch_the_store(self, mocker: MockerFixture, stores_memory: FixtureMemoryStore):
        """
        Test that only execution talks to the store.

        Args:
            mocker: PyTest mocker fixture.
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        find_spy = mocker.spy(stores_memory, "find")

        query = (
            Query(stores_memory, "posts", refs=REFS)
            .where("authorId")
            .gte(10)
            .lte(11)
            .select("title authorId")
            .sort("-_id")
            .limit(2)
            .skip(1)
            .populate("authorId", select="name")
        )

        find_spy.assert_not_called()
        assert query.get_query() == {"authorId": {"$gte": 10, "$lte": 11}}
        assert query.projection() == {"title": 1, "authorId": 1}
        assert query.get_populate() == [ReferenceSpec("authorId", "users", select="name")]

    def test_introspection_of_an_empty_query(self, stores_memory: FixtureMemoryStore):
        """
        Test the defaults of a new query.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = Query(stores_memory, "posts")
        assert query.get_query() == {}
        assert query.projection() is None
        assert query.get_populate() == []

    def test_get_query_returns_a_copy(self, stores_memory: FixtureMemoryStore):
        """
        Test that changing the returned filter leaves the query alone.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = Query(stores_memory, "posts").where("authorId").in_([10, 11])
        query.get_query()["authorId"]["$in"].append(12)
        assert query.get_query() == {"authorId": {"$in": [10, 11]}}

    def test_find_merges_conditions(self, stores_memory: FixtureMemoryStore):
        """
        Test that `find` and `where` conditions combine.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = (
            Query(stores_memory, "posts")
            .find({"authorId": {"$gte": 10}, "$or": [{"_id": 100}]})
            .where("authorId")
            .ne(11)
            .find({"$or": [{"_id": 102}], "title": "Drafts"})
        )
        assert query.get_query() == {
            "authorId": {"$gte": 10, "$ne": 11},
            "$or": [{"_id": 100}, {"_id": 102}],
            "title": "Drafts",
        }

    def test_populate_forms(self, stores_memory: FixtureMemoryStore):
        """
        Test the accepted ways of adding reference specs.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = (
            Query(stores_memory, "posts", refs=REFS)
            .populate("authorId tagIds")
            .populate({"path": "editorId", "ref": "users"})
            .populate(ReferenceSpec("reviewerId", "users"))
            .populate("tagIds", match={"active": True}, limit=1)
        )
        assert [(spec.path, spec.target) for spec in query.get_populate()] == [
            ("authorId", "users"),
            ("tagIds", "tags"),
            ("editorId", "users"),
            ("reviewerId", "users"),
            ("tagIds", "tags"),
        ]
        assert query.get_populate()[-1].limit == 1


class TestQueryErrors:
    """Tests for malformed queries."""

    def test_operator_without_where(self, stores_memory: FixtureMemoryStore):
        """
        Test that operators need a field.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        with pytest.raises(InvalidSpec, match="where"):
            Query(stores_memory, "posts").equals(1)

    @pytest.mark.parametrize("count", [-1, "2", True, 1.5])
    def test_bad_limit_and_skip(self, stores_memory: FixtureMemoryStore, count):
        """
        Test that limit and skip need non-negative integers.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
            count: The invalid value.
        """
        with pytest.raises(InvalidSpec):
            Query(stores_memory, "posts").limit(count)
        with pytest.raises(InvalidSpec):
            Query(stores_memory, "posts").skip(count)

    def test_bad_filter(self, stores_memory: FixtureMemoryStore):
        """
        Test that unknown operators are rejected while building.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        with pytest.raises(InvalidSpec, match="Unknown"):
            Query(stores_memory, "posts").find({"title": {"$regex": "^B"}})

    def test_mixed_projection(self, stores_memory: FixtureMemoryStore):
        """
        Test that inclusion and exclusion can't be mixed.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        with pytest.raises(InvalidSpec, match="Cannot mix"):
            Query(stores_memory, "posts").select("title -authorId")

    def test_populate_without_target(self, stores_memory: FixtureMemoryStore):
        """
        Test that a path with no known target collection is rejected.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        with pytest.raises(InvalidSpec, match="target"):
            Query(stores_memory, "posts").populate("authorId")

    def test_populate_with_unknown_option(self, stores_memory: FixtureMemoryStore):
        """
        Test that misspelled options are rejected.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        with pytest.raises(InvalidSpec, match="Unknown reference spec option"):
            Query(stores_memory, "posts", refs=REFS).populate("authorId", limt=1)

    def test_store_failure(self, mocker: MockerFixture, stores_memory: FixtureMemoryStore):
        """
        Test that a failing root query raises `StoreUnavailable`.

        Args:
            mocker: PyTest mocker fixture.
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        mocker.patch.object(stores_memory, "find", side_effect=RuntimeError("boom"))
        with pytest.raises(StoreUnavailable, match="boom"):
            Query(stores_memory, "posts").exec()


class TestQueryExecution:
    """Tests for `exec`, `first`, and `find_by_id`."""

    def test_filter_operators(self, stores_memory: FixtureMemoryStore):
        """
        Test each operator against the seeded posts.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        assert post_ids(Query(stores_memory, "posts").where("authorId").equals(10).exec()) == [100, 102]
        assert post_ids(Query(stores_memory, "posts").where("_id").gt(101).exec()) == [102, 103]
        assert post_ids(Query(stores_memory, "posts").where("_id").lt(101).exec()) == [100]
        assert post_ids(Query(stores_memory, "posts").where("_id").in_([103, 100]).exec()) == [100, 103]
        assert post_ids(Query(stores_memory, "posts").where("_id").nin([100, 101]).exec()) == [102, 103]
        assert post_ids(Query(stores_memory, "posts").where("authorId").exists(False).exec()) == [103]

    def test_sort_skip_and_limit(self, stores_memory: FixtureMemoryStore):
        """
        Test that skip and limit apply after sorting.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = Query(stores_memory, "posts").sort("-_id")
        assert post_ids(query.exec()) == [103, 102, 101, 100]
        assert post_ids(query.skip(1).limit(2).exec()) == [102, 101]
        assert query.limit(0).exec() == []

    def test_exec_populates(self, stores_memory: FixtureMemoryStore):
        """
        Test that `exec` resolves the populate specs.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        posts = (
            Query(stores_memory, "posts", refs=REFS)
            .populate("authorId", select="name companyId", nested=[{"path": "companyId", "target": "companies"}])
            .populate("tagIds", select="label -_id", match={"active": True})
            .exec()
        )

        assert posts[0]["authorId"]["name"] == "Ada"
        assert posts[0]["authorId"]["_id"] == 10
        assert posts[0]["authorId"]["companyId"] == {"_id": 7, "name": "Acme", "country": "US"}
        assert "email" not in posts[0]["authorId"]
        assert posts[0]["tagIds"] == [{"label": "python"}, {"label": "storage"}]
        assert posts[3]["authorId"] is ABSENT

    def test_populated_fields_are_always_returned(self, mocker: MockerFixture, stores_memory: FixtureMemoryStore):
        """
        Test that an inclusion projection gains the populated root fields.

        Args:
            mocker: PyTest mocker fixture.
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        find_spy = mocker.spy(stores_memory, "find")
        query = Query(stores_memory, "posts", refs=REFS).select("title").populate("authorId", select="name")

        posts = query.exec()

        assert set(posts[0]) == {"_id", "title", "authorId"}
        assert posts[0]["authorId"] == {"_id": 10, "name": "Ada"}
        assert query.projection() == {"title": 1}
        assert find_spy.call_count == 2

    def test_exclusion_projection(self, stores_memory: FixtureMemoryStore):
        """
        Test that exclusion projections apply to root documents.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        posts = Query(stores_memory, "posts").select("-tagIds -authorId").exec()
        assert posts[0] == {"_id": 100, "title": "Batched queries"}

    def test_first(self, stores_memory: FixtureMemoryStore):
        """
        Test that `first` returns one document without changing the query.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = Query(stores_memory, "posts", refs=REFS).sort("-_id").populate("tagIds")

        first = query.first()

        assert first["_id"] == 103
        assert first["tagIds"][0]["label"] == "legacy"
        assert len(query.exec()) == 4
        assert Query(stores_memory, "posts").where("_id").equals(999).first() is None

    def test_find_by_id(self, stores_memory: FixtureMemoryStore):
        """
        Test that `find_by_id` keeps projection and specs but not the filter.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        query = Query(stores_memory, "posts", refs=REFS).where("authorId").equals(10).select("title").populate("authorId")

        post = query.find_by_id(101)

        assert post == {
            "_id": 101,
            "title": "Redis hashes",
            "authorId": {"_id": 11, "name": "Grace", "email": "grace@example.com", "companyId": 8},
        }
        assert query.get_query() == {"authorId": {"$eq": 10}}
        assert query.find_by_id(999) is None

    def test_concurrent_query(self, stores_memory: FixtureMemoryStore):
        """
        Test that a query with several workers gives the same documents.

        Args:
            stores_memory: A `MemoryStore` seeded with blog data.
        """
        sequential = Query(stores_memory, "posts", refs=REFS).populate("authorId tagIds").exec()
        concurrent = Query(stores_memory, "posts", refs=REFS, max_workers=3).populate("authorId tagIds").exec()
        assert concurrent == sequential

    def test_sqlite_store(self, stores_sqlite: FixtureSQLiteStore):
        """
        Test the same populate query against the SQLite store.

        Args:
            stores_sqlite: A `SQLiteStore` seeded with blog data.
        """
        posts = (
            Query(stores_sqlite, "posts", refs=REFS)
            .where("_id")
            .lte(101)
            .populate("authorId", select="name")
            .populate("tagIds", sort="-rank", limit=1)
            .exec()
        )
        assert [post["authorId"]["name"] for post in posts] == ["Ada", "Grace"]
        assert [post["tagIds"][0]["_id"] for post in posts] == [1, 3]
