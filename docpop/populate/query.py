##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
A chainable query builder that finds root documents and populates their references.

Example:
    ```python
    posts = (
        Query(store, "posts", refs={"authorId": "users"})
        .where("published").equals(True)
        .sort("-createdAt")
        .limit(10)
        .populate("authorId", select="name")
        .exec()
    )
    ```
"""

import logging
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional

from docpop.documents.matching import normalize_sort, validate_filter
from docpop.documents.paths import split_path
from docpop.documents.projection import Projection
from docpop.exceptions import InvalidSpec, StoreUnavailable
from docpop.populate.reference_spec import ReferenceSpec, normalize_specs
from docpop.populate.resolver import ReferenceResolver
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)


class Query:
    """
    Builds a query against one collection of a `DocumentStore`.

    Building a query never touches the store; only `exec`, `first`, and
    `find_by_id` do, once for the root documents plus the resolver's
    batched queries.

    Attributes:
        store (DocumentStore): The store to query.
        collection (str): The collection the root documents come from.
        id_field (str): The identifier field of documents.
        refs (Dict[str, str]): Maps field paths to the collection they reference.
        max_workers (int): Passed on to the `ReferenceResolver`.
        timeout (Optional[float]): Passed on to the `ReferenceResolver`.

    Methods:
        find: Add conditions to the filter.
        where: Start a condition on one field.
        equals, ne, gt, gte, lt, lte, in_, nin, exists: Finish a condition.
        select: Set the projection of the root documents.
        sort: Set the order of the root documents.
        limit: Cap the number of root documents.
        skip: Skip the first root documents.
        populate: Add a reference spec.
        get_query: Return the filter built so far.
        projection: Return the projection built so far.
        get_populate: Return the reference specs added so far.
        exec: Run the query.
        first: Run the query and return the first document.
        find_by_id: Run a query for one identifier.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str,
        id_field: str = "_id",
        refs: Optional[Mapping[str, str]] = None,
        max_workers: int = 1,
        timeout: Optional[float] = None,
    ):
        self.store: DocumentStore = store
        self.collection: str = collection
        self.id_field: str = id_field
        self.refs: Dict[str, str] = dict(refs or {})
        self.max_workers: int = max_workers
        self.timeout: Optional[float] = timeout

        self._filter: Dict[str, Any] = {}
        self._projection: Projection = Projection()
        self._sort: List = []
        self._limit: Optional[int] = None
        self._skip: int = 0
        self._populate: List[ReferenceSpec] = []
        self._current_field: Optional[str] = None

    # Filter building

    def find(self, filter: Optional[Dict] = None) -> "Query":  # pylint: disable=redefined-builtin
        """
        Merge `filter` into the conditions of this query.

        Args:
            filter: A filter in the supported dialect.

        Returns:
            This query.

        Raises:
            InvalidSpec: If the filter is malformed.
        """
        if filter:
            validate_filter(filter)
            for field, condition in filter.items():
                self._add_condition(field, deepcopy(condition))
        return self

    def where(self, field: str) -> "Query":
        """
        Start a condition on `field`; finish it with one of the operator methods.

        Args:
            field: A dotted field path.

        Returns:
            This query.
        """
        self._current_field = field
        return self

    def _add_condition(self, field: str, condition: Any):
        existing = self._filter.get(field)
        if field.startswith("$"):
            if field in ("$and", "$or") and isinstance(existing, list):
                existing.extend(condition)
            else:
                self._filter[field] = condition
        elif isinstance(existing, dict) and isinstance(condition, dict):
            existing.update(condition)
        else:
            self._filter[field] = condition

    def _operator(self, operator: str, value: Any) -> "Query":
        if self._current_field is None:
            raise InvalidSpec(f"Call where() before using '{operator}'.")
        condition = {self._current_field: {operator: value}}
        validate_filter(condition)
        self._add_condition(self._current_field, {operator: value})
        return self

    def equals(self, value: Any) -> "Query":
        """Require the current field to equal `value`."""
        return self._operator("$eq", value)

    def ne(self, value: Any) -> "Query":
        """Require the current field to differ from `value`."""
        return self._operator("$ne", value)

    def gt(self, value: Any) -> "Query":
        return self._operator("$gt", value)

    def gte(self, value: Any) -> "Query":
        return self._operator("$gte", value)

    def lt(self, value: Any) -> "Query":
        return self._operator("$lt", value)

    def lte(self, value: Any) -> "Query":
        return self._operator("$lte", value)

    def in_(self, values: List[Any]) -> "Query":
        """Require the current field to be one of `values`."""
        return self._operator("$in", list(values))

    def nin(self, values: List[Any]) -> "Query":
        """Require the current field to be none of `values`."""
        return self._operator("$nin", list(values))

    def exists(self, flag: bool = True) -> "Query":
        """Require the current field to be present (or absent if `flag` is False)."""
        return self._operator("$exists", flag)

    # Result shaping

    def select(self, projection: Any) -> "Query":
        """
        Set the projection of the root documents.

        Args:
            projection: Any form accepted by `Projection.parse`.

        Returns:
            This query.

        Raises:
            InvalidSpec: If the projection is malformed.
        """
        parsed = Projection.parse(projection)
        parsed.validate(self.id_field)
        self._projection = parsed
        return self

    def sort(self, sort: Any) -> "Query":
        """
        Set the order of the root documents.

        Args:
            sort: A dict, a list of `(field, direction)` pairs, or a string like "-age name".

        Returns:
            This query.
        """
        self._sort = normalize_sort(sort)
        return self

    def limit(self, count: int) -> "Query":
        """
        Cap the number of root documents.

        Args:
            count: A non-negative integer.

        Returns:
            This query.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidSpec(f"Limit must be a non-negative integer, got {count!r}.")
        self._limit = count
        return self

    def skip(self, count: int) -> "Query":
        """
        Skip the first `count` root documents.

        Args:
            count: A non-negative integer.

        Returns:
            This query.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidSpec(f"Skip must be a non-negative integer, got {count!r}.")
        self._skip = count
        return self

    def populate(self, path_or_spec: Any, select: Any = None, **options) -> "Query":
        """
        Add a reference spec to resolve on the root documents.

        Args:
            path_or_spec: A field path (or space-separated paths), a `ReferenceSpec`,
                a spec dict, or a list of these.
            select: Projection of the referenced documents when `path_or_spec` is a path.
            **options: Other spec options (`target`, `match`, `sort`, `limit`,
                `nested`) when `path_or_spec` is a path.

        Returns:
            This query.

        Raises:
            InvalidSpec: If the spec is malformed.
        """
        if isinstance(path_or_spec, str) and (select is not None or options):
            specs = [
                ReferenceSpec.from_dict({"path": path, "select": select, **options}, self.refs)
                for path in path_or_spec.split()
            ]
        else:
            specs = normalize_specs(path_or_spec, self.refs)
        for spec in specs:
            spec.validate(self.id_field)
        self._populate.extend(specs)
        return self

    # Introspection

    def get_query(self) -> Dict[str, Any]:
        """Return a copy of the filter built so far."""
        return deepcopy(self._filter)

    def projection(self) -> Optional[Dict[str, int]]:
        """Return the projection of the root documents, or None if there is none."""
        return None if self._projection.is_empty else self._projection.to_dict()

    def get_populate(self) -> List[ReferenceSpec]:
        """Return the reference specs added so far."""
        return list(self._populate)

    # Execution

    def exec(self) -> List[Dict]:
        """
        Fetch the root documents and resolve their references.

        The root field of every populate path is added to an inclusion
        projection, so populated fields are always returned.

        Returns:
            The resolved root documents.

        Raises:
            InvalidSpec: If the query or a spec is malformed.
            StoreUnavailable: If the store fails.
        """
        projection = self._projection
        for spec in self._populate:
            projection = projection.with_field(split_path(spec.path)[0])

        try:
            documents = self.store.find(
                self.collection,
                self._filter or None,
                None if projection.is_empty else projection,
                self._sort or None,
            )
        except (StoreUnavailable, InvalidSpec):
            raise
        except Exception as exc:  # pylint: disable=broad-except
            raise StoreUnavailable(f"Store '{self.store.get_name()}' failed to query '{self.collection}': {exc}") from exc

        end = None if self._limit is None else self._skip + self._limit
        documents = documents[self._skip : end]
        LOG.debug(f"Query on '{self.collection}' matched {len(documents)} document(s).")

        if self._populate and documents:
            resolver = ReferenceResolver(
                self.store, id_field=self.id_field, max_workers=self.max_workers, timeout=self.timeout
            )
            documents = resolver.resolve(documents, self._populate)
        return documents

    def first(self) -> Optional[Dict]:
        """
        Run the query and return its first document.

        Returns:
            The first resolved document, or None if nothing matched.
        """
        previous = self._limit
        self._limit = 1 if previous is None else min(previous, 1)
        try:
            documents = self.exec()
        finally:
            self._limit = previous
        return documents[0] if documents else None

    def find_by_id(self, ident: Any) -> Optional[Dict]:
        """
        Fetch the document with identifier `ident`, keeping this query's
        projection and populate specs.

        Args:
            ident: The identifier to look up.

        Returns:
            The resolved document, or None if no document has that identifier.
        """
        query = Query(
            self.store,
            self.collection,
            id_field=self.id_field,
            refs=self.refs,
            max_workers=self.max_workers,
            timeout=self.timeout,
        )
        query._projection = self._projection  # pylint: disable=protected-access
        query._populate = list(self._populate)  # pylint: disable=protected-access
        return query.find({self.id_field: ident}).first()
