##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module defines the abstract base class for all document stores in docpop.

This module provides the `DocumentStore` class, which outlines the interface
the resolver and the query builder use to read documents, plus the small
set of write and maintenance operations the CLI needs. All concrete stores
(in-memory, SQLite, Redis) inherit from this class and implement its
abstract methods.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from docpop.documents.matching import SortSpec, matches, sort_documents
from docpop.documents.projection import Projection


class DocumentStore(ABC):
    """
    Base class for all document stores supported in docpop.

    Attributes:
        store_name (str): The name of the store (e.g., "sqlite").
        id_field (str): The field that holds each document's identifier.

    Methods:
        find: Query a collection with a filter, a projection, and a sort.
        insert: Add documents to a collection.
        list_collections: List the collections that hold documents.
        flush: Remove every document from the store.
        get_version: Report the version of the underlying backend.
    """

    def __init__(self, store_name: str, id_field: str = "_id"):
        """
        Initialize the store.

        Args:
            store_name: The name of the store (e.g., "sqlite").
            id_field: The field that holds each document's identifier.
        """
        self.store_name: str = store_name
        self.id_field: str = id_field

    def get_name(self) -> str:
        """
        Get the name of the store.

        Returns:
            The name of the store (e.g. sqlite).
        """
        return self.store_name

    @abstractmethod
    def find(
        self,
        collection: str,
        filter: Optional[Dict] = None,  # pylint: disable=redefined-builtin
        projection: Optional[Projection] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[Dict]:
        """
        Query a collection.

        Args:
            collection: The name of the collection to query.
            filter: A filter dictionary; None matches every document.
            projection: The fields to return; None returns full documents.
            sort: The order of the results; None leaves the order to the store.

        Returns:
            A list of new document dictionaries.

        Raises:
            StoreUnavailable: If the backend could not be reached or failed.
        """
        raise NotImplementedError("Subclasses of `DocumentStore` must implement a `find` method.")

    @abstractmethod
    def insert(self, collection: str, documents: Iterable[Dict]) -> List[Any]:
        """
        Insert or replace documents in a collection.

        Documents without an identifier are given a random one.

        Args:
            collection: The name of the collection to write to.
            documents: The documents to store.

        Returns:
            The identifiers of the stored documents, in order.

        Raises:
            StoreUnavailable: If the backend could not be reached or failed.
        """
        raise NotImplementedError("Subclasses of `DocumentStore` must implement an `insert` method.")

    @abstractmethod
    def list_collections(self) -> List[str]:
        """
        List the collections that currently hold documents.

        Returns:
            A sorted list of collection names.
        """
        raise NotImplementedError("Subclasses of `DocumentStore` must implement a `list_collections` method.")

    @abstractmethod
    def flush(self):
        """
        Remove every document from the store.
        """
        raise NotImplementedError("Subclasses of `DocumentStore` must implement a `flush` method.")

    @abstractmethod
    def get_version(self) -> str:
        """
        Query the backend for its current version.

        Returns:
            A string representing the current version of the backend.
        """
        raise NotImplementedError("Subclasses of `DocumentStore` must implement a `get_version` method.")

    def _prepare_for_insert(self, document: Dict) -> Dict:
        """
        Copy a document and give it an identifier if it doesn't have one.

        Args:
            document: The document about to be stored.

        Returns:
            A shallow copy of `document` holding an identifier.
        """
        if not isinstance(document, dict):
            raise TypeError(f"Documents must be dicts, got {type(document).__name__}.")
        prepared = dict(document)
        if prepared.get(self.id_field) is None:
            prepared[self.id_field] = uuid.uuid4().hex
        return prepared

    def _finish_query(
        self,
        documents: Iterable[Dict],
        filter: Optional[Dict],  # pylint: disable=redefined-builtin
        projection: Optional[Projection],
        sort: Optional[SortSpec],
    ) -> List[Dict]:
        """
        Apply the filter, sort, and projection to candidate documents in Python.

        Stores that can only narrow candidates down by identifier hand the
        candidates here to finish the query.

        Args:
            documents: The candidate documents.
            filter: The filter dictionary.
            projection: The projection to apply, if any.
            sort: The sort specification, if any.

        Returns:
            The matching documents as new dictionaries.
        """
        results = [doc for doc in documents if matches(doc, filter)]
        if sort:
            results = sort_documents(results, sort)
        projection = Projection.parse(projection)
        return [projection.apply(doc, self.id_field) for doc in results]
