##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
In-process document store.

`MemoryStore` keeps every collection in a dictionary keyed by identifier.
It's the store used by tests and by callers that already hold their data
in memory and only want population. Reads and writes are guarded by a lock
so that concurrent resolutions can share one instance.
"""

import logging
import sys
import threading
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional

from docpop.documents.matching import SortSpec, extract_id_candidates
from docpop.documents.projection import Projection
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)


class MemoryStore(DocumentStore):
    """
    A thread-safe, in-process implementation of `DocumentStore`.

    Insertion order is kept, so unsorted queries return documents in the
    order they were first inserted.

    Attributes:
        collections (Dict[str, Dict[Any, Dict]]): Documents by collection, then by identifier.

    Methods:
        find: Query a collection.
        insert: Insert or replace documents.
        list_collections: List the non-empty collections.
        flush: Remove every document.
        get_version: Report the Python version backing the store.
    """

    def __init__(self, id_field: str = "_id", data: Optional[Dict[str, Iterable[Dict]]] = None):
        """
        Initialize the store, optionally seeding it.

        Args:
            id_field: The field that holds each document's identifier.
            data: An optional mapping of collection name to documents to insert.
        """
        super().__init__("memory", id_field=id_field)
        self.collections: Dict[str, Dict[Any, Dict]] = {}
        self._lock = threading.RLock()
        for collection, documents in (data or {}).items():
            self.insert(collection, documents)

    def find(
        self,
        collection: str,
        filter: Optional[Dict] = None,  # pylint: disable=redefined-builtin
        projection: Optional[Projection] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[Dict]:
        """
        Query a collection held in memory.

        Args:
            collection: The name of the collection to query.
            filter: A filter dictionary; None matches every document.
            projection: The fields to return; None returns full documents.
            sort: The order of the results; None keeps insertion order.

        Returns:
            A list of new document dictionaries.
        """
        LOG.debug(f"Finding in memory collection '{collection}' with filter {filter}.")
        with self._lock:
            stored = self.collections.get(collection, {})
            candidates = extract_id_candidates(filter, self.id_field)
            if candidates is None:
                documents = list(stored.values())
            else:
                wanted = set(candidates)
                documents = [doc for doc_id, doc in stored.items() if doc_id in wanted]
            return self._finish_query(documents, filter, projection, sort)

    def insert(self, collection: str, documents: Iterable[Dict]) -> List[Any]:
        """
        Insert or replace documents in a collection held in memory.

        Args:
            collection: The name of the collection to write to.
            documents: The documents to store.

        Returns:
            The identifiers of the stored documents, in order.
        """
        identifiers = []
        with self._lock:
            stored = self.collections.setdefault(collection, {})
            for document in documents:
                prepared = deepcopy(self._prepare_for_insert(document))
                stored[prepared[self.id_field]] = prepared
                identifiers.append(prepared[self.id_field])
        LOG.debug(f"Inserted {len(identifiers)} document(s) into memory collection '{collection}'.")
        return identifiers

    def list_collections(self) -> List[str]:
        """
        List the collections that currently hold documents.

        Returns:
            A sorted list of collection names.
        """
        with self._lock:
            return sorted(name for name, documents in self.collections.items() if documents)

    def flush(self):
        """
        Remove every document from the store.
        """
        with self._lock:
            self.collections.clear()

    def get_version(self) -> str:
        """
        Report the version of the interpreter holding the data.

        Returns:
            The Python version string.
        """
        return sys.version.split()[0]
