##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
SQLite-based document store implementation for docpop.

This module defines `SQLiteStore`, which keeps every document of every
collection in a single `documents` table as JSON text, keyed by collection
name and JSON-encoded identifier. Lookups by identifier are pushed down to
SQLite with an `IN` clause; the rest of the filter, the sort, and the
projection are applied in Python.

See also:
    - docpop.stores.store_base: Base class
    - docpop.stores.sqlite.sqlite_connection: Connection context manager
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from docpop.documents.matching import SortSpec, extract_id_candidates
from docpop.documents.projection import Projection
from docpop.exceptions import StoreUnavailable
from docpop.serialize import dumps_document, loads_document
from docpop.stores.sqlite.sqlite_connection import SQLiteConnection
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)

TABLE_NAME = "documents"
DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".docpop", "docpop.db")

# Stay well below SQLite's limit on bound parameters per statement
MAX_PARAMS_PER_QUERY = 900


class SQLiteStore(DocumentStore):
    """
    A SQLite-based implementation of `DocumentStore`.

    A new connection is opened for every operation, so one instance can be
    shared between threads.

    Attributes:
        path (str): The path to the SQLite database file.
        timeout (float): Seconds to wait for a locked database before failing.

    Methods:
        create_table_if_not_exists: Create the documents table.
        find: Query a collection.
        insert: Insert or replace documents.
        list_collections: List the non-empty collections.
        flush: Remove every document.
        get_version: Query SQLite for its version.
    """

    def __init__(self, path: str = DEFAULT_PATH, id_field: str = "_id", timeout: float = 5.0):
        """
        Initialize the SQLite store and make sure its table exists.

        Args:
            path: The path to the SQLite database file.
            id_field: The field that holds each document's identifier.
            timeout: Seconds to wait for a locked database before failing.
        """
        super().__init__("sqlite", id_field=id_field)
        self.path: str = os.path.abspath(os.path.expanduser(path))
        self.timeout: float = timeout
        self.create_table_if_not_exists()

    def _connect(self) -> SQLiteConnection:
        return SQLiteConnection(self.path, timeout=self.timeout)

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """
        Turn SQLite errors raised inside the block into `StoreUnavailable`.

        Args:
            action: A short description of what was being done, for the message.
        """
        try:
            yield
        except (sqlite3.Error, OSError) as exc:
            raise StoreUnavailable(f"SQLite store at '{self.path}' failed to {action}: {exc}") from exc

    def create_table_if_not_exists(self):
        """
        Create the documents table if it doesn't exist.
        """
        with self._translate_errors("create its table"), self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    body TEXT NOT NULL,
                    PRIMARY KEY (collection, doc_id)
                )
                """
            )

    def _select_rows(self, conn: sqlite3.Connection, collection: str, candidates: Optional[List[Any]]) -> List[Tuple]:
        """
        Select `(rowid, body)` rows of a collection, optionally restricted to some identifiers.

        Args:
            conn: An open SQLite connection.
            collection: The name of the collection.
            candidates: The identifiers to restrict to, or None for every document.

        Returns:
            The rows, ordered by insertion.
        """
        if candidates is None:
            cursor = conn.execute(
                f"SELECT rowid, body FROM {TABLE_NAME} WHERE collection = ? ORDER BY rowid", (collection,)
            )
            return [tuple(row) for row in cursor.fetchall()]

        keys = list(dict.fromkeys(dumps_document(candidate) for candidate in candidates))
        rows = []
        for start in range(0, len(keys), MAX_PARAMS_PER_QUERY):
            chunk = keys[start : start + MAX_PARAMS_PER_QUERY]
            placeholders = ", ".join("?" for _ in chunk)
            query = f"SELECT rowid, body FROM {TABLE_NAME} WHERE collection = ? AND doc_id IN ({placeholders})"
            LOG.debug(f"SQLite query: {query}")
            cursor = conn.execute(query, [collection, *chunk])
            rows.extend(tuple(row) for row in cursor.fetchall())
        rows.sort(key=lambda row: row[0])
        return rows

    def find(
        self,
        collection: str,
        filter: Optional[Dict] = None,  # pylint: disable=redefined-builtin
        projection: Optional[Projection] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[Dict]:
        """
        Query a collection stored in SQLite.

        Args:
            collection: The name of the collection to query.
            filter: A filter dictionary; None matches every document.
            projection: The fields to return; None returns full documents.
            sort: The order of the results; None keeps insertion order.

        Returns:
            A list of new document dictionaries.

        Raises:
            StoreUnavailable: If SQLite fails.
        """
        candidates = extract_id_candidates(filter, self.id_field)
        if candidates is not None and not candidates:
            return []

        LOG.debug(f"Finding in SQLite collection '{collection}' with filter {filter}.")
        with self._translate_errors(f"query '{collection}'"), self._connect() as conn:
            rows = self._select_rows(conn, collection, candidates)

        documents = [loads_document(body) for _, body in rows]
        return self._finish_query(documents, filter, projection, sort)

    def insert(self, collection: str, documents: Iterable[Dict]) -> List[Any]:
        """
        Insert or replace documents in a SQLite collection.

        Args:
            collection: The name of the collection to write to.
            documents: The documents to store.

        Returns:
            The identifiers of the stored documents, in order.

        Raises:
            StoreUnavailable: If SQLite fails.
        """
        prepared = [self._prepare_for_insert(document) for document in documents]
        rows = [(collection, dumps_document(doc[self.id_field]), dumps_document(doc)) for doc in prepared]

        LOG.debug(f"Inserting {len(rows)} document(s) into SQLite collection '{collection}'...")
        with self._translate_errors(f"insert into '{collection}'"), self._connect() as conn:
            conn.executemany(
                f"""
                INSERT INTO {TABLE_NAME} (collection, doc_id, body)
                VALUES (?, ?, ?)
                ON CONFLICT (collection, doc_id) DO UPDATE SET body = excluded.body
                """,
                rows,
            )
        LOG.debug(f"Successfully inserted {len(rows)} document(s) into SQLite collection '{collection}'.")
        return [doc[self.id_field] for doc in prepared]

    def list_collections(self) -> List[str]:
        """
        List the collections that currently hold documents.

        Returns:
            A sorted list of collection names.
        """
        with self._translate_errors("list collections"), self._connect() as conn:
            cursor = conn.execute(f"SELECT DISTINCT collection FROM {TABLE_NAME} ORDER BY collection")
            return [row[0] for row in cursor.fetchall()]

    def flush(self):
        """
        Remove every document from the SQLite database.
        """
        LOG.info(f"Flushing every document from SQLite store at '{self.path}'...")
        with self._translate_errors("flush"), self._connect() as conn:
            conn.execute(f"DELETE FROM {TABLE_NAME}")

    def get_version(self) -> str:
        """
        Query SQLite for the current version.

        Returns:
            The SQLite version string.
        """
        with self._translate_errors("report its version"), self._connect() as conn:
            cursor = conn.execute("SELECT sqlite_version()")
            return cursor.fetchone()[0]
