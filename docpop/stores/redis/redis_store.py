##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Redis-based document store implementation for docpop.

Each collection is one Redis hash named `<key_prefix>:<collection>`. Hash
fields are JSON-encoded identifiers and hash values are JSON-encoded
documents. A second key, a Redis set named `<key_prefix>:collections`,
records which collections exist so they can be listed without `KEYS`.

Lookups by identifier become a single `HMGET`; every other query reads the
whole hash and finishes in Python.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from redis import Redis
from redis.exceptions import RedisError

from docpop.documents.matching import SortSpec, extract_id_candidates
from docpop.documents.projection import Projection
from docpop.exceptions import StoreUnavailable
from docpop.serialize import dumps_document, loads_document
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)


class RedisStore(DocumentStore):
    """
    A Redis-based implementation of `DocumentStore`.

    Attributes:
        client (Redis): The Redis client used for database operations.
        key_prefix (str): The prefix of every key this store writes.

    Methods:
        find: Query a collection.
        insert: Insert or replace documents.
        list_collections: List the known collections.
        flush: Remove every key this store wrote.
        get_version: Query Redis for its version.
    """

    def __init__(
        self,
        server: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        key_prefix: str = "docpop",
        id_field: str = "_id",
        ssl: bool = False,
        client: Optional[Redis] = None,
    ):
        """
        Initialize the Redis store.

        Args:
            server: Hostname of the Redis server.
            port: Port of the Redis server.
            db: The Redis database number.
            password: The password for the Redis server, if any.
            key_prefix: The prefix of every key this store writes.
            id_field: The field that holds each document's identifier.
            ssl: If True, connect with TLS.
            client: An existing Redis client to use instead of creating one.
        """
        super().__init__("redis", id_field=id_field)
        self.key_prefix: str = key_prefix
        self.client: Redis = client or Redis(
            host=server, port=port, db=db, password=password, ssl=ssl, decode_responses=True
        )

    def _collection_key(self, collection: str) -> str:
        return f"{self.key_prefix}:{collection}"

    def _catalog_key(self) -> str:
        return f"{self.key_prefix}:collections"

    def find(
        self,
        collection: str,
        filter: Optional[Dict] = None,  # pylint: disable=redefined-builtin
        projection: Optional[Projection] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[Dict]:
        """
        Query a collection stored in Redis.

        Args:
            collection: The name of the collection to query.
            filter: A filter dictionary; None matches every document.
            projection: The fields to return; None returns full documents.
            sort: The order of the results; None leaves the order to Redis.

        Returns:
            A list of new document dictionaries.

        Raises:
            StoreUnavailable: If Redis can't be reached or fails.
        """
        key = self._collection_key(collection)
        candidates = extract_id_candidates(filter, self.id_field)
        if candidates is not None and not candidates:
            return []

        LOG.debug(f"Finding in Redis hash '{key}' with filter {filter}.")
        try:
            if candidates is None:
                bodies = list(self.client.hgetall(key).values())
            else:
                fields = list(dict.fromkeys(dumps_document(candidate) for candidate in candidates))
                bodies = [body for body in self.client.hmget(key, fields) if body is not None]
        except RedisError as exc:
            raise StoreUnavailable(f"Redis store failed to query '{collection}': {exc}") from exc

        documents = [loads_document(body) for body in bodies]
        return self._finish_query(documents, filter, projection, sort)

    def insert(self, collection: str, documents: Iterable[Dict]) -> List[Any]:
        """
        Insert or replace documents in a Redis collection.

        Args:
            collection: The name of the collection to write to.
            documents: The documents to store.

        Returns:
            The identifiers of the stored documents, in order.

        Raises:
            StoreUnavailable: If Redis can't be reached or fails.
        """
        prepared = [self._prepare_for_insert(document) for document in documents]
        if not prepared:
            return []

        mapping = {dumps_document(doc[self.id_field]): dumps_document(doc) for doc in prepared}
        LOG.debug(f"Inserting {len(mapping)} document(s) into Redis hash '{self._collection_key(collection)}'...")
        try:
            pipeline = self.client.pipeline()
            pipeline.hset(self._collection_key(collection), mapping=mapping)
            pipeline.sadd(self._catalog_key(), collection)
            pipeline.execute()
        except RedisError as exc:
            raise StoreUnavailable(f"Redis store failed to insert into '{collection}': {exc}") from exc

        return [doc[self.id_field] for doc in prepared]

    def list_collections(self) -> List[str]:
        """
        List the collections this store has written to.

        Returns:
            A sorted list of collection names.
        """
        try:
            return sorted(self.client.smembers(self._catalog_key()))
        except RedisError as exc:
            raise StoreUnavailable(f"Redis store failed to list collections: {exc}") from exc

    def flush(self):
        """
        Remove every collection this store wrote, leaving other keys alone.
        """
        LOG.info(f"Flushing every docpop collection under prefix '{self.key_prefix}' from Redis...")
        try:
            collections = self.client.smembers(self._catalog_key())
            keys = [self._collection_key(collection) for collection in collections]
            self.client.delete(*keys, self._catalog_key())
        except RedisError as exc:
            raise StoreUnavailable(f"Redis store failed to flush: {exc}") from exc

    def get_version(self) -> str:
        """
        Query Redis for the current version.

        Returns:
            A string representing the current version of Redis.
        """
        try:
            return self.client.info().get("redis_version", "N/A")
        except RedisError as exc:
            raise StoreUnavailable(f"Redis store failed to report its version: {exc}") from exc
