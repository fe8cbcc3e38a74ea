##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Batched resolution of document references.

The resolver turns

    {"_id": 1, "authorId": 10, "tagIds": [1, 2, 3]}

into

    {"_id": 1, "authorId": {"_id": 10, ...}, "tagIds": [{"_id": 1, ...}, {"_id": 3, ...}]}

by asking a `DocumentStore` for the referenced documents. Each resolution
level runs in three phases:

1. Plan: walk every document at every spec path, classify what is found
   there (unset, a single reference, a list of references, or something
   already resolved) and gather the identifiers per target collection.
2. Fetch: issue one store query per (collection, filtered or not) batch of
   each spec, then resolve the spec's nested specs once on everything the
   spec fetched.
3. Substitute: write the fetched documents (or `ABSENT`) back in place of
   the identifiers.

The number of store queries therefore depends on the number of specs and
target collections, never on the number of documents.
"""

import logging
from collections.abc import Hashable
from concurrent.futures import CancelledError, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from docpop.documents.matching import sort_documents
from docpop.documents.paths import MISSING, iter_slots
from docpop.documents.reference import ABSENT, Reference, is_unset
from docpop.exceptions import InvalidSpec, StoreUnavailable
from docpop.populate.reference_spec import ReferenceSpec, normalize_specs
from docpop.stores.store_base import DocumentStore


LOG = logging.getLogger(__name__)


class BatchKey(NamedTuple):
    """Identifies one store query of a spec: the collection and whether `match` applies."""

    collection: str
    filtered: bool


@dataclass
class _Slot:
    container: Dict
    key: str
    many: bool
    refs: List[Tuple[str, Any]]
    kept: List[Any] = field(default_factory=list)


@dataclass
class _Plan:
    spec: ReferenceSpec
    slots: List[_Slot] = field(default_factory=list)
    batches: Dict[BatchKey, List[Any]] = field(default_factory=dict)
    fetched: Dict[BatchKey, List[Dict]] = field(default_factory=dict)

    def add_ids(self, key: BatchKey, ids: Iterable[Any]):
        batch = self.batches.setdefault(key, [])
        seen = set(batch)
        for ident in ids:
            if ident not in seen:
                batch.append(ident)
                seen.add(ident)


class ReferenceResolver:
    """
    Replaces reference identifiers with the documents they point at.

    A resolver holds no state between calls; one instance may serve
    concurrent `resolve` calls as long as its store supports concurrent reads.

    Attributes:
        store (DocumentStore): The store referenced documents are read from.
        id_field (str): The identifier field of referenced documents.
        max_workers (int): Number of threads used to fetch sibling batches
            concurrently; 1 fetches them one after another.
        timeout (Optional[float]): Seconds to wait for each concurrent fetch.

    Methods:
        resolve: Populate documents according to a list of specs.
    """

    def __init__(
        self,
        store: DocumentStore,
        id_field: str = "_id",
        max_workers: int = 1,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the resolver.

        Args:
            store: The store referenced documents are read from.
            id_field: The identifier field of referenced documents.
            max_workers: Number of threads used to fetch sibling batches concurrently.
            timeout: Seconds to wait for each concurrent fetch. Setting it runs
                the fetches in worker threads even when `max_workers` is 1.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}.")
        self.store: DocumentStore = store
        self.id_field: str = id_field
        self.max_workers: int = max_workers
        self.timeout: Optional[float] = timeout

    def resolve(
        self, documents: Iterable[Dict], specs: Any, refs: Optional[Mapping[str, str]] = None
    ) -> List[Dict]:
        """
        Populate the references of `documents` described by `specs`.

        The input documents are not modified; resolved copies are returned.

        Args:
            documents: The root documents, all from the same collection.
            specs: A `ReferenceSpec`, its dict form, a space-separated string of
                paths, or a list of any of these.
            refs: A mapping of field path to target collection for the shorthand forms.

        Returns:
            New documents with references replaced by documents, lists of
            documents, or `ABSENT`.

        Raises:
            InvalidSpec: If a spec or a document is malformed. Raised before any store query.
            StoreUnavailable: If the store fails to answer a query.
        """
        spec_list = normalize_specs(specs, refs)
        for spec in spec_list:
            spec.validate(self.id_field)

        working = deepcopy(list(documents))
        for document in working:
            if not isinstance(document, dict):
                raise InvalidSpec(f"Documents must be dictionaries, got {type(document).__name__}.")

        if spec_list and working:
            self._resolve_level(working, spec_list, depth=0)
        return working

    def _resolve_level(self, documents: List[Dict], specs: List[ReferenceSpec], depth: int):
        """
        Resolve one level of specs on a list of documents, in place.

        Args:
            documents: The documents to modify.
            specs: The specs of this level.
            depth: How many levels of nesting lie above this one.
        """
        plans = [self._plan(documents, spec) for spec in specs]
        jobs = [(plan, key, ids) for plan in plans for key, ids in plan.batches.items()]
        LOG.debug(
            f"Resolving {len(specs)} spec(s) over {len(documents)} document(s) at depth {depth} "
            f"with {len(jobs)} store quer{'y' if len(jobs) == 1 else 'ies'}."
        )

        if jobs and (self.max_workers > 1 or self.timeout is not None):
            self._fetch_concurrently(jobs)
        else:
            for plan, key, ids in jobs:
                plan.fetched[key] = self._fetch(plan.spec, key, ids)

        for plan in plans:
            if plan.spec.nested:
                self._resolve_nested(plan, depth)

        for plan in plans:
            self._substitute(plan)

    def _resolve_nested(self, plan: _Plan, depth: int):
        """
        Resolve a spec's nested specs on every document its batches fetched.

        The batches are combined first, so each nested spec costs one query per
        (collection, filtered) combination however many batches the parent had.

        Args:
            plan: A plan whose batches have all been fetched.
            depth: The depth of the plan's spec.
        """
        combined: Dict[int, Dict] = {}
        for documents in plan.fetched.values():
            for document in documents:
                combined.setdefault(id(document), document)
        if combined:
            self._resolve_level(list(combined.values()), plan.spec.nested, depth + 1)

    def _classify(self, value: Any, spec: ReferenceSpec) -> Optional[Tuple[str, Any]]:
        """
        Interpret one raw value as a reference.

        Args:
            value: A value read at the spec's path (or an element of a list there).
            spec: The spec being resolved.

        Returns:
            A `(collection, identifier)` pair, or None if `value` is already a document.

        Raises:
            InvalidSpec: If `value` can't be used as an identifier.
        """
        if isinstance(value, Reference):
            ref = value
        elif Reference.is_reference_dict(value):
            ref = Reference.from_dict(value)
        elif isinstance(value, Mapping):
            return None
        else:
            ref = Reference(spec.target, value)

        if not isinstance(ref.id, Hashable):
            raise InvalidSpec(f"Unusable identifier {ref.id!r} at path '{spec.path}'.")
        return ref.collection or spec.target, ref.id

    def _plan(self, documents: List[Dict], spec: ReferenceSpec) -> _Plan:
        """
        Find every reference a spec addresses and group the identifiers into batches.

        Unset references are set to `ABSENT` here, since they need no query.

        Args:
            documents: The documents to walk.
            spec: The spec being resolved.

        Returns:
            The plan holding the slots to fill and the identifiers to fetch.
        """
        plan = _Plan(spec)
        for document in documents:
            for container, key in iter_slots(document, spec.path):
                value = container.get(key, MISSING)
                if value is MISSING or is_unset(value):
                    container[key] = ABSENT
                    continue

                if isinstance(value, (list, tuple)):
                    refs, kept = [], []
                    for item in value:
                        if is_unset(item):
                            continue
                        ref = self._classify(item, spec)
                        if ref is None:
                            kept.append(item)
                        else:
                            refs.append(ref)
                    if not refs:
                        # Empty, unset, or already resolved
                        container[key] = kept
                        continue
                    slot = _Slot(container, key, many=True, refs=refs, kept=kept)
                    filtered = bool(spec.match)
                else:
                    ref = self._classify(value, spec)
                    if ref is None:
                        continue
                    slot = _Slot(container, key, many=False, refs=[ref])
                    filtered = False

                plan.slots.append(slot)
                for collection, ident in slot.refs:
                    plan.add_ids(BatchKey(collection, filtered), [ident])
        return plan

    def _fetch(self, spec: ReferenceSpec, key: BatchKey, ids: List[Any]) -> List[Dict]:
        """
        Run the single store query for one batch.

        Args:
            spec: The spec being resolved.
            key: The batch to fetch.
            ids: The identifiers of the batch.

        Returns:
            The fetched documents, in store (or sort) order.

        Raises:
            StoreUnavailable: If the store fails.
        """
        query: Dict = {self.id_field: {"$in": ids}}
        if key.filtered:
            query = {"$and": [query, spec.match]}
        projection = spec.select.with_field(self.id_field)

        try:
            documents = self.store.find(
                key.collection, query, None if projection.is_empty else projection, spec.sort or None
            )
        except (StoreUnavailable, InvalidSpec):
            raise
        except Exception as exc:  # pylint: disable=broad-except
            raise StoreUnavailable(
                f"Store '{self.store.get_name()}' failed to fetch '{key.collection}' for path '{spec.path}': {exc}"
            ) from exc

        LOG.debug(
            f"Fetched {len(documents)} of {len(ids)} '{key.collection}' document(s) for path '{spec.path}'"
            f"{' with filter' if key.filtered else ''}."
        )
        return documents

    def _fetch_concurrently(self, jobs: List[Tuple[_Plan, BatchKey, List[Any]]]):
        """
        Run the fetches of one level in a thread pool.

        Workers only query the store; nested levels are planned in the calling
        thread once the level's fetches are done, each with a pool of its own.

        Args:
            jobs: `(plan, batch key, identifiers)` triples.

        Raises:
            StoreUnavailable: If any fetch fails, times out, or is cancelled.
        """
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="docpop-resolve")
        futures = [(plan, key, executor.submit(self._fetch, plan.spec, key, ids)) for plan, key, ids in jobs]
        try:
            for plan, key, future in futures:
                plan.fetched[key] = future.result(timeout=self.timeout)
        except FuturesTimeoutError as exc:
            raise StoreUnavailable(f"Timed out after {self.timeout}s waiting for the store.") from exc
        except CancelledError as exc:
            raise StoreUnavailable("A store query was cancelled.") from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _finish(self, document: Dict, spec: ReferenceSpec) -> Dict:
        """
        Copy a fetched document for substitution, dropping the identifier if the projection excluded it.
        """
        finished = deepcopy(document)
        if spec.select.excludes(self.id_field):
            finished.pop(self.id_field, None)
        return finished

    def _substitute(self, plan: _Plan):
        """
        Write the fetched documents of a plan back into its slots.

        Args:
            plan: A plan whose batches have all been fetched.
        """
        spec = plan.spec
        # identifier -> (position in the fetched order, document)
        indexes: Dict[BatchKey, Dict[Any, Tuple[int, Dict]]] = {
            key: {doc.get(self.id_field): (position, doc) for position, doc in enumerate(documents)}
            for key, documents in plan.fetched.items()
        }

        for slot in plan.slots:
            if not slot.many:
                collection, ident = slot.refs[0]
                found = indexes[BatchKey(collection, False)].get(ident)
                slot.container[slot.key] = ABSENT if found is None else self._finish(found[1], spec)
                continue

            filtered = bool(spec.match)
            wanted: Dict[str, set] = {}
            for collection, ident in slot.refs:
                wanted.setdefault(collection, set()).add(ident)

            resolved = []
            for collection, idents in wanted.items():
                index = indexes[BatchKey(collection, filtered)]
                hits = sorted((index[ident] for ident in idents if ident in index), key=lambda pair: pair[0])
                resolved.extend(doc for _, doc in hits)
            if spec.sort and len(wanted) > 1:
                resolved = sort_documents(resolved, spec.sort)

            values = list(slot.kept) + [self._finish(doc, spec) for doc in resolved]
            if spec.limit is not None:
                values = values[: spec.limit]
            slot.container[slot.key] = values


def resolve(
    documents: Iterable[Dict],
    specs: Any,
    store: DocumentStore,
    id_field: str = "_id",
    max_workers: int = 1,
    timeout: Optional[float] = None,
    refs: Optional[Mapping[str, str]] = None,
) -> List[Dict]:
    """
    Populate the references of `documents` described by `specs`.

    This is a shortcut for `ReferenceResolver(store, ...).resolve(documents, specs, refs)`.

    Args:
        documents: The root documents, all from the same collection.
        specs: A `ReferenceSpec`, its dict form, a space-separated string of
            paths, or a list of any of these.
        store: The store referenced documents are read from.
        id_field: The identifier field of referenced documents.
        max_workers: Number of threads used to fetch sibling batches concurrently.
        timeout: Seconds to wait for each concurrent fetch.
        refs: A mapping of field path to target collection for the shorthand forms.

    Returns:
        New documents with references replaced by documents, lists of
        documents, or `ABSENT`.

    Raises:
        InvalidSpec: If a spec or a document is malformed.
        StoreUnavailable: If the store fails to answer a query.
    """
    resolver = ReferenceResolver(store, id_field=id_field, max_workers=max_workers, timeout=timeout)
    return resolver.resolve(documents, specs, refs)
