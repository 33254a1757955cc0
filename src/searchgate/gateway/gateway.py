"""Search gateway — Service layer in front of an Elasticsearch cluster.

The gateway holds one ``AsyncElasticsearch`` client and exposes:
  1. A connectivity check
  2. Index creation with default settings and mapping
  3. Single-document insert
  4. Bulk upsert that reconciles creates and updates by document id
  5. Offset-paginated listing
  6. Lookup by document identifier

Each outbound call runs under the configured timeout and retry policy.
Cluster errors are logged and re-raised as ``SearchError`` subclasses;
not-found outcomes are returned as tagged results.
"""

from __future__ import annotations

import json
import time
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from searchgate.config.settings import ClusterSettings, IndexDefaults, Settings
from searchgate.gateway.bulk import (
    chunked,
    document_id,
    existence_query,
    existence_searches,
    first_hits_by_id,
    plan_upsert,
    rejected_items,
)
from searchgate.gateway.exceptions import (
    ConfigurationError,
    PartialBulkFailure,
    RequestFailure,
    SearchError,
    TransportFailure,
)
from searchgate.gateway.retry import with_retry
from searchgate.models.document import Document, Hit, IndexCreated, IndexedDocument
from searchgate.models.result import (
    BulkUpsertResult,
    ConnectionStatus,
    DocumentFound,
    DocumentNotFound,
    DocumentPage,
    NoDocuments,
)

logger = structlog.get_logger(__name__)


def _body(response: Any) -> Any:
    """Unwrap an ``ObjectApiResponse`` into its plain body."""
    return getattr(response, "body", response)


def _status_of(exc: ApiError) -> int | None:
    meta = getattr(exc, "meta", None)
    return getattr(meta, "status", None)


class SearchGateway:
    """Gateway to a single Elasticsearch cluster.

    Args:
        cluster: Connection settings. Uses defaults if None.
        index_defaults: Index and write defaults. Uses defaults if None.
        client: Pre-built client; when given, ``initialize()`` keeps it.

    Example:
        >>> async with SearchGateway(ClusterSettings(hosts=["http://localhost:9200"])) as gw:
        ...     await gw.bulk_upsert("articles", [{"id": 1, "title": "A"}])
    """

    def __init__(
        self,
        cluster: ClusterSettings | None = None,
        index_defaults: IndexDefaults | None = None,
        *,
        client: AsyncElasticsearch | None = None,
    ) -> None:
        self._cluster = cluster or ClusterSettings()
        self._defaults = index_defaults or IndexDefaults()
        self._client: Any = client
        self._validate()

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchGateway:
        return cls(settings.cluster, settings.index)

    @property
    def cluster(self) -> ClusterSettings:
        return self._cluster

    @property
    def index_defaults(self) -> IndexDefaults:
        return self._defaults

    def _validate(self) -> None:
        if not self._cluster.hosts:
            raise ConfigurationError("At least one cluster host is required.")
        if bool(self._cluster.username) != bool(self._cluster.password):
            raise ConfigurationError("Basic auth needs both a username and a password.")

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the cluster client. No request is sent."""
        if self._client is not None:
            return

        cfg = self._cluster
        client_kwargs: dict[str, Any] = {
            "hosts": cfg.hosts,
            "verify_certs": cfg.verify_certs,
            "request_timeout": cfg.request_timeout,
            # Retries are handled by with_retry
            "max_retries": 0,
            "retry_on_timeout": False,
        }
        if cfg.ca_certs:
            client_kwargs["ca_certs"] = cfg.ca_certs
        if not cfg.verify_certs:
            client_kwargs["ssl_show_warn"] = False
            logger.warning("tls_verification_disabled", hosts=cfg.hosts)
        if cfg.api_key:
            client_kwargs["api_key"] = cfg.api_key
        elif cfg.username and cfg.password:
            client_kwargs["basic_auth"] = (cfg.username, cfg.password)

        self._client = AsyncElasticsearch(**client_kwargs)
        logger.info("cluster_client_created", hosts=cfg.hosts)

    async def shutdown(self) -> None:
        """Close the cluster client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def __aenter__(self) -> SearchGateway:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    def _require_client(self) -> Any:
        if self._client is None:
            raise TransportFailure("Elasticsearch client not initialized.")
        return self._client

    async def _call(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        *,
        index: str | None = None,
    ) -> Any:
        """Run one outbound call, translating client errors to ``SearchError``."""
        try:
            response = await with_retry(call, self._cluster, operation=operation)
        except ApiError as e:
            error: SearchError = RequestFailure(f"{operation} failed: {e}", status=_status_of(e))
            self._log_failure(operation, index, error)
            raise error from e
        except TransportError as e:
            error = TransportFailure(f"{operation} failed: {e}")
            self._log_failure(operation, index, error)
            raise error from e
        return _body(response)

    @staticmethod
    def _log_failure(operation: str, index: str | None, error: SearchError) -> None:
        logger.error(
            "cluster_call_failed",
            operation=operation,
            index=index,
            error_kind=error.kind,
            status=error.status,
            error=error.message,
        )

    # ── Connectivity ─────────────────────────────────────────────────────

    async def check_connection(self) -> ConnectionStatus:
        """Ping the cluster and report whether it answered."""
        if self._client is None:
            return ConnectionStatus(connected=False, message="Connection failed: client not initialized")
        client = self._client

        start = time.monotonic()
        try:
            alive = await self._call("ping", lambda: client.ping())
            info = await self._call("info", lambda: client.info()) if alive else {}
        except SearchError as e:
            return ConnectionStatus(
                connected=False,
                message=f"Connection failed: {e.message}",
                latency_ms=int((time.monotonic() - start) * 1000),
            )
        latency_ms = int((time.monotonic() - start) * 1000)

        if not alive:
            logger.warning("cluster_ping_failed", hosts=self._cluster.hosts)
            return ConnectionStatus(connected=False, message="Connection failed", latency_ms=latency_ms)

        return ConnectionStatus(
            connected=True,
            message="Connection successful",
            latency_ms=latency_ms,
            cluster_name=info.get("cluster_name"),
            version=(info.get("version") or {}).get("number"),
        )

    # ── Indices and documents ────────────────────────────────────────────

    async def create_index(
        self,
        name: str,
        *,
        index_settings: dict[str, Any] | None = None,
        mappings: dict[str, Any] | None = None,
    ) -> IndexCreated:
        """Create ``name`` with the default shard/replica settings and mapping.

        Args:
            name: Index name.
            index_settings: Settings merged over the configured defaults.
            mappings: Mapping used instead of the configured default.
        """
        client = self._require_client()
        body_settings: dict[str, Any] = {
            "number_of_shards": self._defaults.number_of_shards,
            "number_of_replicas": self._defaults.number_of_replicas,
        }
        body_settings.update(index_settings or {})
        body_mappings = mappings if mappings is not None else self._defaults.mappings

        response = await self._call(
            "create_index",
            lambda: client.indices.create(index=name, settings=body_settings, mappings=body_mappings),
            index=name,
        )
        logger.info("index_created", index=name)
        return IndexCreated(
            index=response.get("index", name),
            acknowledged=bool(response.get("acknowledged")),
            shards_acknowledged=bool(response.get("shards_acknowledged")),
        )

    async def insert_document(self, index: str, document: Document) -> IndexedDocument:
        """Write one document. Its id field, when present, becomes the ``_id``."""
        client = self._require_client()
        kwargs: dict[str, Any] = {"index": index, "document": document, "refresh": self._defaults.refresh}
        doc_id = document.get(self._defaults.id_field)
        if doc_id is not None:
            kwargs["id"] = str(doc_id)

        response = await self._call("insert_document", lambda: client.index(**kwargs), index=index)
        return IndexedDocument(
            index=response.get("_index", index),
            id=str(response.get("_id", "")),
            result=response.get("result", ""),
            version=response.get("_version"),
        )

    # ── Bulk upsert ──────────────────────────────────────────────────────

    async def find_existing(self, index: str, doc_id: Any) -> list[Hit]:
        """Return every hit whose id field equals ``doc_id`` (possibly none)."""
        client = self._require_client()
        query = existence_query(self._defaults.id_field, doc_id)
        response = await self._call(
            "find_existing",
            lambda: client.search(index=index, query=query),
            index=index,
        )
        return [Hit.from_raw(hit) for hit in response.get("hits", {}).get("hits", [])]

    async def find_existing_many(self, index: str, ids: list[Any]) -> dict[str, str]:
        """Resolve document ids to the ``_id`` of their first hit.

        Ids are looked up with multi-search requests of at most
        ``existence_batch_size`` single-hit searches each, so every id gets
        the same answer ``find_existing`` would give.
        """
        if not ids:
            return {}
        client = self._require_client()
        existing: dict[str, str] = {}
        for chunk in chunked(ids, self._defaults.existence_batch_size):
            searches = existence_searches(index, self._defaults.id_field, chunk)
            response = await self._call(
                "find_existing",
                lambda searches=searches: client.msearch(searches=searches),
                index=index,
            )
            responses = response.get("responses", [])
            for item in responses:
                if "error" in item:
                    error = RequestFailure(
                        f"find_existing failed: {json.dumps(item['error'], default=str)}",
                        status=item.get("status"),
                    )
                    self._log_failure("find_existing", index, error)
                    raise error
            for key, target in first_hits_by_id(chunk, responses).items():
                existing.setdefault(key, target)
        return existing

    async def bulk_upsert(self, index: str, documents: list[Document]) -> BulkUpsertResult:
        """Create new documents and partially update existing ones in one bulk request.

        Raises:
            RequestFailure: A document has no id, or the request was rejected.
            PartialBulkFailure: The cluster rejected some items.
            TransportFailure: The cluster could not be reached.
        """
        id_field = self._defaults.id_field
        try:
            ids = list(dict.fromkeys(document_id(doc, id_field) for doc in documents))
        except RequestFailure as e:
            logger.warning("bulk_upsert_rejected", index=index, error_kind=e.kind, error=e.message)
            raise

        if not documents:
            return BulkUpsertResult()

        existing = await self.find_existing_many(index, ids)
        plan = plan_upsert(index, documents, existing, id_field)
        logger.debug("bulk_upsert_plan", index=index, operations=plan.operations)

        client = self._require_client()
        response = await self._call(
            "bulk_upsert",
            lambda: client.bulk(operations=plan.operations, refresh=self._defaults.refresh),
            index=index,
        )

        if response.get("errors"):
            raw_items = list(response.get("items", []))
            failure = PartialBulkFailure(
                "Bulk operation failed: " + json.dumps(raw_items, default=str),
                items=rejected_items(raw_items),
                raw_items=raw_items,
            )
            logger.error(
                "bulk_upsert_failed",
                index=index,
                error_kind=failure.kind,
                rejected=len(failure.items),
                total=len(raw_items),
            )
            raise failure

        logger.info("bulk_upsert_done", index=index, created=len(plan.created), updated=len(plan.updated))
        return BulkUpsertResult(created=plan.created, updated=plan.updated)

    # ── Queries ──────────────────────────────────────────────────────────

    async def list_documents(self, index: str, page: int = 1, page_size: int = 10) -> DocumentPage | NoDocuments:
        """Return one page of ``index`` using offset pagination."""
        if page < 1 or page_size < 1:
            raise RequestFailure(f"page and page_size must be positive, got page={page} page_size={page_size}")

        client = self._require_client()
        offset = (page - 1) * page_size
        response = await self._call(
            "list_documents",
            lambda: client.search(index=index, query={"match_all": {}}, from_=offset, size=page_size),
            index=index,
        )

        hits = response.get("hits") or {}
        if "hits" not in hits:
            return NoDocuments()

        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        return DocumentPage(
            total=total,
            documents=[Hit.from_raw(hit) for hit in hits["hits"]],
            page=page,
            page_size=page_size,
        )

    async def get_document(self, index: str, doc_id: str) -> DocumentFound | DocumentNotFound:
        """Return the first document whose ``_id`` matches ``doc_id``."""
        client = self._require_client()
        response = await self._call(
            "get_document",
            lambda: client.search(index=index, query={"match": {"_id": doc_id}}),
            index=index,
        )
        hits = (response.get("hits") or {}).get("hits") or []
        if not hits:
            return DocumentNotFound()
        return DocumentFound(document=Hit.from_raw(hits[0]))
