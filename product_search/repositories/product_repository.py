"""
Product repository - identifier-keyed CRUD and generic search over the products index.
Challenge: Keep Elasticsearch calls in one place; surface write failures instead of hiding them.
Design: The client handle is injected, so tests pass a fake and the app passes the lifespan client.
"""

import logging
from typing import Any, Iterable

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from product_search.core.errors import ProductWriteError, SearchBackendError
from product_search.schemas.product import Product
from product_search.search.queries import CategoryAggregation, SearchQuery

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (ApiError, TransportError)

MATCH_ALL: dict[str, Any] = {"match_all": {}}


def _body(response: Any) -> dict[str, Any]:
    # Response may be ObjectApiResponse; support both .body and dict access
    return getattr(response, "body", response)


class ProductRepository:
    """Facade over the products index. One method per engine operation."""

    def __init__(
        self,
        es: AsyncElasticsearch,
        index: str = "products",
        *,
        refresh: str | bool = "wait_for",
        list_all_size: int = 10_000,
    ):
        self.es = es
        self.index = index
        self.refresh = refresh
        self.list_all_size = list_all_size

    async def save(self, product: Product) -> Product:
        """Index by id; an existing document with the same id is overwritten."""
        try:
            await self.es.index(
                index=self.index,
                id=product.id,
                document=product.to_document(),
                refresh=self.refresh,
            )
        except _BACKEND_ERRORS as e:
            logger.error("save failed for product id=%s: %s", product.id, e)
            raise ProductWriteError(f"Failed to save product {product.id}", [product.id], cause=e) from e
        return product

    async def bulk_save(self, products: Iterable[Product]) -> list[Product]:
        """One index action per product, submitted as a single bulk request."""
        products = list(products)
        if not products:
            return []
        operations: list[dict[str, Any]] = []
        for product in products:
            operations.append({"index": {"_index": self.index, "_id": product.id}})
            operations.append(product.to_document())
        try:
            response = await self.es.bulk(operations=operations, refresh=self.refresh)
        except _BACKEND_ERRORS as e:
            ids = [p.id for p in products]
            logger.error("bulk save of %d products failed: %s", len(ids), e)
            raise ProductWriteError(f"Failed to save {len(ids)} products", ids, cause=e) from e

        body = _body(response)
        if body.get("errors"):
            failed = [
                item["index"].get("_id")
                for item in body.get("items", [])
                if "error" in item.get("index", {})
            ]
            logger.error("bulk save rejected %d of %d products: ids=%s", len(failed), len(products), failed)
            raise ProductWriteError(f"{len(failed)} of {len(products)} products were not saved", failed)
        return products

    async def find_by_id(self, id: str) -> Product | None:
        """Realtime get. Missing document or missing index both yield None."""
        try:
            response = await self.es.options(ignore_status=404).get(index=self.index, id=id)
        except _BACKEND_ERRORS as e:
            raise SearchBackendError(f"Failed to fetch product {id}", cause=e) from e
        body = _body(response)
        if not body.get("found"):
            return None
        return Product.from_document(body["_source"], body["_id"])

    async def find_all(self) -> list[Product]:
        return await self.search(SearchQuery(query=MATCH_ALL, size=self.list_all_size))

    async def delete_by_id(self, id: str) -> None:
        """Remove document; deleting an absent id is a no-op."""
        try:
            await self.es.options(ignore_status=404).delete(index=self.index, id=id, refresh=self.refresh)
        except _BACKEND_ERRORS as e:
            logger.error("delete failed for product id=%s: %s", id, e)
            raise ProductWriteError(f"Failed to delete product {id}", [id], cause=e) from e

    async def search(self, query: SearchQuery) -> list[Product]:
        """Run a query descriptor. Hits come back in score order."""
        kwargs: dict[str, Any] = {"index": self.index, "query": query.query, "ignore_unavailable": True}
        if query.size is not None:
            kwargs["size"] = query.size
        try:
            response = await self.es.search(**kwargs)
        except _BACKEND_ERRORS as e:
            raise SearchBackendError("Product search failed", cause=e) from e
        hits = _body(response)["hits"]["hits"]
        if not hits:
            logger.debug("search: query=%r returned 0 hits", query.query)
        return [Product.from_document(hit["_source"], hit.get("_id")) for hit in hits]

    async def aggregate(self, aggregation: CategoryAggregation) -> dict[str, Any]:
        """Bucket key -> metric. Buckets and metrics are computed by Elasticsearch."""
        try:
            response = await self.es.search(
                index=self.index,
                size=0,
                aggs=aggregation.aggs,
                ignore_unavailable=True,
            )
        except _BACKEND_ERRORS as e:
            raise SearchBackendError("Product aggregation failed", cause=e) from e
        aggs = _body(response).get("aggregations") or {}
        buckets = aggs.get(aggregation.name, {}).get("buckets", [])
        result: dict[str, Any] = {}
        for bucket in buckets:
            key = str(bucket.get("key_as_string", bucket["key"]))
            if aggregation.metric:
                result[key] = bucket[aggregation.metric]["value"]
            else:
                result[key] = bucket["doc_count"]
        return result

    async def ping(self) -> bool:
        try:
            return bool(await self.es.ping())
        except _BACKEND_ERRORS:
            return False
