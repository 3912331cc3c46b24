"""
Elasticsearch client construction and index management.
Design: the API builds one AsyncElasticsearch at startup (lifespan), keeps it on
app.state and hands it to request handlers through `get_elasticsearch`.
Scripts use the sync client built from the same settings.
"""

import logging
from typing import Any

from elasticsearch import AsyncElasticsearch, Elasticsearch
from fastapi import Request

from product_search.config import Settings
from product_search.search.mappings import products_index_mappings, products_index_settings

logger = logging.getLogger(__name__)


def _es_client_options(settings: Settings) -> dict[str, Any]:
    """Build Elasticsearch client options from settings (host/port pair, optional basic auth)."""
    opts: dict[str, Any] = {
        "hosts": [settings.elasticsearch_url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": settings.elasticsearch_request_timeout,
    }
    if settings.elasticsearch_username and settings.elasticsearch_password:
        opts["basic_auth"] = (settings.elasticsearch_username, settings.elasticsearch_password)
    return opts


def create_elasticsearch(settings: Settings) -> AsyncElasticsearch:
    """New async client. Connection pooling is owned by the client."""
    return AsyncElasticsearch(**_es_client_options(settings))


def create_sync_elasticsearch(settings: Settings) -> Elasticsearch:
    """Sync client for command-line scripts."""
    return Elasticsearch(**_es_client_options(settings))


def get_elasticsearch(request: Request) -> AsyncElasticsearch:
    """FastAPI dependency: the client created in lifespan. Overridden in tests."""
    return request.app.state.elasticsearch


async def ensure_products_index(es: AsyncElasticsearch, settings: Settings) -> bool:
    """Create the products index with its explicit mapping if missing. Returns True when created."""
    if await es.indices.exists(index=settings.products_index):
        return False
    await es.indices.create(
        index=settings.products_index,
        settings=products_index_settings(settings.products_index_replicas),
        mappings=products_index_mappings(),
    )
    logger.info("Created index %r", settings.products_index)
    return True
