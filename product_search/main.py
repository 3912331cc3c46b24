"""
FastAPI application entry point.
Mounts routes, Prometheus metrics, and owns the Elasticsearch client lifecycle.
"""

import logging
from contextlib import asynccontextmanager

from elasticsearch import ApiError, TransportError
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from product_search.api.router import api_router
from product_search.config import get_settings
from product_search.core.errors import SearchBackendError, search_backend_error_handler
from product_search.search.elasticsearch_client import create_elasticsearch, ensure_products_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the client and ensure the products index. Shutdown: close the client."""
    settings = get_settings()
    es = create_elasticsearch(settings)
    app.state.elasticsearch = es
    try:
        await ensure_products_index(es, settings)
    except (ApiError, TransportError) as e:
        # ES may still be starting; requests will report 503 until it is reachable
        logger.warning("Could not ensure index %r at startup: %s", settings.products_index, e)
    yield
    await es.close()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="REST facade over Elasticsearch for product CRUD, queries and category aggregations.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SearchBackendError, search_backend_error_handler)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
