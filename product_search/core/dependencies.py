"""
FastAPI dependencies - injection of the Elasticsearch handle into repository and service.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import Depends

from product_search.config import Settings, get_settings
from product_search.repositories.product_repository import ProductRepository
from product_search.search.elasticsearch_client import get_elasticsearch
from product_search.services.product_service import ProductService

ElasticsearchClient = Annotated[AsyncElasticsearch, Depends(get_elasticsearch)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_product_repository(es: ElasticsearchClient, settings: AppSettings) -> ProductRepository:
    return ProductRepository(
        es,
        settings.products_index,
        refresh=settings.elasticsearch_refresh,
        list_all_size=settings.list_all_size,
    )


def get_product_service(
    repo: Annotated[ProductRepository, Depends(get_product_repository)],
    settings: AppSettings,
) -> ProductService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return ProductService(
        repo,
        prefix_limit=settings.prefix_search_limit,
        bucket_size=settings.category_bucket_size,
    )


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
