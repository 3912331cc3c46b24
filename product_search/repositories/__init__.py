# Repository pattern: Elasticsearch access behind one facade

from product_search.repositories.product_repository import ProductRepository

__all__ = ["ProductRepository"]
