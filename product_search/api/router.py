"""
API router - aggregates all endpoint modules.
"""

from fastapi import APIRouter

from product_search.api.endpoints import health, products

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
