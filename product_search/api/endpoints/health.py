"""
Health checks - for load balancers, Kubernetes, and monitoring.
Liveness is process-only; readiness pings Elasticsearch.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from product_search.config import get_settings
from product_search.core.dependencies import get_product_repository
from product_search.repositories.product_repository import ProductRepository

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(repo: Annotated[ProductRepository, Depends(get_product_repository)]):
    """Readiness: is the search backend reachable?"""
    if not await repo.ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Elasticsearch unreachable",
        )
    return {"status": "ready"}
