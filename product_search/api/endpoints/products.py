"""
Product endpoints - CRUD, query constructs and category aggregations.
Design: Thin controller; each route is one service call. Fixed paths are
declared before `/{product_id}` so they are never captured by it.
"""

from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query, status

from product_search.core.dependencies import ProductServiceDep
from product_search.schemas.product import Product

router = APIRouter()


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(svc: ProductServiceDep, product: Product):
    """Create or overwrite a product (upsert by id)."""
    return await svc.create(product)


@router.post("/bulk", response_model=list[Product], status_code=status.HTTP_201_CREATED)
async def bulk_create_products(svc: ProductServiceDep, products: list[Product]):
    """Index many products in one bulk request."""
    return await svc.bulk_create(products)


@router.get("", response_model=list[Product])
async def list_products(svc: ProductServiceDep):
    return await svc.list_all()


@router.get("/name", response_model=list[Product])
async def get_products_by_name(svc: ProductServiceDep, name: str = Query(...)):
    return await svc.find_by_name(name)


@router.get("/inStock", response_model=list[Product])
async def get_products_by_in_stock(svc: ProductServiceDep, in_stock: bool = Query(..., alias="inStock")):
    return await svc.find_by_in_stock(in_stock)


@router.get("/query/range/search", response_model=list[Product])
async def get_products_by_price_between(
    svc: ProductServiceDep,
    min_price: Decimal = Query(..., alias="minPrice"),
    max_price: Decimal = Query(..., alias="maxPrice"),
):
    """Products with minPrice <= price <= maxPrice."""
    return await svc.find_by_price_between(min_price, max_price)


@router.get("/query/wildCard/search", response_model=list[str])
async def get_product_names_by_wildcard(svc: ProductServiceDep, name: str = Query(...)):
    """Names starting with `name` (case-insensitive), first 5 only."""
    return await svc.find_names_by_prefix(name)


@router.get("/query/fuzzy/search", response_model=list[Product])
async def get_products_by_fuzzy_search(svc: ProductServiceDep, name: str = Query(...)):
    return await svc.find_by_fuzzy_name(name)


@router.get("/query/multiMatch/search", response_model=list[Product])
async def get_products_by_multi_match(svc: ProductServiceDep, name: str = Query(...)):
    """Match `name` against both category and name."""
    return await svc.find_by_multi_match(name)


@router.get("/query/bool/search", response_model=list[Product])
async def get_products_by_bool_query(
    svc: ProductServiceDep,
    category: str = Query(...),
    price: Decimal = Query(...),
    in_stock: bool = Query(..., alias="inStock"),
):
    """Category must match; cheaper than `price` and matching stock state rank higher."""
    return await svc.find_by_bool_query(category, price, in_stock)


@router.get("/aggregations/metrics/averagePrice", response_model=dict[str, float | None])
async def get_average_price_per_category(svc: ProductServiceDep):
    return await svc.average_price_per_category()


@router.get("/aggregations/metrics/docCount", response_model=dict[str, int])
async def get_product_count_per_category(svc: ProductServiceDep):
    return await svc.count_per_category()


@router.get("/{product_id}", response_model=Product)
async def get_product(svc: ProductServiceDep, product_id: str):
    product = await svc.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(svc: ProductServiceDep, product_id: str):
    ok = await svc.delete(product_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
