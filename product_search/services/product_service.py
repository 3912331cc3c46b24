"""
Product service - one use case per endpoint.
Challenge: Keep controllers thin; pick the query construct, let the repository execute it.
"""

from decimal import Decimal

from product_search.repositories.product_repository import ProductRepository
from product_search.schemas.product import Product
from product_search.search import queries
from product_search.search.queries import DEFAULT_BUCKET_SIZE, DEFAULT_PREFIX_LIMIT


class ProductService:
    """Handles product use cases: CRUD, queries, category aggregations."""

    def __init__(
        self,
        product_repo: ProductRepository,
        *,
        prefix_limit: int = DEFAULT_PREFIX_LIMIT,
        bucket_size: int = DEFAULT_BUCKET_SIZE,
    ):
        self.product_repo = product_repo
        self.prefix_limit = prefix_limit
        self.bucket_size = bucket_size

    async def create(self, product: Product) -> Product:
        return await self.product_repo.save(product)

    async def bulk_create(self, products: list[Product]) -> list[Product]:
        return await self.product_repo.bulk_save(products)

    async def get_by_id(self, id: str) -> Product | None:
        return await self.product_repo.find_by_id(id)

    async def list_all(self) -> list[Product]:
        return await self.product_repo.find_all()

    async def delete(self, id: str) -> bool:
        """Delete product. Returns False when it does not exist (lookup decides the status code)."""
        if await self.product_repo.find_by_id(id) is None:
            return False
        await self.product_repo.delete_by_id(id)
        return True

    async def find_by_name(self, name: str) -> list[Product]:
        return await self.product_repo.search(queries.name_match(name))

    async def find_by_in_stock(self, in_stock: bool) -> list[Product]:
        return await self.product_repo.search(queries.in_stock_term(in_stock))

    async def find_by_price_between(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        return await self.product_repo.search(queries.price_range(min_price, max_price))

    async def find_names_by_prefix(self, name: str) -> list[str]:
        """Names only, at most `prefix_limit` of them."""
        products = await self.product_repo.search(queries.name_prefix(name, self.prefix_limit))
        return [p.name for p in products]

    async def find_by_fuzzy_name(self, name: str) -> list[Product]:
        return await self.product_repo.search(queries.fuzzy_name(name))

    async def find_by_multi_match(self, text: str) -> list[Product]:
        return await self.product_repo.search(queries.multi_match(text))

    async def find_by_bool_query(self, category: str, price: Decimal, in_stock: bool) -> list[Product]:
        return await self.product_repo.search(queries.category_bool(category, price, in_stock))

    async def average_price_per_category(self) -> dict[str, float | None]:
        return await self.product_repo.aggregate(queries.average_price_per_category(self.bucket_size))

    async def count_per_category(self) -> dict[str, int]:
        return await self.product_repo.aggregate(queries.count_per_category(self.bucket_size))
