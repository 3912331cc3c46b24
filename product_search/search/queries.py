"""
Query construct builder - maps typed request parameters to Elasticsearch query DSL.
Every function is pure: it returns a descriptor and never talks to the cluster.
The repository executes descriptors through its generic search/aggregate calls.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

NAME_FIELD = "name"
CATEGORY_FIELD = "category"
PRICE_FIELD = "price"
IN_STOCK_FIELD = "inStock"

# Fuzzy name search policy: one edit, first three characters must match exactly
FUZZY_EDIT_DISTANCE = 1
FUZZY_PREFIX_LENGTH = 3

DEFAULT_PREFIX_LIMIT = 5
DEFAULT_BUCKET_SIZE = 100

BY_CATEGORY_AGG = "by_category"
AVG_PRICE_AGG = "avg_price"


@dataclass(frozen=True)
class SearchQuery:
    """Query body plus optional hit limit (None = engine default)."""

    query: dict[str, Any]
    size: int | None = None


@dataclass(frozen=True)
class CategoryAggregation:
    """Terms aggregation over category. `metric` names the sub-aggregation to read; None reads doc_count."""

    aggs: dict[str, Any]
    metric: str | None = None
    name: str = BY_CATEGORY_AGG


def _number(value: Decimal | float | int) -> float:
    # JSON has no decimal type; ES stores price as scaled_float anyway
    return float(value)


def name_match(name: str) -> SearchQuery:
    return SearchQuery(query={"match": {NAME_FIELD: name}})


def in_stock_term(in_stock: bool) -> SearchQuery:
    return SearchQuery(query={"term": {IN_STOCK_FIELD: in_stock}})


def price_range(min_price: Decimal, max_price: Decimal) -> SearchQuery:
    """Inclusive on both ends."""
    return SearchQuery(
        query={"range": {PRICE_FIELD: {"gte": _number(min_price), "lte": _number(max_price)}}}
    )


def name_prefix(name: str, limit: int = DEFAULT_PREFIX_LIMIT) -> SearchQuery:
    """Wildcard `<term>*` on name. Lower-cased because the name field is indexed as lowercase tokens."""
    return SearchQuery(
        query={"wildcard": {NAME_FIELD: {"value": f"{name.lower()}*"}}},
        size=limit,
    )


def fuzzy_name(name: str) -> SearchQuery:
    return SearchQuery(
        query={
            "match": {
                NAME_FIELD: {
                    "query": name,
                    "fuzziness": FUZZY_EDIT_DISTANCE,
                    "prefix_length": FUZZY_PREFIX_LENGTH,
                }
            }
        }
    )


def multi_match(text: str) -> SearchQuery:
    return SearchQuery(
        query={"multi_match": {"query": text, "fields": [CATEGORY_FIELD, NAME_FIELD]}}
    )


def category_bool(category: str, price: Decimal, in_stock: bool) -> SearchQuery:
    """
    Category must match exactly. Cheaper-than-price and stock state only boost
    the score (should clauses are optional once a must clause is present).
    """
    return SearchQuery(
        query={
            "bool": {
                "must": [{"term": {CATEGORY_FIELD: category}}],
                "should": [
                    {"range": {PRICE_FIELD: {"lt": _number(price)}}},
                    {"term": {IN_STOCK_FIELD: in_stock}},
                ],
            }
        }
    )


def _by_category(bucket_size: int, sub_aggs: dict[str, Any] | None = None) -> dict[str, Any]:
    agg: dict[str, Any] = {"terms": {"field": CATEGORY_FIELD, "size": bucket_size}}
    if sub_aggs:
        agg["aggs"] = sub_aggs
    return {BY_CATEGORY_AGG: agg}


def average_price_per_category(bucket_size: int = DEFAULT_BUCKET_SIZE) -> CategoryAggregation:
    return CategoryAggregation(
        aggs=_by_category(bucket_size, {AVG_PRICE_AGG: {"avg": {"field": PRICE_FIELD}}}),
        metric=AVG_PRICE_AGG,
    )


def count_per_category(bucket_size: int = DEFAULT_BUCKET_SIZE) -> CategoryAggregation:
    return CategoryAggregation(aggs=_by_category(bucket_size))
