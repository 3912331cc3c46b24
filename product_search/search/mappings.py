"""
Explicit index definition for products, versioned alongside the Product schema.
Bump PRODUCTS_MAPPING_VERSION whenever a field type changes; the version is
stored in the index `_meta` so a stale index can be spotted.
"""

from typing import Any

PRODUCTS_MAPPING_VERSION = 1


def products_index_mappings() -> dict[str, Any]:
    """Mapping for the products index. `category` is keyword (exact match), `name` is analyzed text."""
    return {
        "_meta": {"mapping_version": PRODUCTS_MAPPING_VERSION},
        "properties": {
            "id": {"type": "keyword"},
            "name": {"type": "text", "analyzer": "standard"},
            "category": {"type": "keyword"},
            "price": {"type": "scaled_float", "scaling_factor": 100},
            "inStock": {"type": "boolean"},
        },
    }


def products_index_settings(replicas: int = 0) -> dict[str, Any]:
    """Single-node friendly default: 0 replicas to avoid unassigned shards."""
    return {"index": {"number_of_replicas": replicas}}
