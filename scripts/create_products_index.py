#!/usr/bin/env python3
"""
Create the Elasticsearch 'products' index with its explicit mapping.
The API also does this on startup; use the script to (re)create it by hand:
  python scripts/create_products_index.py
  python scripts/create_products_index.py --reset

Reads ELASTICSEARCH_HOST / ELASTICSEARCH_PORT from .env (default localhost:9200).
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from product_search.config import get_settings
from product_search.search.elasticsearch_client import create_sync_elasticsearch
from product_search.search.mappings import (
    PRODUCTS_MAPPING_VERSION,
    products_index_mappings,
    products_index_settings,
)


def main():
    ap = argparse.ArgumentParser(description="Create the products index")
    ap.add_argument("--reset", action="store_true", help="Delete the index first (all products are lost)")
    args = ap.parse_args()

    settings = get_settings()
    index = settings.products_index
    es = create_sync_elasticsearch(settings)

    if es.indices.exists(index=index):
        if not args.reset:
            print(f"Index '{index}' already exists. Use --reset to recreate it.")
            return
        es.indices.delete(index=index)
        print(f"Deleted index '{index}'.")

    es.indices.create(
        index=index,
        settings=products_index_settings(settings.products_index_replicas),
        mappings=products_index_mappings(),
    )
    print(f"Created index '{index}' (mapping version {PRODUCTS_MAPPING_VERSION}, "
          f"number_of_replicas={settings.products_index_replicas}).")


if __name__ == "__main__":
    main()
