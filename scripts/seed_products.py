#!/usr/bin/env python3
"""
Seed script: creates sample products via the bulk API (no direct ES access).
Run: API must be running.
  python scripts/seed_products.py
  python scripts/seed_products.py --count 500 --batch-size 100
"""

import argparse
import random
import sys

import httpx

API_BASE = "http://localhost:8000/api"

CATALOGUE = {
    "footwear": ["Shoe", "Sneaker", "Sandal", "Boot", "Slipper", "Shoelace"],
    "electronics": ["Laptop", "Headphones", "Keyboard", "Monitor", "Webcam", "Charger"],
    "kitchen": ["Blender", "Toaster", "Kettle", "Coffee maker", "Air fryer"],
    "books": ["Python handbook", "Search engines in practice", "Shell scripting"],
    "outdoor": ["Tent", "Backpack", "Sleeping bag", "Shovel"],
}


def random_product(n: int) -> dict:
    category = random.choice(list(CATALOGUE))
    name = random.choice(CATALOGUE[category])
    if random.random() > 0.5:
        name = f"{name} {random.randint(1, 999)}"
    return {
        "id": str(n),
        "name": name,
        "category": category,
        "price": round(random.uniform(1, 500), 2),
        "inStock": random.random() > 0.3,
    }


def main():
    ap = argparse.ArgumentParser(description="Seed products via API")
    ap.add_argument("--count", type=int, default=200, help="Number of products to create")
    ap.add_argument("--batch-size", type=int, default=50, help="Products per bulk request")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    products = [random_product(i + 1) for i in range(args.count)]
    created = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        for start in range(0, len(products), args.batch_size):
            batch = products[start:start + args.batch_size]
            try:
                r = client.post("/products/bulk", json=batch)
            except httpx.HTTPError as e:
                errors.append(f"Batch at {start}: {e}")
                continue
            if r.status_code == 201:
                created += len(batch)
            else:
                errors.append(f"Batch at {start}: {r.status_code} {r.text[:120]}")
            print(f"  ... {start + len(batch)} products sent")

    print(f"\nDone. Products created: {created}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")
        sys.exit(1)


if __name__ == "__main__":
    main()
