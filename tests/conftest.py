"""
Pytest fixtures - in-memory Elasticsearch stand-in and API client.
Isolated tests: no cluster needed. The fake evaluates the handful of query
constructs the service emits (match, term, range, wildcard, multi_match, bool,
terms + avg aggregations) closely enough to check behaviour end to end.
"""

import copy
import fnmatch
import re
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from product_search.main import app
from product_search.search.elasticsearch_client import get_elasticsearch

KEYWORD_FIELDS = {"id", "category"}
DEFAULT_SIZE = 10

_TOKEN_RE = re.compile(r"\w+")


def _tokens(text: Any) -> list[str]:
    return _TOKEN_RE.findall(str(text).lower())


def _edit_distance(a: str, b: str) -> int:
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + (ca != cb)))
        prev = cur
    return prev[-1]


def _match_field(field: str, spec: Any, doc: dict) -> float:
    if field not in doc:
        return 0.0
    if isinstance(spec, dict):
        text, fuzziness, prefix = spec["query"], int(spec.get("fuzziness", 0)), int(spec.get("prefix_length", 0))
    else:
        text, fuzziness, prefix = spec, 0, 0
    if field in KEYWORD_FIELDS:
        return 1.0 if doc[field] == text else 0.0
    doc_tokens = _tokens(doc[field])
    score = 0.0
    for qt in _tokens(text):
        for dt in doc_tokens:
            if dt == qt or (
                fuzziness
                and dt[:prefix] == qt[:prefix]
                and _edit_distance(dt, qt) <= fuzziness
            ):
                score += 1.0
                break
    return score


def _score(query: dict, doc: dict) -> float:
    """0 means no match."""
    (kind, body), = query.items()
    if kind == "match_all":
        return 1.0
    if kind == "match":
        (field, spec), = body.items()
        return _match_field(field, spec, doc)
    if kind == "term":
        (field, value), = body.items()
        if isinstance(value, dict):
            value = value["value"]
        return 1.0 if doc.get(field) == value else 0.0
    if kind == "range":
        (field, bounds), = body.items()
        if doc.get(field) is None:
            return 0.0
        v = float(doc[field])
        ok = (
            ("gte" not in bounds or v >= bounds["gte"])
            and ("lte" not in bounds or v <= bounds["lte"])
            and ("gt" not in bounds or v > bounds["gt"])
            and ("lt" not in bounds or v < bounds["lt"])
        )
        return 1.0 if ok else 0.0
    if kind == "wildcard":
        (field, spec), = body.items()
        pattern = spec["value"] if isinstance(spec, dict) else spec
        if field not in doc:
            return 0.0
        candidates = [doc[field]] if field in KEYWORD_FIELDS else _tokens(doc[field])
        return 1.0 if any(fnmatch.fnmatchcase(c, pattern) for c in candidates) else 0.0
    if kind == "multi_match":
        return max(_match_field(f, body["query"], doc) for f in body["fields"])
    if kind == "bool":
        must = [_score(q, doc) for q in body.get("must", [])]
        if any(s == 0 for s in must):
            return 0.0
        should = [_score(q, doc) for q in body.get("should", [])]
        if not must and should and not any(should):
            return 0.0
        # must-matching docs score at least 1 even when no should clause matches
        return sum(must) + sum(should) if must else sum(should)
    raise NotImplementedError(f"fake does not support {kind!r} queries")


class _FakeIndices:
    def __init__(self, es: "FakeElasticsearch"):
        self.es = es

    async def exists(self, index: str) -> bool:
        return index in self.es.docs

    async def create(self, index: str, settings: dict | None = None, mappings: dict | None = None):
        self.es.docs.setdefault(index, {})
        self.es.mappings[index] = mappings
        return {"acknowledged": True, "index": index}


class FakeElasticsearch:
    """Async client stand-in. `write_error` / `read_error` make calls raise; `reject_ids` fails bulk items."""

    def __init__(self):
        self.docs: dict[str, dict[str, dict]] = {}
        self.mappings: dict[str, dict | None] = {}
        self.calls: list[tuple[str, dict]] = []
        self.indices = _FakeIndices(self)
        self.write_error: Exception | None = None
        self.read_error: Exception | None = None
        self.reject_ids: set[str] = set()
        self.reachable = True

    def options(self, **kwargs) -> "FakeElasticsearch":
        return self

    async def ping(self) -> bool:
        return self.reachable

    async def close(self) -> None:
        pass

    async def index(self, index: str, id: str, document: dict, refresh: Any = None):
        self.calls.append(("index", {"index": index, "id": id, "document": document, "refresh": refresh}))
        if self.write_error:
            raise self.write_error
        store = self.docs.setdefault(index, {})
        result = "updated" if id in store else "created"
        store[id] = copy.deepcopy(document)
        return {"_index": index, "_id": id, "result": result}

    async def get(self, index: str, id: str):
        self.calls.append(("get", {"index": index, "id": id}))
        if self.read_error:
            raise self.read_error
        doc = self.docs.get(index, {}).get(id)
        if doc is None:
            return {"_index": index, "_id": id, "found": False}
        return {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(doc)}

    async def delete(self, index: str, id: str, refresh: Any = None):
        self.calls.append(("delete", {"index": index, "id": id, "refresh": refresh}))
        if self.write_error:
            raise self.write_error
        removed = self.docs.get(index, {}).pop(id, None)
        return {"_index": index, "_id": id, "result": "deleted" if removed else "not_found"}

    async def bulk(self, operations: list[dict], refresh: Any = None):
        self.calls.append(("bulk", {"operations": operations, "refresh": refresh}))
        if self.write_error:
            raise self.write_error
        items, errors = [], False
        for action, source in zip(operations[::2], operations[1::2]):
            meta = action["index"]
            doc_id = meta["_id"]
            if doc_id in self.reject_ids:
                errors = True
                items.append({"index": {"_id": doc_id, "status": 400,
                                        "error": {"type": "mapper_parsing_exception"}}})
                continue
            self.docs.setdefault(meta["_index"], {})[doc_id] = copy.deepcopy(source)
            items.append({"index": {"_id": doc_id, "status": 201, "result": "created"}})
        return {"errors": errors, "items": items}

    async def search(self, index: str, query: dict | None = None, size: int | None = None,
                     aggs: dict | None = None, ignore_unavailable: bool = False):
        self.calls.append(("search", {"index": index, "query": query, "size": size, "aggs": aggs}))
        if self.read_error:
            raise self.read_error
        store = self.docs.get(index, {})
        query = query or {"match_all": {}}
        scored = [(doc_id, doc, _score(query, doc)) for doc_id, doc in store.items()]
        matched = [s for s in scored if s[2] > 0]
        matched.sort(key=lambda s: -s[2])
        limit = DEFAULT_SIZE if size is None else size
        hits = [{"_id": doc_id, "_score": score, "_source": copy.deepcopy(doc)}
                for doc_id, doc, score in matched[:limit]]
        body: dict[str, Any] = {"hits": {"total": {"value": len(matched)}, "hits": hits}}
        if aggs:
            body["aggregations"] = {
                name: self._terms_agg(spec, [doc for _, doc, _ in matched]) for name, spec in aggs.items()
            }
        return body

    @staticmethod
    def _terms_agg(spec: dict, docs: list[dict]) -> dict:
        field, size = spec["terms"]["field"], spec["terms"].get("size", 10)
        groups: dict[Any, list[dict]] = {}
        for doc in docs:
            if field in doc:
                groups.setdefault(doc[field], []).append(doc)
        buckets = []
        for key, members in sorted(groups.items(), key=lambda kv: (-len(kv[1]), kv[0]))[:size]:
            bucket: dict[str, Any] = {"key": key, "doc_count": len(members)}
            for sub_name, sub in spec.get("aggs", {}).items():
                values = [float(d[sub["avg"]["field"]]) for d in members if sub["avg"]["field"] in d]
                bucket[sub_name] = {"value": sum(values) / len(values) if values else None}
            buckets.append(bucket)
        return {"buckets": buckets}


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    es = FakeElasticsearch()
    es.docs["products"] = {}
    return es


@pytest_asyncio.fixture
async def client(fake_es: FakeElasticsearch):
    app.dependency_overrides[get_elasticsearch] = lambda: fake_es
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sample_products() -> list[dict]:
    return [
        {"id": "1", "name": "Shoe", "category": "footwear", "price": 49.99, "inStock": True},
        {"id": "2", "name": "Shoelace", "category": "footwear", "price": 89.5, "inStock": False},
        {"id": "3", "name": "Shovel", "category": "outdoor", "price": 25.0, "inStock": True},
        {"id": "4", "name": "Laptop", "category": "electronics", "price": 999.0, "inStock": True},
        {"id": "5", "name": "Headphones", "category": "electronics", "price": 150.0, "inStock": False},
        {"id": "6", "name": "Shirt", "category": "clothing", "price": 20.0, "inStock": True},
        {"id": "7", "name": "Shorts", "category": "clothing", "price": 30.0, "inStock": True},
        {"id": "8", "name": "Shawl", "category": "clothing", "price": 45.0, "inStock": False},
    ]
