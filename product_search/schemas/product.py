"""Product request/response schema - REST API contract and stored document shape."""

import uuid
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer

# Whole cents only: the index stores price as scaled_float (factor 100).
# Decimal in, JSON number out (pydantic would otherwise emit a string)
Price = Annotated[
    Decimal,
    Field(decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class Product(BaseModel):
    """Single catalogue entry. Field names match the Elasticsearch document."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, min_length=1)
    name: str
    category: str
    price: Price
    in_stock: bool = Field(
        alias="inStock",
        validation_alias=AliasChoices("inStock", "in_stock"),
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize for indexing (camelCase keys, price as number)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, source: dict[str, Any], doc_id: str | None = None) -> "Product":
        """Build from a stored `_source`; the document `_id` wins over any `id` in the body."""
        if doc_id is not None:
            source = {**source, "id": doc_id}
        return cls.model_validate(source)
