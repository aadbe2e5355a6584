from __future__ import annotations

import hashlib
import json
from typing import NamedTuple, Optional


class FipeCacheKey(NamedTuple):
    """Structured cache key for FIPE lookups.

    kind is one of "brands", "models", "years", "price"; the ids narrowing
    the lookup are None when not part of it.
    """

    kind: str
    vehicle_type: str
    brand_id: Optional[str] = None
    model_id: Optional[str] = None
    year_id: Optional[str] = None

    def as_filename(self) -> str:
        # FIPE year ids contain "-" (e.g. "2014-3"), so components are
        # serialized as a JSON array before hashing instead of joined.
        encoded = json.dumps(list(self), separators=(",", ":"))
        digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
        return f"fipe-{self.kind}-{digest}"

    @classmethod
    def brands(cls, vehicle_type: str) -> "FipeCacheKey":
        return cls("brands", vehicle_type)

    @classmethod
    def models(cls, vehicle_type: str, brand_id: str) -> "FipeCacheKey":
        return cls("models", vehicle_type, brand_id)

    @classmethod
    def years(cls, vehicle_type: str, brand_id: str, model_id: str) -> "FipeCacheKey":
        return cls("years", vehicle_type, brand_id, model_id)

    @classmethod
    def price(
        cls, vehicle_type: str, brand_id: str, model_id: str, year_id: str
    ) -> "FipeCacheKey":
        return cls("price", vehicle_type, brand_id, model_id, year_id)
