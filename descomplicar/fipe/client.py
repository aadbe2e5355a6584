from __future__ import annotations

import enum
from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from descomplicar.cache.file_cache import FileCache, get_file_cache
from descomplicar.cache.keys import FipeCacheKey
from descomplicar.config import get_settings

REQUEST_TIMEOUT = 15  # seconds


class VehicleType(str, enum.Enum):
    carros = "carros"
    motos = "motos"


class FipeApiError(Exception):
    """The public FIPE API answered with an error or could not be reached."""


class FipeClient:
    """Read-through client for the public FIPE pricing API.

    Catalog lookups (brands, models, years) are cached for the long TTL,
    prices for the short one, both in the same file cache.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[FileCache] = None,
        catalog_ttl: Optional[timedelta] = None,
        price_ttl: Optional[timedelta] = None,
        client: Optional[httpx.Client] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.fipe_api_base).rstrip("/")
        self.cache = cache or get_file_cache()
        self.catalog_ttl = catalog_ttl or timedelta(days=settings.fipe_catalog_ttl_days)
        self.price_ttl = price_ttl or timedelta(days=settings.fipe_price_ttl_days)
        self._client = client

    def _fetch(self, path: str) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            if self._client is not None:
                response = self._client.get(url)
                response.raise_for_status()
                return response.json()
            with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise FipeApiError(
                f"FIPE API error: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.RequestError as e:
            raise FipeApiError(f"FIPE API request failed: {e}") from e
        except ValueError as e:
            raise FipeApiError(f"FIPE API returned invalid JSON for {path}: {e}") from e

    def _cached(self, key: FipeCacheKey, ttl: timedelta, path: str, extract=None) -> Any:
        cached = self.cache.get(key, ttl)
        if cached is not None:
            return cached

        logger.info(f"FIPE cache miss, fetching {path}")
        payload = self._fetch(path)
        try:
            data = extract(payload) if extract else payload
        except (KeyError, TypeError) as e:
            raise FipeApiError(f"Unexpected FIPE API payload for {path}: {e!r}") from e
        self.cache.set(key, data)
        return data

    def get_brands(self, vehicle_type: VehicleType) -> List[Dict[str, str]]:
        vt = VehicleType(vehicle_type).value
        return self._cached(FipeCacheKey.brands(vt), self.catalog_ttl, f"{vt}/marcas")

    def get_models(self, vehicle_type: VehicleType, brand_id: str) -> List[Dict[str, str]]:
        vt = VehicleType(vehicle_type).value
        return self._cached(
            FipeCacheKey.models(vt, brand_id),
            self.catalog_ttl,
            f"{vt}/marcas/{brand_id}/modelos",
            extract=lambda payload: payload["modelos"],
        )

    def get_years(
        self, vehicle_type: VehicleType, brand_id: str, model_id: str
    ) -> List[Dict[str, str]]:
        vt = VehicleType(vehicle_type).value
        return self._cached(
            FipeCacheKey.years(vt, brand_id, model_id),
            self.catalog_ttl,
            f"{vt}/marcas/{brand_id}/modelos/{model_id}/anos",
        )

    def get_price(
        self, vehicle_type: VehicleType, brand_id: str, model_id: str, year_id: str
    ) -> Dict[str, Any]:
        vt = VehicleType(vehicle_type).value
        return self._cached(
            FipeCacheKey.price(vt, brand_id, model_id, year_id),
            self.price_ttl,
            f"{vt}/marcas/{brand_id}/modelos/{model_id}/anos/{year_id}",
        )
