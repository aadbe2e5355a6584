from datetime import timedelta
from unittest.mock import MagicMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from descomplicar.api.fipe import get_fipe_client
from descomplicar.cache.file_cache import FileCache
from descomplicar.fipe.client import FipeApiError, FipeClient
from descomplicar.main import app


@pytest.fixture
def fipe_client():
    client = MagicMock()
    app.dependency_overrides[get_fipe_client] = lambda: client
    yield client
    app.dependency_overrides.clear()


async def _get(path, params=None):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        return await ac.get(path, params=params)


@pytest.mark.asyncio
async def test_brands(fipe_client):
    fipe_client.get_brands.return_value = [{"codigo": "21", "nome": "Fiat"}]

    resp = await _get("/api/fipe/brands", {"type": "carros"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": [{"codigo": "21", "nome": "Fiat"}]}


@pytest.mark.asyncio
async def test_invalid_vehicle_type(fipe_client):
    resp = await _get("/api/fipe/brands", {"type": "caminhoes"})
    assert resp.status_code == 422
    fipe_client.get_brands.assert_not_called()


@pytest.mark.asyncio
async def test_models_requires_brand(fipe_client):
    resp = await _get("/api/fipe/models", {"type": "carros"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_years_keep_only_year_token(fipe_client):
    fipe_client.get_years.return_value = [
        {"codigo": "2020-1", "nome": "2020 Gasolina"},
        {"codigo": "32000-1", "nome": "32000 Gasolina"},
    ]

    resp = await _get(
        "/api/fipe/years", {"type": "carros", "brandId": "21", "modelId": "4828"}
    )

    assert resp.status_code == 200
    names = [year["nome"] for year in resp.json()["data"]]
    assert names == ["2020", "32000"]


@pytest.mark.asyncio
async def test_price(fipe_client):
    fipe_client.get_price.return_value = {"Valor": "R$ 30.000,00"}

    resp = await _get(
        "/api/fipe/price",
        {"type": "motos", "brandId": "80", "modelId": "1", "yearId": "2014-1"},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["Valor"] == "R$ 30.000,00"
    args = fipe_client.get_price.call_args.args
    assert args[1:] == ("80", "1", "2014-1")


@pytest.mark.asyncio
async def test_upstream_error_maps_to_502(fipe_client):
    fipe_client.get_brands.side_effect = FipeApiError("FIPE API error: 500 Internal Server Error")

    resp = await _get("/api/fipe/brands", {"type": "carros"})

    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_health():
    resp = await _get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def _override_with_upstream(tmp_path, handler):
    client = FipeClient(
        base_url="https://fipe.test/api/v1",
        cache=FileCache(tmp_path, timedelta(days=10)),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    app.dependency_overrides[get_fipe_client] = lambda: client


@pytest.mark.asyncio
async def test_non_json_upstream_maps_to_502(tmp_path):
    _override_with_upstream(
        tmp_path, lambda request: httpx.Response(200, text="<html>maintenance</html>")
    )
    try:
        resp = await _get("/api/fipe/brands", {"type": "carros"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_unexpected_models_payload_maps_to_502(tmp_path):
    _override_with_upstream(tmp_path, lambda request: httpx.Response(200, json={"anos": []}))
    try:
        resp = await _get("/api/fipe/models", {"type": "carros", "brandId": "21"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 502
