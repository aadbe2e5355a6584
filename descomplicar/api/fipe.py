from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from descomplicar.fipe.client import FipeApiError, FipeClient, VehicleType

router = APIRouter(prefix="/api/fipe", tags=["fipe"])


def get_fipe_client() -> FipeClient:
    return FipeClient()


def _upstream_error(e: FipeApiError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


@router.get("/brands")
def list_brands(
    type: VehicleType = Query(..., description="carros or motos"),
    client: FipeClient = Depends(get_fipe_client),
) -> Dict[str, Any]:
    try:
        brands = client.get_brands(type)
    except FipeApiError as e:
        raise _upstream_error(e) from e
    return {"success": True, "data": brands}


@router.get("/models")
def list_models(
    type: VehicleType = Query(...),
    brand_id: str = Query(..., alias="brandId", min_length=1),
    client: FipeClient = Depends(get_fipe_client),
) -> Dict[str, Any]:
    try:
        models = client.get_models(type, brand_id)
    except FipeApiError as e:
        raise _upstream_error(e) from e
    return {"success": True, "data": models}


@router.get("/years")
def list_years(
    type: VehicleType = Query(...),
    brand_id: str = Query(..., alias="brandId", min_length=1),
    model_id: str = Query(..., alias="modelId", min_length=1),
    client: FipeClient = Depends(get_fipe_client),
) -> Dict[str, Any]:
    try:
        years = client.get_years(type, brand_id, model_id)
    except FipeApiError as e:
        raise _upstream_error(e) from e

    # "2020 Gasolina" -> "2020"
    processed: List[Dict[str, Any]] = [
        {**year, "nome": str(year.get("nome", "")).split(" ")[0]} for year in years
    ]
    return {"success": True, "data": processed}


@router.get("/price")
def get_price(
    type: VehicleType = Query(...),
    brand_id: str = Query(..., alias="brandId", min_length=1),
    model_id: str = Query(..., alias="modelId", min_length=1),
    year_id: str = Query(..., alias="yearId", min_length=1),
    client: FipeClient = Depends(get_fipe_client),
) -> Dict[str, Any]:
    try:
        price = client.get_price(type, brand_id, model_id, year_id)
    except FipeApiError as e:
        raise _upstream_error(e) from e
    return {"success": True, "data": price}
