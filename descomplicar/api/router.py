from fastapi import APIRouter

from descomplicar.api.admin import router as admin_router
from descomplicar.api.fipe import router as fipe_router

api_router = APIRouter()
api_router.include_router(fipe_router)
api_router.include_router(admin_router)
