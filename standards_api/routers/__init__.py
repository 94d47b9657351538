from fastapi import APIRouter

from .admin import router as admin_router
from .catalog import router as catalog_router
from .files import router as files_router
from .health import router as health_router
from .standards import router as standards_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(standards_router)
api_router.include_router(files_router)
api_router.include_router(catalog_router)
api_router.include_router(admin_router)
