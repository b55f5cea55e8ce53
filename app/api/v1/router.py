from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.properties import router as properties_router


router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(properties_router, tags=["properties"])
