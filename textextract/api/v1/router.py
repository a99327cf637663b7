from fastapi import APIRouter, Depends

from textextract.api.v1 import analytics, enhance, extract, extractions, health, settings
from textextract.core.security import verify_api_token

api_router = APIRouter(prefix="/api/v1")

protected = [Depends(verify_api_token)]

api_router.include_router(health.router)
api_router.include_router(extract.router, dependencies=protected)
api_router.include_router(extractions.router, dependencies=protected)
api_router.include_router(enhance.router, dependencies=protected)
api_router.include_router(analytics.router, dependencies=protected)
api_router.include_router(settings.router, dependencies=protected)
