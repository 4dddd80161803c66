"""API router aggregation."""
from fastapi import APIRouter
from backend.api.routers.health import router as health_router
from backend.api.routers.calculator import router as calculator_router
from backend.api.routers.freebets import router as freebets_router
from backend.api.routers.stats import router as stats_router
from backend.api.routers.settings import router as settings_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(calculator_router)
api_router.include_router(freebets_router)
api_router.include_router(stats_router)
api_router.include_router(settings_router)
