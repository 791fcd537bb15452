"""Main API router aggregating all v1 routes."""

from fastapi import APIRouter

from cirkit.api.routes import ai_suggest, health, pc_build

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(ai_suggest.router)
api_router.include_router(pc_build.router)
