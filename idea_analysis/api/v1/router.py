"""Aggregate all v1 API routers."""

from fastapi import APIRouter
from idea_analysis.api.v1.health import router as health_router
from idea_analysis.api.v1.sections_api import router as sections_router
from idea_analysis.api.v1.analyses import router as analyses_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(sections_router, tags=["sections"])
v1_router.include_router(analyses_router, tags=["analyses"])
