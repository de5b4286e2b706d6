"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new endpoints are added, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import auth, habits, trends

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(habits.router, prefix="/habits", tags=["habits"])
router.include_router(trends.router, prefix="/trends", tags=["trends"])
