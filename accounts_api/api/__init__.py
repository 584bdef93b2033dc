"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from accounts_api.api import health, users

router = APIRouter()
router.include_router(users.router, tags=["users"])
router.include_router(health.router, prefix="/health", tags=["health"])
