"""
API v1 router aggregation.
"""
from fastapi import APIRouter

from wardrobe.api.v1 import auth, wardrobe

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(auth.router)
api_router.include_router(wardrobe.router)

__all__ = ["api_router"]
