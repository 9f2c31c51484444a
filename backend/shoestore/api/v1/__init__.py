"""
API v1 Router Initialization
Exports all routers for the Shoe Store API v1
"""

from fastapi import APIRouter
from .shoe_products import router as shoe_products_router
from .payments import router as payments_router
from .health import router as health_router

# Routes are served from the root path, without a version prefix
api_v1_router = APIRouter()

# Include all routers
api_v1_router.include_router(shoe_products_router)
api_v1_router.include_router(payments_router)
api_v1_router.include_router(health_router)

# Export the main router
__all__ = ["api_v1_router"]
