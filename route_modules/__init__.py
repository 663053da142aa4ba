"""
Routes package - organized API and view routes.

Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .backend_routes import router as backend_router
from .view_routes import router as view_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(backend_router)
combined_router.include_router(view_router)

__all__ = ['combined_router', 'backend_router', 'view_router']
