from fastapi import APIRouter

from . import auth, health

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)

__all__ = ["api_router", "health"]
