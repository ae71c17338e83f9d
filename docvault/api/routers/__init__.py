"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .ingestions import router as ingestions_router
from .users import router as users_router

__all__ = [
    "documents_router",
    "health_router",
    "ingestions_router",
    "users_router",
]
