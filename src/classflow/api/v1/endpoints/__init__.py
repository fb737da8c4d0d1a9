"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .catalog import router as catalog_router
from .groups import router as groups_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "catalog_router",
    "groups_router",
    "system_router",
    "users_router",
]
