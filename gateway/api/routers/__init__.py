"""API routers."""

from .netsuite import router as netsuite_router

__all__ = [
    "netsuite_router",
]
