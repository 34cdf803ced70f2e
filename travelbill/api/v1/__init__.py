# travelbill/api/v1/__init__.py
"""
Versioned API v1, aggregating all sub-routers under ``/api/v1``.

Usage in ``main.py``::

    from travelbill.api.v1 import v1_router
    app.include_router(v1_router)
"""

from fastapi import APIRouter

from travelbill.api.v1.routes.billings import router as billings_router
from travelbill.api.v1.routes.duties import router as duties_router
from travelbill.api.v1.routes.health import router as health_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(health_router)
v1_router.include_router(billings_router)
v1_router.include_router(duties_router)

__all__ = ["v1_router"]
