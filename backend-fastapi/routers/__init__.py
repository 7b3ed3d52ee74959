# backend-fastapi/routers/__init__.py
# Router module initialization

from .health import router as health_router
from .prefill import router as prefill_router

__all__ = [
    'health_router',
    'prefill_router'
]
