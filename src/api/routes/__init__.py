"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- health.py      : Health check endpoints
- swift_codes.py : SWIFT code lookup, country listing, add and delete
"""
from src.api.routes.health import router as health_router
from src.api.routes.swift_codes import router as swift_codes_router

__all__ = [
    "health_router",
    "swift_codes_router",
]
