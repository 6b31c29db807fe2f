"""
Source code root package.

This package contains all application source code organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, validation and cross-cutting utilities
- directory/ : SWIFT code structure, relationship resolution and aggregation
- services/  : Business logic and orchestration
- database/  : Record stores, SQLAlchemy models and data import
- models/    : Pydantic models for request/response schemas
"""
