"""
Clinic API Layer

FastAPI routes, schemas and dependencies for the clinic domain.
"""

from app.domains.clinic.api.routes import router

__all__ = ["router"]
