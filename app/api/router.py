from fastapi import APIRouter

from app.domains.clinic.api import router as clinic_router

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(clinic_router)
