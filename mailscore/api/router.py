from fastapi import APIRouter

from mailscore.api.validation import router as validation_router

api_router = APIRouter()

# API routes at /api/*
api_router.include_router(validation_router, prefix="/api/validation", tags=["validation"])
