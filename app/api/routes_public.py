"""
Public API routes - no authentication required
"""

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "store": "firestore" if settings.USE_FIREBASE else "sql"
    }
