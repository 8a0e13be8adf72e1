"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import content, history, lessons, progress

api_router = APIRouter()

api_router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
api_router.include_router(history.router, prefix="/history", tags=["Learning History"])
api_router.include_router(progress.router, prefix="/progress", tags=["Progress"])
api_router.include_router(content.router, prefix="/content", tags=["Content Generation"])
