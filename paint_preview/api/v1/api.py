"""
API router for version 1 of the API.
"""
from fastapi import APIRouter

from paint_preview.api.v1.endpoints import palette, repaint

api_router = APIRouter()

api_router.include_router(palette.router, prefix="/palette", tags=["palette"])
api_router.include_router(repaint.router, prefix="/repaint", tags=["repaint"])
