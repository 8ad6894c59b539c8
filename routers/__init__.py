"""
Routers Module

API routers for the RooMate Voice application.
"""

from .interview import router as interview_router
from .websocket import router as websocket_router

__all__ = ["interview_router", "websocket_router"]
