"""
Router package for the progression API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- definitions: Program definitions and their reference reports
- programs: Program instances, schedules, results and undo
"""

from api.routers.definitions import router as definitions_router
from api.routers.health import router as health_router
from api.routers.programs import router as programs_router

__all__ = [
    "definitions_router",
    "health_router",
    "programs_router",
]
