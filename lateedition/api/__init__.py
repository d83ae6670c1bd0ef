"""API module.

Contains versioned API routers.
"""

from lateedition.api.v1 import router as v1_router

__all__ = ["v1_router"]
