"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from lateedition.api.v1.albums import router as albums_router
from lateedition.api.v1.auth import router as auth_router
from lateedition.api.v1.events import router as events_router
from lateedition.api.v1.pages import router as pages_router
from lateedition.api.v1.posts import router as posts_router
from lateedition.api.v1.settings import router as settings_router
from lateedition.api.v1.staff import router as staff_router

router = APIRouter(prefix="/api/v1")
router.include_router(auth_router)
router.include_router(posts_router)
router.include_router(events_router)
router.include_router(albums_router)
router.include_router(staff_router)
router.include_router(pages_router)
router.include_router(settings_router)

__all__ = ["router"]
