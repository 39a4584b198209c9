from fastapi import APIRouter
from onpoint.api.v1.routes.auth import router as auth_router
from onpoint.api.v1.routes.catalog import router as catalog_router
from onpoint.api.v1.routes.bookings import router as bookings_router
from onpoint.api.v1.routes.favorites import router as favorites_router
from onpoint.api.v1.routes.profile import router as profile_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(catalog_router)
api_router.include_router(bookings_router)
api_router.include_router(favorites_router)
api_router.include_router(profile_router)
