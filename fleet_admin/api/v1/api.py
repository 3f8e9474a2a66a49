from fastapi import APIRouter
from fleet_admin.api.v1.routes.auth import router as auth_router
from fleet_admin.api.v1.routes.bookings import router as bookings_router
from fleet_admin.api.v1.routes.quotes import router as quotes_router
from fleet_admin.api.v1.routes.cars import router as cars_router
from fleet_admin.api.v1.routes.notifications import router as notifications_router
from fleet_admin.api.v1.routes.statuses import router as statuses_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(bookings_router)
api_router.include_router(quotes_router)
api_router.include_router(cars_router)
api_router.include_router(notifications_router)
api_router.include_router(statuses_router)
