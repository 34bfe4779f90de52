from fastapi import APIRouter
from .routes import buses_routes, staff_routes

api_router = APIRouter()

api_router.include_router(buses_routes.router, prefix="/buses", tags=["Buses"])

api_router.include_router(staff_routes.router, prefix="/staff", tags=["Staff"])
