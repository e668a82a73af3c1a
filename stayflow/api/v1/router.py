"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from stayflow.api.v1 import bookings, complaints, dashboard, reservations

api_router = APIRouter()

# Dashboard
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Reservations
api_router.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])

# Complaints
api_router.include_router(complaints.router, prefix="/complaints", tags=["Complaints"])
