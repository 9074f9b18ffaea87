"""
API routes and endpoints.
"""

from fastapi import APIRouter

from .v1 import auth, delivery, menu, realtime, reservations, takeaway, users

api_router = APIRouter()

# 包含所有v1路由
api_router.include_router(menu.router)
api_router.include_router(reservations.router)
api_router.include_router(takeaway.router)
api_router.include_router(delivery.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(realtime.router)
