"""Aggregates all v1 routers."""
from fastapi import APIRouter
from app.api.v1.admin import router as admin_router
from app.api.v1.auth import router as auth_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(admin_router)
