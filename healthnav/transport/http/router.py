from __future__ import annotations

from fastapi import APIRouter

from .handlers.chat_handler import router as chat_router
from .handlers.profile_handler import router as profile_router
from .handlers.scan_handler import router as scan_router
from .handlers.setting_handler import router as settings_router


api_router = APIRouter()
api_router.include_router(scan_router, prefix="/api", tags=["scan"])
api_router.include_router(chat_router, prefix="/api", tags=["chat"])
api_router.include_router(profile_router, prefix="/api", tags=["profiles"])
api_router.include_router(settings_router, prefix="/api", tags=["settings"])
