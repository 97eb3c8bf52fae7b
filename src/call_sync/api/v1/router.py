"""V1 API router -- aggregates all v1 endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from src.call_sync.api.v1 import health

router = APIRouter()

router.include_router(health.router)
