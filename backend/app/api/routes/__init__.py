"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .portfolio import router as portfolio_router
from .prices import router as prices_router

api_router = APIRouter()
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(prices_router, tags=["prices"])

__all__ = ["api_router"]
