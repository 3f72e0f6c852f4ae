"""API Routers."""
from .stock import router as stock_router

__all__ = ["stock_router"]
