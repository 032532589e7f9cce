"""API routers."""

from sharesphere.routers.admin import router as admin_router
from sharesphere.routers.portfolio import router as portfolio_router
from sharesphere.routers.trading import router as trading_router

__all__ = ["admin_router", "portfolio_router", "trading_router"]
