"""
SQLAlchemy models for ShareSphere.

This module exports all models and the Base class for easy imports:
    from sharesphere.models import Base, Share, Shareholder, Holding, Trade
"""

from sharesphere.database import Base
from sharesphere.models.stock_exchange import StockExchange
from sharesphere.models.company import Company
from sharesphere.models.share import Share
from sharesphere.models.shareholder import Shareholder
from sharesphere.models.holding import Holding
from sharesphere.models.broker import Broker
from sharesphere.models.trade import Trade, TradeType

__all__ = [
    "Base",
    "StockExchange",
    "Company",
    "Share",
    "Shareholder",
    "Holding",
    "Broker",
    "Trade",
    "TradeType",
]
