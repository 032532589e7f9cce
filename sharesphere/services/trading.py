"""Trade execution engine.

Executes a shareholder's buy or sell against the static price on the
share record. Each call is one database transaction:

1. Validate: quantity, shareholder, share, broker, then inventory
   (buy) or the existing holding (sell). No row is changed until every
   check has passed.
2. Mutate: share inventory, holding, shareholder portfolio value.
3. Append one Trade record and commit.

Business failures come back as a ``TradeResult`` with ``success=False``
and a user-displayable message; they are never raised. Unexpected
errors roll the transaction back and are reported the same way.
Concurrent modifications (stale row version, or a racing insert of the
same holding) roll back and re-run the whole unit.
"""

import enum
import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from sharesphere.models import Holding, Share, Trade, TradeType
from sharesphere.services import holdings
from sharesphere import telemetry

logger = logging.getLogger(__name__)

# Attempts per trade before a run of conflicts is reported as a failure
MAX_TRADE_ATTEMPTS = int(os.getenv("TRADE_MAX_ATTEMPTS", "3"))

_CONFLICT_ERRORS = (StaleDataError, IntegrityError)


class TradeError(enum.Enum):
    """Why a trade did not execute."""

    INVALID_QUANTITY = "INVALID_QUANTITY"
    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_MARKET_INVENTORY = "INSUFFICIENT_MARKET_INVENTORY"
    NO_SUCH_HOLDING = "NO_SUCH_HOLDING"
    INSUFFICIENT_HOLDING_QUANTITY = "INSUFFICIENT_HOLDING_QUANTITY"
    TRANSACTION_FAILURE = "TRANSACTION_FAILURE"


@dataclass
class TradeResult:
    """Outcome of a buy or sell.

    On success ``trade`` is the appended record and ``holding`` the
    resulting position (None after a sell that emptied it). On failure
    both are None and ``error`` says why.
    """

    success: bool
    message: str
    trade: Trade | None = None
    holding: Holding | None = None
    error: TradeError | None = None

    @classmethod
    def failure(cls, error: TradeError, message: str) -> "TradeResult":
        return cls(success=False, message=message, error=error)


_Executor = Callable[[AsyncSession, int, int, int, int], Awaitable[TradeResult]]


async def buy_shares(
    session: AsyncSession,
    shareholder_id: int,
    share_id: int,
    quantity: int,
    broker_id: int,
) -> TradeResult:
    """Buy shares from the market inventory at the share's current price.

    On success: available quantity drops by ``quantity``, the holding
    grows by ``quantity`` (created if absent), portfolio value rises by
    ``quantity * price`` and one BUY trade is appended.

    Args:
        session: Database session (committed or rolled back here)
        shareholder_id: Buying shareholder
        share_id: Share to buy
        quantity: Number of shares (must be positive)
        broker_id: Broker executing the trade

    Returns:
        TradeResult with the trade and resulting holding on success
    """
    return await _run_trade(
        session, TradeType.BUY, _execute_buy, shareholder_id, share_id, quantity, broker_id
    )


async def sell_shares(
    session: AsyncSession,
    shareholder_id: int,
    share_id: int,
    quantity: int,
    broker_id: int,
) -> TradeResult:
    """Sell shares from a holding back to the market at the current price.

    On success: available quantity rises by ``quantity``, the holding
    shrinks by ``quantity`` (deleted when it reaches zero), portfolio
    value falls by ``quantity * price`` and one SELL trade is appended.

    Args:
        session: Database session (committed or rolled back here)
        shareholder_id: Selling shareholder
        share_id: Share to sell
        quantity: Number of shares (must be positive)
        broker_id: Broker executing the trade

    Returns:
        TradeResult with the trade and remaining holding (or None) on success
    """
    return await _run_trade(
        session, TradeType.SELL, _execute_sell, shareholder_id, share_id, quantity, broker_id
    )


async def _run_trade(
    session: AsyncSession,
    trade_type: TradeType,
    execute: _Executor,
    shareholder_id: int,
    share_id: int,
    quantity: int,
    broker_id: int,
) -> TradeResult:
    """Run one trade as a transaction, retrying on concurrent modification."""
    if quantity <= 0:
        return _rejected(
            trade_type,
            TradeResult.failure(
                TradeError.INVALID_QUANTITY, "The quantity must be greater than 0."
            ),
        )

    for attempt in range(1, MAX_TRADE_ATTEMPTS + 1):
        try:
            result = await execute(session, shareholder_id, share_id, quantity, broker_id)
            if not result.success:
                await session.rollback()
                return _rejected(trade_type, result)

            await session.commit()
        except _CONFLICT_ERRORS as e:
            await session.rollback()
            telemetry.record_trade_conflict(trade_type.value)
            logger.warning(
                "Trade conflicted with a concurrent update",
                extra={
                    "trade_type": trade_type.value,
                    "shareholder_id": shareholder_id,
                    "share_id": share_id,
                    "attempt": attempt,
                    "error": str(e),
                },
            )
            continue
        except Exception as e:
            await session.rollback()
            logger.exception(
                "Trade failed, transaction rolled back",
                extra={
                    "trade_type": trade_type.value,
                    "shareholder_id": shareholder_id,
                    "share_id": share_id,
                },
            )
            return _rejected(
                trade_type,
                TradeResult.failure(
                    TradeError.TRANSACTION_FAILURE, f"An error occurred: {e}"
                ),
            )

        trade = result.trade
        telemetry.record_trade(
            trade_type.value, str(trade.company_id), trade.quantity, trade.unit_price
        )
        logger.info(
            "Trade executed",
            extra={
                "trade_id": trade.id,
                "trade_type": trade_type.value,
                "shareholder_id": shareholder_id,
                "share_id": share_id,
                "broker_id": broker_id,
                "quantity": trade.quantity,
                "unit_price": float(trade.unit_price),
            },
        )
        return result

    return _rejected(
        trade_type,
        TradeResult.failure(
            TradeError.TRANSACTION_FAILURE,
            "An error occurred: the trade kept conflicting with concurrent "
            "updates, please try again.",
        ),
    )


async def _execute_buy(
    session: AsyncSession,
    shareholder_id: int,
    share_id: int,
    quantity: int,
    broker_id: int,
) -> TradeResult:
    """Validate and apply a buy inside the caller's transaction."""
    shareholder = await holdings.get_shareholder(session, shareholder_id, for_update=True)
    if shareholder is None:
        return _not_found("Shareholder", shareholder_id)

    share = await holdings.get_share(session, share_id, for_update=True)
    if share is None:
        return _not_found("Share", share_id)

    if await holdings.get_broker(session, broker_id) is None:
        return _not_found("Broker", broker_id)

    if share.available_quantity < quantity:
        return TradeResult.failure(
            TradeError.INSUFFICIENT_MARKET_INVENTORY,
            f"Not enough shares available. Available: {share.available_quantity}, "
            f"Requested: {quantity}.",
        )

    existing = await holdings.get_holding(session, shareholder_id, share_id, for_update=True)

    # All checks passed - mutate
    share.available_quantity -= quantity
    holding = holdings.add_to_holding(session, existing, shareholder_id, share_id, quantity)
    shareholder.portfolio_value += _trade_value(share, quantity)
    trade = holdings.append_trade(
        session,
        shareholder_id=shareholder_id,
        share=share,
        broker_id=broker_id,
        quantity=quantity,
        trade_type=TradeType.BUY,
    )
    await session.flush()

    return TradeResult(
        success=True,
        message=f"Successfully bought {quantity} share(s) of {_company_name(share)}.",
        trade=trade,
        holding=holding,
    )


async def _execute_sell(
    session: AsyncSession,
    shareholder_id: int,
    share_id: int,
    quantity: int,
    broker_id: int,
) -> TradeResult:
    """Validate and apply a sell inside the caller's transaction."""
    shareholder = await holdings.get_shareholder(session, shareholder_id, for_update=True)
    if shareholder is None:
        return _not_found("Shareholder", shareholder_id)

    share = await holdings.get_share(session, share_id, for_update=True)
    if share is None:
        return _not_found("Share", share_id)

    if await holdings.get_broker(session, broker_id) is None:
        return _not_found("Broker", broker_id)

    existing = await holdings.get_holding(session, shareholder_id, share_id, for_update=True)
    if existing is None:
        return TradeResult.failure(
            TradeError.NO_SUCH_HOLDING,
            "Shareholder does not own any shares of this company.",
        )

    if existing.quantity < quantity:
        return TradeResult.failure(
            TradeError.INSUFFICIENT_HOLDING_QUANTITY,
            f"Not enough shares in portfolio. Available: {existing.quantity}, "
            f"Requested: {quantity}.",
        )

    # All checks passed - mutate
    holding = await holdings.remove_from_holding(session, existing, quantity)
    share.available_quantity += quantity
    shareholder.portfolio_value -= _trade_value(share, quantity)
    trade = holdings.append_trade(
        session,
        shareholder_id=shareholder_id,
        share=share,
        broker_id=broker_id,
        quantity=quantity,
        trade_type=TradeType.SELL,
    )
    await session.flush()

    return TradeResult(
        success=True,
        message=f"Successfully sold {quantity} share(s) of {_company_name(share)}.",
        trade=trade,
        holding=holding,
    )


def _trade_value(share: Share, quantity: int) -> Decimal:
    return share.price * quantity


def _company_name(share: Share) -> str:
    return share.company.name if share.company is not None else "Unknown"


def _not_found(entity: str, entity_id: int) -> TradeResult:
    return TradeResult.failure(
        TradeError.NOT_FOUND, f"{entity} with ID {entity_id} was not found."
    )


def _rejected(trade_type: TradeType, result: TradeResult) -> TradeResult:
    """Log and count a trade that did not execute."""
    telemetry.record_trade_rejected(trade_type.value, result.error.value)
    logger.info(
        "Trade rejected",
        extra={
            "trade_type": trade_type.value,
            "reason": result.error.value,
            "detail": result.message,
        },
    )
    return result
