#!/usr/bin/env python3
"""
Management script for ShareSphere.

Usage (direct DB access):
    python manage.py db init
    python manage.py db seed [-f data/seed.json]
    python manage.py db status
    python manage.py db clear
    python manage.py trade buy SHAREHOLDER_ID SHARE_ID QUANTITY BROKER_ID
    python manage.py trade sell SHAREHOLDER_ID SHARE_ID QUANTITY BROKER_ID

Usage (via API):
    python manage.py portfolio show SHAREHOLDER_ID [--base-url http://localhost:8000]
"""

import asyncio
import json
from decimal import Decimal
from pathlib import Path

import click
import httpx
from sqlalchemy import func, select

from sharesphere.database import AsyncSessionLocal, Base, engine
from sharesphere.models import (
    Broker,
    Company,
    Holding,
    Share,
    Shareholder,
    StockExchange,
    Trade,
)
from sharesphere.services import trading


DEFAULT_BASE_URL = "http://localhost:8000"


# ============================================================================
# Direct database operations (internal)
# ============================================================================


async def _init_db():
    """Initialize the database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _clear_db():
    """Drop and recreate all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _db_seed(filepath: Path) -> dict[str, int]:
    """Load reference data from a JSON file directly to DB.

    Existing rows (matched by exchange name, ticker, license number or
    email) are skipped. Shares are only issued for newly created companies.
    """
    with open(filepath) as f:
        data = json.load(f)

    loaded = {"exchanges": 0, "companies": 0, "shares": 0, "brokers": 0, "shareholders": 0}

    async with AsyncSessionLocal() as session:
        for exchange_data in data.get("exchanges", []):
            result = await session.execute(
                select(StockExchange).where(StockExchange.name == exchange_data["name"])
            )
            exchange = result.scalar_one_or_none()
            if exchange is None:
                exchange = StockExchange(
                    name=exchange_data["name"],
                    country=exchange_data["country"],
                    currency=exchange_data["currency"],
                )
                session.add(exchange)
                await session.flush()
                loaded["exchanges"] += 1

            for company_data in exchange_data.get("companies", []):
                ticker = company_data["ticker_symbol"].upper()
                result = await session.execute(
                    select(Company).where(Company.ticker_symbol == ticker)
                )
                if result.scalar_one_or_none():
                    click.echo(f"  Skipped {ticker} (already exists)")
                    continue

                company = Company(
                    name=company_data["name"],
                    ticker_symbol=ticker,
                    exchange_id=exchange.id,
                )
                session.add(company)
                await session.flush()
                loaded["companies"] += 1
                click.echo(f"  Loaded {ticker}: {company.name}")

                for share_data in company_data.get("shares", []):
                    session.add(
                        Share(
                            company_id=company.id,
                            price=Decimal(str(share_data["price"])),
                            available_quantity=share_data["available_quantity"],
                        )
                    )
                    loaded["shares"] += 1

        for broker_data in data.get("brokers", []):
            result = await session.execute(
                select(Broker).where(Broker.license_number == broker_data["license_number"])
            )
            if result.scalar_one_or_none():
                continue
            session.add(Broker(**broker_data))
            loaded["brokers"] += 1

        for shareholder_data in data.get("shareholders", []):
            result = await session.execute(
                select(Shareholder).where(Shareholder.email == shareholder_data["email"])
            )
            if result.scalar_one_or_none():
                continue
            session.add(
                Shareholder(name=shareholder_data["name"], email=shareholder_data["email"])
            )
            loaded["shareholders"] += 1

        await session.commit()

    return loaded


async def _count_records():
    """Count records in each table."""
    async with AsyncSessionLocal() as session:
        counts = {}
        for model, name in [
            (StockExchange, "exchanges"),
            (Company, "companies"),
            (Share, "shares"),
            (Broker, "brokers"),
            (Shareholder, "shareholders"),
            (Holding, "holdings"),
            (Trade, "trades"),
        ]:
            result = await session.execute(select(func.count()).select_from(model))
            counts[name] = result.scalar_one()
        return counts


async def _db_trade(side: str, shareholder_id: int, share_id: int, quantity: int, broker_id: int):
    """Execute a buy or sell directly against the database."""
    execute = trading.buy_shares if side == "buy" else trading.sell_shares
    async with AsyncSessionLocal() as session:
        result = await execute(session, shareholder_id, share_id, quantity, broker_id)
        if not result.success:
            return result, None
        return result, result.holding.quantity if result.holding else 0


# ============================================================================
# API operations
# ============================================================================


def _api_show_portfolio(shareholder_id: int, base_url: str) -> dict:
    """Get a shareholder's portfolio via API."""
    with httpx.Client(base_url=base_url, timeout=30) as client:
        response = client.get(f"/api/v1/shareholders/{shareholder_id}/portfolio")
        if response.status_code == 404:
            raise click.ClickException(response.json().get("detail", response.text))
        response.raise_for_status()
        return response.json()


# ============================================================================
# CLI: Main group
# ============================================================================


@click.group()
def cli():
    """ShareSphere management commands."""
    pass


# ============================================================================
# CLI: db (direct database access)
# ============================================================================


@cli.group()
def db():
    """Direct database management (bypasses API)."""
    pass


@db.command("init")
def db_init():
    """Create tables if they don't exist."""
    asyncio.run(_init_db())
    click.echo("Database initialized.")


@db.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear all data?")
def db_clear():
    """Clear all data from the database (destructive!)."""
    click.echo("Clearing database...")
    asyncio.run(_clear_db())
    click.echo("Database cleared and tables recreated.")


@db.command("seed")
@click.option(
    "--file", "-f",
    default="data/seed.json",
    type=click.Path(exists=True),
    help="JSON file with reference data",
)
def db_seed(file):
    """Load exchanges, companies, shares, brokers and shareholders."""
    click.echo(f"Seeding from {file} (direct DB)...")

    async def run():
        await _init_db()
        return await _db_seed(Path(file))

    loaded = asyncio.run(run())
    summary = ", ".join(f"{count} {name}" for name, count in loaded.items())
    click.echo(f"\nDone: {summary} loaded")


@db.command("status")
def db_status():
    """Show database status and record counts."""

    async def run():
        await _init_db()
        return await _count_records()

    counts = asyncio.run(run())

    click.echo("\nDatabase Status:")
    click.echo("-" * 30)
    for table, count in counts.items():
        click.echo(f"  {table:<15} {count:>10,}")
    click.echo("-" * 30)
    click.echo(f"  {'Total':<15} {sum(counts.values()):>10,}")


# ============================================================================
# CLI: trade (direct database access)
# ============================================================================


@cli.command("trade")
@click.argument("side", type=click.Choice(["buy", "sell"]))
@click.argument("shareholder_id", type=int)
@click.argument("share_id", type=int)
@click.argument("quantity", type=int)
@click.argument("broker_id", type=int)
def trade(side, shareholder_id, share_id, quantity, broker_id):
    """Buy or sell shares for a shareholder."""

    async def run():
        await _init_db()
        return await _db_trade(side, shareholder_id, share_id, quantity, broker_id)

    result, remaining = asyncio.run(run())
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(result.message)
    click.echo(
        f"Trade #{result.trade.id}: {result.trade.quantity} @ {result.trade.unit_price}, "
        f"position now {remaining}"
    )


# ============================================================================
# CLI: portfolio (via API)
# ============================================================================


@cli.group()
def portfolio():
    """Inspect portfolios (via API)."""
    pass


@portfolio.command("show")
@click.argument("shareholder_id", type=int)
@click.option(
    "--base-url", "-u",
    default=DEFAULT_BASE_URL,
    help=f"API base URL (default: {DEFAULT_BASE_URL})",
)
def portfolio_show(shareholder_id, base_url):
    """Show a shareholder's holdings via API."""
    try:
        data = _api_show_portfolio(shareholder_id, base_url)
    except httpx.ConnectError:
        click.echo(f"\nError: Could not connect to {base_url}", err=True)
        click.echo("Is the server running? Start it with: uvicorn sharesphere.main:app", err=True)
        raise SystemExit(1)

    click.echo(f"\n{data['shareholder_name']} <{data['email']}>")
    if not data["owned_shares"]:
        click.echo("No holdings.")
        return

    click.echo(f"\n{'Ticker':<8} {'Company':<30} {'Quantity':>10} {'Price':>12} {'Value':>14}")
    click.echo("-" * 78)
    for s in data["owned_shares"]:
        click.echo(
            f"{s['ticker_symbol']:<8} {s['company_name']:<30} {s['quantity']:>10,} "
            f"{s['current_price_per_share']:>12} {s['total_value']:>14}"
        )
    click.echo(f"\nPortfolio value: {data['total_portfolio_value']}")


if __name__ == "__main__":
    cli()
