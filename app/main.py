"""
FastAPI Application - LATOKEN Market Data API

Read-only REST access to LATOKEN public market data, normalized to the
canonical schemas in core.schemas.

Features:
    - Markets and currencies
    - Tickers (single pair and all pairs)
    - Order book snapshots
    - Recent public trades

Usage:
    uvicorn app.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    - Swagger: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings, validate_configuration
from core.errors import (
    ArgumentError, AuthFailure, BadRequest, BadSymbol, ExchangeError, NetworkError, RateLimited
)
from core.logging import logger
from core.schemas import Currency, Market, OrderBook, Ticker, Trade
from exchanges.latoken import LatokenExchange


# ============================================
# Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info("=== Application Starting ===")
    try:
        validate_configuration()
        await exchange.initialize()
        logger.info("=== Started Successfully ===")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("=== Shutting Down ===")
    await exchange.shutdown()
    logger.info("=== Shutdown Complete ===")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="LATOKEN Market Data API",
    description=(
        "Normalized REST access to LATOKEN market data.\n\n"
        "## REST Endpoints\n"
        "- `GET /markets` - All markets\n"
        "- `GET /currencies` - All available currencies\n"
        "- `GET /time` - Exchange server time (ms)\n"
        "- `GET /ticker/{base}/{quote}` - Ticker for one pair\n"
        "- `GET /tickers` - Tickers for all pairs (optional ?symbols=ETH/USDT,BTC/USDT)\n"
        "- `GET /orderbook/{base}/{quote}` - Order book (optional ?depth=)\n"
        "- `GET /trades/{base}/{quote}` - Recent trades (optional ?limit=&since=)\n"
        "- `GET /health` - Health check\n"
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

exchange = LatokenExchange()


async def _symbol(base: str, quote: str) -> str:
    """Unified symbol for path segments, matched case-insensitively against loaded markets."""
    return await _resolve(f"{base}/{quote}")


async def _resolve(symbol: str) -> str:
    await exchange.load_markets()
    wanted = symbol.upper()
    for known in exchange.symbols:
        if known.upper() == wanted:
            return known
    return wanted


def _http_error(e: ExchangeError) -> HTTPException:
    """Map a typed exchange error to an HTTP error response."""
    if isinstance(e, BadSymbol):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (ArgumentError, BadRequest)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, AuthFailure):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, RateLimited):
        return HTTPException(status_code=429, detail=str(e))
    if isinstance(e, NetworkError):
        return HTTPException(status_code=504, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


# ============================================
# System Endpoints
# ============================================

@app.get("/", tags=["System"])
async def root():
    """API information."""
    return {
        "name": "LATOKEN Market Data API",
        "version": "1.0.0",
        "status": "operational",
        "docs": "/docs",
        "exchange": exchange.id,
        "capabilities": exchange.has,
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check - tests connectivity to the exchange."""
    healthy = await exchange.health_check()
    return {
        "status": "healthy" if healthy else "degraded",
        "exchange": exchange.id,
        "markets_loaded": len(exchange.markets),
    }


@app.get("/time", tags=["System"])
async def get_time():
    """Exchange server time in milliseconds."""
    try:
        return {"serverTime": await exchange.fetch_time()}
    except ExchangeError as e:
        raise _http_error(e)


# ============================================
# Market Data Endpoints
# ============================================

@app.get("/markets", response_model=List[Market], tags=["Market Data"])
async def get_markets(reload: bool = Query(default=False, description="Refetch instead of using the cached registry")):
    """All markets from the registry."""
    try:
        markets = await exchange.load_markets(reload=reload)
    except ExchangeError as e:
        raise _http_error(e)
    return list(markets.values())


@app.get("/currencies", response_model=Dict[str, Currency], tags=["Market Data"])
async def get_currencies():
    """Available currencies keyed by code."""
    try:
        return await exchange.fetch_currencies()
    except ExchangeError as e:
        raise _http_error(e)


@app.get("/ticker/{base}/{quote}", response_model=Ticker, tags=["Market Data"])
async def get_ticker(base: str, quote: str):
    """Ticker for one market (e.g. /ticker/ETH/USDT)."""
    try:
        return await exchange.fetch_ticker(await _symbol(base, quote))
    except ExchangeError as e:
        raise _http_error(e)


@app.get("/tickers", response_model=Dict[str, Ticker], tags=["Market Data"])
async def get_tickers(symbols: Optional[str] = Query(default=None, description="Comma-separated symbols (e.g. ETH/USDT,BTC/USDT)")):
    """Tickers for all markets, optionally filtered."""
    try:
        symbol_list = [await _resolve(s.strip()) for s in symbols.split(",") if s.strip()] if symbols else None
        return await exchange.fetch_tickers(symbol_list)
    except ExchangeError as e:
        raise _http_error(e)


@app.get("/orderbook/{base}/{quote}", response_model=OrderBook, tags=["Market Data"])
async def get_order_book(
    base: str,
    quote: str,
    depth: int = Query(default=10, ge=1, le=500, description="Number of levels per side")
):
    """Order book snapshot."""
    try:
        return await exchange.fetch_order_book(await _symbol(base, quote), depth)
    except ExchangeError as e:
        raise _http_error(e)


@app.get("/trades/{base}/{quote}", response_model=List[Trade], tags=["Market Data"])
async def get_trades(
    base: str,
    quote: str,
    limit: int = Query(default=50, ge=1, le=100, description="Number of trades"),
    since: Optional[int] = Query(default=None, ge=0, description="Only trades at/after this ms timestamp")
):
    """Recent public trades."""
    try:
        return await exchange.fetch_trades(await _symbol(base, quote), since=since, limit=limit)
    except ExchangeError as e:
        raise _http_error(e)
