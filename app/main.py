"""
FastAPI Application - Multi-Venue Arbitrage Scanner API

Exposes the scanner's two queries over HTTP.

Supported Exchanges:
    - Binance (spot + USD-M futures)
    - OKX (spot + USDT swaps)
    - Bybit (spot + linear perpetuals)

Usage:
    uvicorn app.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    - Swagger: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings, validate_configuration
from core.exceptions import UnknownExchangeError
from core.exchange_manager import ExchangeManager
from core.logging import logger
from core.schemas import ArbitrageResponse, FundingRatesResponse
from core.utils.time import current_utc_timestamp
from services.scanner import ArbitrageScanner


manager = ExchangeManager()
scanner = ArbitrageScanner(manager)


# ============================================
# Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info("=== Application Starting ===")
    try:
        validate_configuration()
        await manager.initialize_all()
        logger.info("=== Started Successfully ===")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    logger.info("=== Shutting Down ===")
    await manager.shutdown_all()
    logger.info("=== Shutdown Complete ===")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Multi-Venue Arbitrage Scanner API",
    description=(
        "Spot-futures basis and cross-exchange spread opportunities across "
        "Binance, OKX and Bybit.\n\n"
        "## REST Endpoints\n"
        "- `GET /api/arbitrage` - Ranked arbitrage opportunities with summary\n"
        "- `GET /api/funding-rates` - Current funding rates (optional `?exchange=binance|okx|bybit`)\n"
        "- `GET /exchanges` - Configured exchanges\n"
        "- `GET /health` - Exchange reachability\n"
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


def get_scanner() -> ArbitrageScanner:
    """Dependency hook so tests can swap the scanner."""
    return scanner


def _cache_control() -> str:
    # Advisory only; every request still runs a fresh cycle
    return f"public, max-age={settings.cache_max_age}"


# ============================================
# System Endpoints
# ============================================

@app.get("/", tags=["System"])
async def root():
    """API information and configured exchanges."""
    return {
        "name": "Multi-Venue Arbitrage Scanner API",
        "version": "1.0.0",
        "status": "operational",
        "docs": "/docs",
        "exchanges": manager.list_exchanges()
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check - tests connectivity to all exchanges."""
    health = await manager.health_check_all()
    return {
        "status": "healthy" if all(health.values()) else "degraded",
        "exchanges": health
    }


@app.get("/exchanges", tags=["System"])
async def list_exchanges():
    """List configured exchanges in aggregation order."""
    return {"exchanges": manager.list_exchanges()}


# ============================================
# Query Endpoints
# ============================================

@app.get("/api/arbitrage", response_model=ArbitrageResponse, tags=["Arbitrage"])
async def get_arbitrage_opportunities(
    response: Response,
    scanner: ArbitrageScanner = Depends(get_scanner)
):
    """
    Ranked spot-futures and cross-exchange opportunities.

    Example:
        GET /api/arbitrage
    """
    try:
        result = await scanner.get_arbitrage_opportunities()
    except Exception as e:
        logger.error(f"Arbitrage pipeline error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch arbitrage opportunities"}
        )

    response.headers["Cache-Control"] = _cache_control()
    return result


@app.get("/api/funding-rates", response_model=FundingRatesResponse, tags=["Funding"])
async def get_funding_rates(
    response: Response,
    exchange: Optional[str] = Query(default=None, description="binance, okx or bybit"),
    scanner: ArbitrageScanner = Depends(get_scanner)
):
    """
    Current funding rates sorted by magnitude.

    Examples:
        GET /api/funding-rates
        GET /api/funding-rates?exchange=okx
    """
    try:
        result = await scanner.get_funding_rates(exchange)
    except UnknownExchangeError as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": str(e), "data": [], "timestamp": current_utc_timestamp(True)}
        )
    except Exception as e:
        logger.error(f"Funding rates pipeline error: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to fetch funding rates",
                "data": [],
                "timestamp": current_utc_timestamp(True)
            }
        )

    response.headers["Cache-Control"] = _cache_control()
    return result


# ============================================
# Error Handlers
# ============================================

@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 errors."""
    return JSONResponse(status_code=404, content={"detail": "Not found", "path": str(request.url)})


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Handle 500 errors."""
    logger.error(f"Internal error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
