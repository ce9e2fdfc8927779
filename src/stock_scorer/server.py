"""Stock Scorer MCP Server using FastMCP."""

import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from stock_scorer import SCHEMA_VERSION, SERVER_VERSION
from stock_scorer.data import shutdown_executor
from stock_scorer.tools import analyze, fundamentals_score, news_sentiment, technicals

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Stop provider work when the server shuts down."""
    try:
        yield
    finally:
        await shutdown_executor()
        logger.info("Provider executor stopped")


mcp = FastMCP(
    name="stock-scorer",
    lifespan=lifespan,
)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def analyze_stock(symbol: str, allow_synthetic: bool = True) -> str:
    """
    Score a stock 0-100 and recommend buy, sell or hold.

    Combines fundamental ratio scoring (40%), technical indicator scoring
    (35%) and recency-weighted news sentiment (25%). Confidence reflects how
    much the three component scores agree.

    Args:
        symbol: Stock ticker symbol (e.g., AAPL, GOOGL, MSFT)
        allow_synthetic: Use synthetic data for inputs the provider cannot
            deliver (default: true). Substitutions are listed in warnings.

    Returns:
        JSON with the latest quote, component scores, overall score,
        prediction, confidence, up to 8 reasons and data provenance
    """
    result = await analyze(symbol=symbol, allow_synthetic=allow_synthetic)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_technical_indicators(symbol: str, period: str = "6mo") -> str:
    """
    Calculate technical indicators for a stock.

    Includes SMA 20/50, EMA 12/26, RSI, MACD, Bollinger Bands,
    support/resistance, trend and annualized volatility.

    Args:
        symbol: Stock ticker symbol
        period: Price history period - 1mo, 3mo, 6mo, 1y, 2y, 5y, max

    Returns:
        JSON with indicators, technical score and reasons
    """
    result = await technicals(symbol=symbol, period=period)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_news_sentiment(symbol: str, days: int = 7) -> str:
    """
    Score recent news sentiment for a stock.

    Args:
        symbol: Stock ticker symbol
        days: Number of days to look back (default: 7)

    Returns:
        JSON with per-article sentiment, aggregate sentiment and score
    """
    result = await news_sentiment(symbol=symbol, days=days)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_fundamental_score(symbol: str) -> str:
    """
    Score fundamental ratios for a stock.

    Covers P/E, PEG, price-to-book, debt/equity, ROE, ROA, profit margin,
    current ratio, revenue growth and earnings growth.

    Args:
        symbol: Stock ticker symbol

    Returns:
        JSON with ratios, fundamental score and reasons
    """
    result = await fundamentals_score(symbol=symbol)
    return json.dumps(result, indent=2, default=str)


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Stock Scorer MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    mcp.run()


if __name__ == "__main__":
    main()
