"""Technical indicator calculations over a close-price history."""

import logging
import math
from collections.abc import Sequence

import numpy as np
import pandas as pd

from stock_scorer.config import DEFAULT_CONFIG, TechnicalWeights
from stock_scorer.models import BollingerBands, PricePoint, TechnicalIndicators, Trend
from stock_scorer.utils.numeric import to_score
from stock_scorer.utils.ohlcv import price_points_to_frame

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252
# Signal line is approximated from the latest MACD value; no MACD history is kept
MACD_SIGNAL_FACTOR = 0.9


class InsufficientDataError(ValueError):
    """Raised when the indicator pipeline is given an empty price series."""

    pass


def calculate_sma(prices: pd.Series, period: int) -> float:
    """
    Calculate Simple Moving Average of the last `period` prices.

    Args:
        prices: Close price series, oldest first
        period: Number of periods for the average

    Returns:
        SMA value, or 0.0 when fewer than `period` prices are available
    """
    if len(prices) < period:
        return 0.0
    return float(prices.iloc[-period:].mean())


def calculate_ema(prices: pd.Series, period: int) -> float:
    """
    Calculate Exponential Moving Average over the full history.

    Seeded with the first price (not an SMA seed), multiplier 2 / (period + 1).

    Args:
        prices: Close price series, oldest first
        period: Number of periods for the average

    Returns:
        Latest EMA value, the single price for a one-element series, 0.0 when empty
    """
    if prices.empty:
        return 0.0
    # adjust=False gives ema[i] = price[i] * k + ema[i-1] * (1 - k), ema[0] = price[0]
    return float(prices.ewm(span=period, adjust=False).mean().iloc[-1])


def calculate_rsi(prices: pd.Series, period: int = 14) -> float:
    """
    Calculate Relative Strength Index.

    The first average gain/loss is the plain mean of the first `period`
    deltas; later deltas use Wilder's smoothing.

    Args:
        prices: Close price series, oldest first
        period: RSI period (default: 14)

    Returns:
        RSI (0-100 scale). 50 when fewer than period + 1 prices, 100 when
        there were no losses at all.
    """
    if len(prices) < period + 1:
        return 50.0

    deltas = np.diff(prices.to_numpy(dtype=float))
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(gains[:period].mean())
    avg_loss = float(losses[:period].mean())

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


def calculate_macd(prices: pd.Series, fast: int = 12, slow: int = 26) -> dict[str, float]:
    """
    Calculate MACD with a single-value signal proxy.

    Args:
        prices: Close price series, oldest first
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)

    Returns:
        Dict with 'macd', 'signal', 'histogram'
    """
    macd = calculate_ema(prices, fast) - calculate_ema(prices, slow)
    signal = macd * MACD_SIGNAL_FACTOR
    return {
        "macd": macd,
        "signal": signal,
        "histogram": macd - signal,
    }


def calculate_bollinger_bands(
    prices: pd.Series,
    period: int = 20,
    std_dev: float = 2,
) -> BollingerBands:
    """
    Calculate Bollinger Bands around the SMA.

    Uses the population standard deviation of the last `period` closes.
    With fewer than `period` prices both bands are 0 and middle is the
    (unavailable) SMA.
    """
    sma = calculate_sma(prices, period)

    if len(prices) < period:
        return BollingerBands(upper=0.0, middle=sma, lower=0.0)

    std = float(prices.iloc[-period:].std(ddof=0))
    return BollingerBands(
        upper=sma + std * std_dev,
        middle=sma,
        lower=sma - std * std_dev,
    )


def calculate_support_resistance(frame: pd.DataFrame) -> tuple[float, float]:
    """
    Find the nearest support and resistance around the latest close.

    A session high is a resistance candidate when it is strictly above the
    two highs on each side; lows mirror that for support. Short histories
    (< 10 sessions) use the close range.

    Args:
        frame: Price frame with high, low, close columns, oldest first

    Returns:
        Tuple of (support, resistance)
    """
    close = frame["close"]
    if close.empty:
        return 0.0, 0.0
    if len(close) < 10:
        return float(close.min()), float(close.max())

    high = frame["high"]
    low = frame["low"]

    # Shifted comparisons against NaN are False, so the two sessions at
    # each edge are never candidates.
    is_peak = (
        (high > high.shift(1))
        & (high > high.shift(-1))
        & (high > high.shift(2))
        & (high > high.shift(-2))
    )
    is_trough = (
        (low < low.shift(1))
        & (low < low.shift(-1))
        & (low < low.shift(2))
        & (low < low.shift(-2))
    )

    current_price = float(close.iloc[-1])

    above = high[is_peak & (high > current_price)]
    below = low[is_trough & (low < current_price)]

    resistance = float(above.min()) if not above.empty else float(close.max())
    support = float(below.max()) if not below.empty else float(close.min())

    return support, resistance


def calculate_volatility(prices: pd.Series, period: int = 20) -> float:
    """
    Calculate annualized volatility from log returns.

    Args:
        prices: Close price series, oldest first
        period: Number of recent closes to use (default: 20)

    Returns:
        Annualized volatility in percent, 0.0 when fewer than `period` prices
    """
    if len(prices) < period:
        return 0.0

    recent = prices.iloc[-period:].to_numpy(dtype=float)
    if len(recent) < 2:
        return 0.0

    log_returns = np.log(recent[1:] / recent[:-1])
    variance = float(log_returns.var())
    return math.sqrt(variance * TRADING_DAYS_PER_YEAR) * 100


def determine_trend(frame: pd.DataFrame) -> Trend:
    """
    Classify trend from price vs moving averages and five-session momentum.

    Bullish when every check holds, bearish when none does, neutral otherwise.
    """
    close = frame["close"]
    if len(close) < 3:
        return "neutral"

    sma20 = calculate_sma(close, 20)
    sma50 = calculate_sma(close, 50)
    current_price = float(close.iloc[-1])
    recent = close.tail(5)

    checks = (
        current_price > sma20,
        current_price > sma50,
        sma20 > sma50,
        float(recent.iloc[-1]) > float(recent.iloc[0]),
    )

    if all(checks):
        return "bullish"
    if not any(checks):
        return "bearish"
    return "neutral"


def calculate_technical_indicators(
    price_history: Sequence[PricePoint] | pd.DataFrame,
) -> TechnicalIndicators:
    """
    Calculate every indicator for a price history.

    Args:
        price_history: PricePoint records or a frame with high, low, close columns

    Returns:
        TechnicalIndicators snapshot

    Raises:
        InsufficientDataError: If the history is empty
    """
    if isinstance(price_history, pd.DataFrame):
        frame = price_history
    else:
        frame = price_points_to_frame(price_history)

    if frame.empty:
        raise InsufficientDataError("No data provided for technical analysis")

    close = frame["close"].astype(float)
    support, resistance = calculate_support_resistance(frame)
    macd = calculate_macd(close)

    indicators = TechnicalIndicators(
        sma20=calculate_sma(close, 20),
        sma50=calculate_sma(close, 50),
        ema12=calculate_ema(close, 12),
        ema26=calculate_ema(close, 26),
        rsi=calculate_rsi(close),
        macd=macd["macd"],
        macd_signal=macd["signal"],
        macd_histogram=macd["histogram"],
        bollinger=calculate_bollinger_bands(close),
        support=support,
        resistance=resistance,
        trend=determine_trend(frame),
        volatility=calculate_volatility(close),
    )
    logger.debug(
        f"Indicators over {len(frame)} sessions: rsi={indicators.rsi:.1f}, "
        f"trend={indicators.trend}"
    )
    return indicators


def technical_to_score(
    indicators: TechnicalIndicators,
    current_price: float,
    weights: TechnicalWeights = DEFAULT_CONFIG.technical,
) -> int:
    """
    Convert an indicator snapshot into a 0-100 score.

    Starts at a neutral 50 and adds or subtracts points for RSI band, SMA
    crossover, price vs SMAs, MACD vs signal, trend and high volatility.
    """
    score: float = 50

    if weights.rsi_oversold < indicators.rsi < weights.rsi_overbought:
        score += weights.rsi_healthy
    elif indicators.rsi < weights.rsi_oversold:
        score += weights.rsi_oversold_bonus
    elif indicators.rsi > weights.rsi_overbought:
        score += weights.rsi_overbought_penalty

    if indicators.sma20 > indicators.sma50:
        score += weights.ma_cross
    else:
        score -= weights.ma_cross

    if current_price > indicators.sma20:
        score += weights.price_above_sma20
    if current_price > indicators.sma50:
        score += weights.price_above_sma50

    if indicators.macd > indicators.macd_signal:
        score += weights.macd_cross
    else:
        score -= weights.macd_cross

    if indicators.trend == "bullish":
        score += weights.trend
    elif indicators.trend == "bearish":
        score -= weights.trend

    if indicators.volatility > weights.high_volatility:
        score += weights.high_volatility_penalty

    return to_score(score)


def technical_reasons(
    indicators: TechnicalIndicators,
    current_price: float,
    weights: TechnicalWeights = DEFAULT_CONFIG.technical,
) -> list[str]:
    """Narrative reasons for RSI band, MA crossover, price vs MAs, MACD and trend."""
    reasons: list[str] = []

    if indicators.rsi < weights.rsi_oversold:
        reasons.append("RSI indicates oversold conditions, potential buying opportunity")
    elif indicators.rsi > weights.rsi_overbought:
        reasons.append("RSI shows overbought conditions, may face selling pressure")
    else:
        reasons.append("RSI in healthy range, no extreme momentum signals")

    if indicators.sma20 > indicators.sma50:
        reasons.append("Short-term trend bullish with 20-day MA above 50-day MA")
    else:
        reasons.append("Short-term trend bearish with 20-day MA below 50-day MA")

    # Only mentioned when price is on the same side of both averages
    if current_price > indicators.sma20 and current_price > indicators.sma50:
        reasons.append("Price trading above key moving averages, showing strength")
    elif current_price < indicators.sma20 and current_price < indicators.sma50:
        reasons.append("Price below key moving averages, indicating weakness")

    if indicators.macd > indicators.macd_signal:
        reasons.append("MACD bullish crossover suggests upward momentum")
    else:
        reasons.append("MACD bearish signal indicates potential downward pressure")

    if indicators.trend == "bullish":
        reasons.append("Overall technical trend is bullish")
    elif indicators.trend == "bearish":
        reasons.append("Overall technical trend is bearish")
    else:
        reasons.append("Technical trend is neutral, lacking clear direction")

    return reasons
