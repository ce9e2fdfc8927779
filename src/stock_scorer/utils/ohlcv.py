"""Conversion between provider frames, PricePoint records and indicator frames."""

from collections.abc import Sequence

import pandas as pd

from stock_scorer.models import PricePoint, StockQuote

CANONICAL_COLUMNS = ["date", "open", "high", "low", "close", "volume"]

SESSIONS_PER_YEAR = 252


def standardize_ohlcv(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize a yfinance OHLCV frame.

    Output columns (always, in this order): date, open, high, low, close, volume.
    Dates are ISO strings, rows are ascending by date with duplicates and
    rows without a close removed.

    Args:
        df: Raw DataFrame from yf.download

    Returns:
        Standardized DataFrame
    """
    df = df.copy()

    # yf.download returns a column MultiIndex even for a single ticker
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)

    if "Adj Close" in df.columns:
        df = df.drop(columns=["Adj Close"])

    df.columns = df.columns.str.lower()
    df = df.reset_index()

    date_cols = [c for c in df.columns if c.lower() in ("date", "datetime", "index")]
    if date_cols:
        df = df.rename(columns={date_cols[0]: "date"})

    if "date" in df.columns and pd.api.types.is_datetime64_any_dtype(df["date"]):
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")

    for col in CANONICAL_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    df = df[CANONICAL_COLUMNS]
    df = df.dropna(subset=["close"])
    df = df.drop_duplicates(subset=["date"], keep="last")
    return df.sort_values("date").reset_index(drop=True)


def frame_to_price_points(df: pd.DataFrame) -> list[PricePoint]:
    """Convert a standardized frame into PricePoint records."""
    points: list[PricePoint] = []
    for row in df.itertuples(index=False):
        close = float(row.close)
        points.append(
            PricePoint(
                date=str(row.date),
                open=_float_or(row.open, close),
                high=_float_or(row.high, close),
                low=_float_or(row.low, close),
                close=close,
                volume=_float_or(row.volume, 0.0),
            )
        )
    return points


def price_points_to_frame(points: Sequence[PricePoint]) -> pd.DataFrame:
    """Build the float frame the indicator functions work on."""
    if not points:
        return pd.DataFrame({col: pd.Series(dtype=float) for col in CANONICAL_COLUMNS})
    df = pd.DataFrame([p.to_dict() for p in points], columns=CANONICAL_COLUMNS)
    for col in CANONICAL_COLUMNS[1:]:
        df[col] = df[col].astype(float)
    return df


def quote_from_history(
    symbol: str,
    points: Sequence[PricePoint],
    name: str = "",
) -> StockQuote | None:
    """
    Summarize the latest session of a price history.

    The 52-week range covers the last 252 sessions of the history passed in,
    so a shorter history gives the range over what was fetched.

    Args:
        symbol: Ticker symbol
        points: PricePoint records, oldest first
        name: Company name (default: the symbol)

    Returns:
        StockQuote, or None for an empty history
    """
    if not points:
        return None

    last = points[-1]
    change = None
    change_percent = None
    if len(points) > 1:
        previous_close = points[-2].close
        change = last.close - previous_close
        if previous_close:
            change_percent = change / previous_close * 100

    year = points[-SESSIONS_PER_YEAR:]
    return StockQuote(
        symbol=symbol,
        name=name or symbol,
        price=last.close,
        change=change,
        change_percent=change_percent,
        volume=last.volume,
        fifty_two_week_high=max(p.high for p in year),
        fifty_two_week_low=min(p.low for p in year),
    )


def _float_or(value: object, default: float) -> float:
    if value is None or pd.isna(value):
        return default
    return float(value)
