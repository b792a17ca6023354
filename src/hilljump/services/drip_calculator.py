"""
DRIP reinvestment calculator.

Simulates a single-share position that reinvests every dividend into
fractional shares at the first closing price on or after the reinvestment
date, and reports value growth over a trailing window ending at `as_of`.

Everything here is a pure function of its inputs: no I/O and no clock.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from hilljump.core.exceptions import ValidationError
from hilljump.core.timezone import add_business_days
from hilljump.domain.models import DividendEvent, DripWindow, PricePoint
from hilljump.domain.views import DripResult, ReinvestmentStep

ONE = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

Number = Union[Decimal, float, int, str]


def _to_decimal(value: Number) -> Optional[Decimal]:
    """Coerce to Decimal; None for anything non-finite or unparseable."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
    return result if result.is_finite() else None


def _usable_prices(prices: Iterable[PricePoint], start: date, end: date) -> list[tuple[date, Decimal]]:
    """Positive, finite closes within [start, end], ascending by date."""
    usable = []
    for point in prices:
        close = _to_decimal(point.close_price)
        if close is None or close <= ZERO:
            continue
        if start <= point.date <= end:
            usable.append((point.date, close))
    usable.sort(key=lambda item: item[0])
    return usable


def _first_on_or_after(prices: list[tuple[date, Decimal]], target: date) -> Optional[tuple[date, Decimal]]:
    for price_date, close in prices:
        if price_date >= target:
            return price_date, close
    return None


def simple_price_return(start_price: Decimal, end_price: Decimal) -> Decimal:
    """Percentage price change with no reinvestment."""
    return (end_price - start_price) / start_price * HUNDRED


def calculate_drip(
    prices: Iterable[PricePoint],
    dividends: Iterable[DividendEvent],
    window_days: int,
    as_of: date,
    *,
    tax_withholding: Number = ZERO,
    payment_offset_days: int = 0,
    include_last_dividend: bool = False,
    require_dividends: bool = False,
) -> Optional[DripResult]:
    """
    Simulate DRIP over the window `[as_of - window_days, as_of]`.

    Args:
        prices: Daily closes for one ticker, any order.
        dividends: Dividend events for the same ticker, any order.
        window_days: Lookback length in calendar days.
        as_of: Last day of the window.
        tax_withholding: Fraction withheld from each dividend before
            reinvestment, in [0, 1).
        payment_offset_days: Business days between ex-date and the day the
            cash is reinvested.
        include_last_dividend: Count a dividend going ex on `as_of` itself.
        require_dividends: Report insufficient data when no dividend falls
            in the window instead of returning the plain price return.

    Returns:
        DripResult, or None when fewer than two usable prices fall in the
        window (or no dividend does and `require_dividends` is set).
    """
    if window_days <= 0:
        raise ValidationError(f"window_days must be positive, got {window_days}")
    if payment_offset_days < 0:
        raise ValidationError(f"payment_offset_days must be >= 0, got {payment_offset_days}")
    tax = _to_decimal(tax_withholding)
    if tax is None or tax < ZERO or tax >= ONE:
        raise ValidationError(f"tax_withholding must be in [0, 1), got {tax_withholding}")

    start_date = as_of - timedelta(days=window_days)
    end_date = as_of

    window_prices = _usable_prices(prices, start_date, end_date)
    if len(window_prices) < 2:
        return None

    def in_window(event: DividendEvent) -> bool:
        if include_last_dividend:
            return start_date <= event.ex_date <= end_date
        return start_date <= event.ex_date < end_date

    window_dividends = sorted(
        (d for d in dividends if in_window(d)),
        key=lambda d: d.ex_date,
    )
    if require_dividends and not window_dividends:
        return None

    start_price_date, start_price = window_prices[0]
    end_price_date, end_price = window_prices[-1]
    keep = ONE - tax

    shares = ONE
    total_dividends = ZERO
    skipped = 0
    steps: list[ReinvestmentStep] = []

    for event in window_dividends:
        amount = _to_decimal(event.amount_per_share)
        if amount is None or amount <= ZERO:
            skipped += 1
            continue

        target = add_business_days(event.ex_date, payment_offset_days)
        match = _first_on_or_after(window_prices, target)
        if match is None:
            skipped += 1
            continue

        reinvest_date, reinvest_price = match
        dividend_per_share = amount * keep
        cash = shares * dividend_per_share
        added = cash / reinvest_price
        shares += added
        total_dividends += cash
        steps.append(
            ReinvestmentStep(
                ex_date=event.ex_date,
                reinvest_date=reinvest_date,
                dividend_per_share=dividend_per_share,
                reinvest_price=reinvest_price,
                cash_received=cash,
                shares_added=added,
                shares_after=shares,
            )
        )

    growth = (shares * end_price - ONE * start_price) / (ONE * start_price) * HUNDRED

    return DripResult(
        window_days=window_days,
        start_date=start_date,
        end_date=end_date,
        start_price_date=start_price_date,
        end_price_date=end_price_date,
        start_price=start_price,
        end_price=end_price,
        start_shares=ONE,
        end_shares=shares,
        total_dividends=total_dividends,
        growth_percent=growth,
        skipped_dividends=skipped,
        steps=steps,
    )


def drip_windows(
    prices: Iterable[PricePoint],
    dividends: Iterable[DividendEvent],
    as_of: date,
    windows: Optional[Iterable[DripWindow]] = None,
    **options,
) -> dict[str, Optional[DripResult]]:
    """
    Evaluate every standard lookback window.

    Returns a mapping of window key ("4w", "13w", ...) to result or None.
    Keyword options are passed through to `calculate_drip`.
    """
    price_list = list(prices)
    dividend_list = list(dividends)
    return {
        window.value: calculate_drip(
            price_list,
            dividend_list,
            window.days,
            as_of,
            **options,
        )
        for window in (windows or list(DripWindow))
    }
