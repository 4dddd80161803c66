"""Freebet extraction calculator utilities."""
import math
from numbers import Real
from typing import Optional

from backend.models.calculator import ExtractionResult


def round2(value: float) -> float:
    """
    Round to two decimal places, halves away from zero.

    The builtin round() uses banker's rounding and is not used here.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.copysign(math.floor(abs(value) * 100 + 0.5), value) / 100


def _divide(numerator: float, denominator: float) -> float:
    # IEEE semantics: x/0 is +-inf, 0/0 is nan
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


def calculate_extraction(
    freebet_value: Optional[float],
    back_odds: Optional[float],
    lay_odds: Optional[float],
    commission_percent: Optional[float],
) -> Optional[ExtractionResult]:
    """
    Calculate a Stake Not Returned free bet extraction.

    With SNR the free bet stake is never paid out, so a winning back bet
    only returns freebet_value * (back_odds - 1). The lay stake is sized
    against those winnings:

        lay_stake = freebet_value * (back_odds - 1) / (lay_odds - commission)

    and the guaranteed profit is the worse of the two rounded outcomes.

    Returns None when an input is missing, non-numeric or zero. Inputs are
    not range-checked: lay odds at or below the commission rate give a
    negative or non-finite lay stake.
    """
    inputs = (freebet_value, back_odds, lay_odds, commission_percent)
    if not all(_is_number(value) for value in inputs):
        return None
    if not (freebet_value and back_odds and lay_odds):
        return None

    commission = commission_percent / 100

    back_stake = freebet_value
    potential_winnings = freebet_value * (back_odds - 1)
    lay_stake = _divide(potential_winnings, lay_odds - commission)
    liability = lay_stake * (lay_odds - 1)

    # Back bet wins: bookmaker pays winnings only, exchange takes liability
    back_profit = potential_winnings - liability

    # Lay bet wins: keep the lay stake less commission, free bet costs nothing
    lay_profit = lay_stake * (1 - commission)

    back_win = round2(back_profit)
    lay_win = round2(lay_profit)
    profit = min(back_win, lay_win)
    extraction_rate = (profit / freebet_value) * 100

    return ExtractionResult(
        freebet_value=freebet_value,
        back_odds=back_odds,
        lay_odds=lay_odds,
        commission=commission,
        back_stake=back_stake,
        lay_stake=round2(lay_stake),
        liability=round2(liability),
        back_win=round2(back_win),
        lay_win=round2(lay_win),
        profit=round2(profit),
        extraction_rate=round2(extraction_rate),
    )


def parse_decimal(value: Optional[str]) -> Optional[float]:
    """Parse a user-entered decimal string, accepting a comma separator."""
    if value is None:
        return None
    text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return None if math.isnan(number) else number


def calculate_extraction_from_strings(
    freebet_value: Optional[str],
    back_odds: Optional[str],
    lay_odds: Optional[str],
    commission_percent: Optional[str],
) -> Optional[ExtractionResult]:
    """Calculate from raw form input; returns None if any field is empty or not a number."""
    return calculate_extraction(
        parse_decimal(freebet_value),
        parse_decimal(back_odds),
        parse_decimal(lay_odds),
        parse_decimal(commission_percent),
    )


def validate_extraction_inputs(
    freebet_value: float,
    back_odds: float,
    lay_odds: float,
    commission_percent: float,
) -> None:
    """Raise ValueError for inputs outside the range the formula is meaningful for."""
    if freebet_value <= 0:
        raise ValueError("Free bet value must be positive")
    if back_odds <= 1.0:
        raise ValueError("Back odds must be greater than 1.0")
    if lay_odds <= 1.0:
        raise ValueError("Lay odds must be greater than 1.0")
    if not 0 <= commission_percent < 100:
        raise ValueError("Commission must be between 0 and 100 percent")
