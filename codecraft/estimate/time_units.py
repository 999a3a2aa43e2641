"""
Convert task and risk estimates into minutes, and render minutes as human readable text.

A day is a workday of 8 hours. The same day length is used for converting
from "days" and for formatting, so a value survives the round trip.

PROMPT> python -m codecraft.estimate.time_units
"""
import logging
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from enum import Enum
from typing import Any, Union
from codecraft.estimate.decimal_util import ZERO, to_decimal, is_degenerate

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = 60
HOURS_PER_WORKDAY = 8
MINUTES_PER_WORKDAY = MINUTES_PER_HOUR * HOURS_PER_WORKDAY

class TimeUnit(str, Enum):
    minutes = 'minutes'
    hours = 'hours'
    # A workday of 8 hours.
    days = 'days'

UNIT_TO_MINUTES: dict[TimeUnit, int] = {
    TimeUnit.minutes: 1,
    TimeUnit.hours: MINUTES_PER_HOUR,
    TimeUnit.days: MINUTES_PER_WORKDAY,
}

def parse_time_unit(unit: Union[TimeUnit, str, None]) -> Union[TimeUnit, None]:
    if isinstance(unit, TimeUnit):
        return unit
    if isinstance(unit, str):
        try:
            return TimeUnit(unit.strip().lower())
        except ValueError:
            return None
    return None

def to_minutes(value: Any, unit: Union[TimeUnit, str]) -> Decimal:
    """
    Convert a magnitude in the given unit into minutes.

    NaN, negative or unparsable values and unknown units yield zero.
    """
    time_unit = parse_time_unit(unit)
    if time_unit is None:
        logger.debug(f"Unknown time unit {unit!r}, treating the value as zero.")
        return ZERO
    d = to_decimal(value)
    if is_degenerate(d):
        return ZERO
    return d * UNIT_TO_MINUTES[time_unit]

def _pluralize(count: int, singular: str) -> str:
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {singular}s"

def format_duration(total_minutes: Any) -> str:
    """
    Render minutes as "2 days 3 hours 15 minutes", omitting parts that are zero.

    Fractions of a minute are dropped. Degenerate input and anything shorter
    than a minute is "0 minutes".
    """
    d = to_decimal(total_minutes)
    if is_degenerate(d):
        return "0 minutes"
    whole_minutes = int(d.to_integral_value(rounding=ROUND_FLOOR))

    days, remainder = divmod(whole_minutes, MINUTES_PER_WORKDAY)
    hours, minutes = divmod(remainder, MINUTES_PER_HOUR)

    parts: list[str] = []
    if days > 0:
        parts.append(_pluralize(days, "day"))
    if hours > 0:
        parts.append(_pluralize(hours, "hour"))
    if minutes > 0:
        parts.append(_pluralize(minutes, "minute"))
    if not parts:
        return "0 minutes"
    return " ".join(parts)

def format_currency(amount: Any, symbol: str = "$") -> str:
    """Two decimals with thousands separators, like "$1,234.50"."""
    d = to_decimal(amount)
    if d.is_nan() or d.is_infinite():
        d = ZERO
    quantized = d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if quantized < ZERO:
        return f"-{symbol}{-quantized:,.2f}"
    return f"{symbol}{quantized:,.2f}"

if __name__ == "__main__":
    for value, unit in [(1, "hours"), (2.5, "days"), (90, "minutes"), (-3, "hours"), (1, "weeks")]:
        minutes = to_minutes(value, unit)
        print(f"{value} {unit} -> {minutes} minutes -> {format_duration(minutes)!r}")
    print(format_currency(Decimal("1234.5")))
