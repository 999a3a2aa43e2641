"""
PERT three-point estimation.

The weighted average is ``(pessimistic + 4 * most_likely + optimistic) / 6``, in minutes.
https://en.wikipedia.org/wiki/Three-point_estimation

Two layers:
- ``weighted_average`` is total. It never raises and never rejects, it computes
  with the values it's given and degrades NaN/negative input to zero.
- ``estimate_task_time`` is used where input enters the system. It rejects
  missing values and estimates that aren't ordered
  ``pessimistic >= most_likely >= optimistic``.

PROMPT> python -m codecraft.estimate.pert
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union
from codecraft.estimate.decimal_util import ZERO, to_decimal, is_degenerate
from codecraft.estimate.time_units import TimeUnit, to_minutes, parse_time_unit

def weighted_average(optimistic: Any, most_likely: Any, pessimistic: Any, unit: Union[TimeUnit, str]) -> Decimal:
    values = [to_decimal(optimistic), to_decimal(most_likely), to_decimal(pessimistic)]
    if any(is_degenerate(value) for value in values):
        return ZERO
    o = to_minutes(values[0], unit)
    m = to_minutes(values[1], unit)
    p = to_minutes(values[2], unit)
    return (p + 4 * m + o) / 6

def optimistic_minutes(optimistic: Any, unit: Union[TimeUnit, str]) -> Decimal:
    return to_minutes(optimistic, unit)

def pessimistic_minutes(pessimistic: Any, unit: Union[TimeUnit, str]) -> Decimal:
    return to_minutes(pessimistic, unit)

@dataclass(frozen=True)
class Computed:
    """The estimate was accepted. ``minutes`` is the PERT weighted average."""
    minutes: Decimal

@dataclass(frozen=True)
class Rejected:
    """The estimate was refused before any computation took place."""
    reason: str

EstimateOutcome = Union[Computed, Rejected]

class TaskValidationError(ValueError):
    """Raised when an interactive edit carries an unusable three-point estimate."""
    pass

def estimate_task_time(optimistic: Any, most_likely: Any, pessimistic: Any, unit: Union[TimeUnit, str, None]) -> EstimateOutcome:
    """
    Validate a three-point estimate and compute its weighted average.
    """
    if optimistic is None or most_likely is None or pessimistic is None:
        return Rejected("Please fill all task fields: optimistic, most likely and pessimistic time.")
    time_unit = parse_time_unit(unit)
    if time_unit is None:
        return Rejected(f"Unknown time unit: {unit!r}. Use minutes, hours or days.")

    o = to_decimal(optimistic)
    m = to_decimal(most_likely)
    p = to_decimal(pessimistic)
    for name, value in (("Optimistic", o), ("Most likely", m), ("Pessimistic", p)):
        if is_degenerate(value):
            return Rejected(f"{name} time must be a non-negative number, got {value}.")

    if p < m or m < o:
        return Rejected("Pessimistic time must be >= Most Likely time, and Most Likely time must be >= Optimistic time.")

    return Computed(weighted_average(o, m, p, time_unit))

def require_task_time(optimistic: Any, most_likely: Any, pessimistic: Any, unit: Union[TimeUnit, str, None]) -> Decimal:
    """Same as ``estimate_task_time``, but raises ``TaskValidationError`` on rejection."""
    outcome = estimate_task_time(optimistic, most_likely, pessimistic, unit)
    if isinstance(outcome, Rejected):
        raise TaskValidationError(outcome.reason)
    return outcome.minutes

if __name__ == "__main__":
    print(weighted_average(4, 6, 10, TimeUnit.hours))
    print(estimate_task_time(4, 6, 10, "hours"))
    print(estimate_task_time(10, 6, 4, "hours"))
    print(weighted_average(10, 6, 4, "hours"))
