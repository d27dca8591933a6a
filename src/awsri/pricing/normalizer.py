"""
Cost normalization.

Turns an upfront fee plus a recurring hourly charge over a contract into a
single per-period cost and compares it with the on-demand baseline. Months
are a flat 720 hours (24 x 30).
"""

from typing import Optional, Tuple

from ..core.exceptions import CalculationError, InvalidParameterError
from .models import CostUnit, NormalizedCost, ReservationOffer

HOURS_PER_DAY = 24
DAYS_PER_MONTH = 30
HOURS_PER_MONTH = HOURS_PER_DAY * DAYS_PER_MONTH
MONTHS_PER_YEAR = 12


def duration_to_months(years: int) -> int:
    return years * MONTHS_PER_YEAR


def monthly_recurring(hourly_rate: float) -> float:
    """Monthly cost of an hourly charge"""
    return hourly_rate * HOURS_PER_MONTH


def period_cost(monthly_cost: float, unit: CostUnit = CostUnit.MONTHLY) -> float:
    return monthly_cost * unit.months


def effective_period_cost(upfront: float, recurring_hourly: float, duration_months: int,
                          unit: CostUnit = CostUnit.MONTHLY) -> float:
    """Upfront fee amortized over the contract plus the recurring charge"""
    if duration_months <= 0:
        raise InvalidParameterError(f"Contract duration must be positive: {duration_months} months")
    effective_monthly = upfront / duration_months + monthly_recurring(recurring_hourly)
    return period_cost(effective_monthly, unit)


def calculate_savings(baseline: float, effective: float) -> Tuple[float, float]:
    """Return (savings amount, savings percent) of effective against baseline"""
    if baseline == 0:
        raise CalculationError("Cannot compute a savings percentage against a zero on-demand baseline")
    savings = baseline - effective
    return savings, savings / baseline * 100


class CostNormalizer:
    """Normalizes reservation offers against an on-demand hourly baseline"""

    def __init__(self, unit: CostUnit = CostUnit.MONTHLY):
        self.unit = unit

    def baseline(self, on_demand_hourly: float) -> float:
        return period_cost(monthly_recurring(on_demand_hourly), self.unit)

    def normalize(self, offer: Optional[ReservationOffer], on_demand_hourly: float,
                  duration_years: int) -> Optional[NormalizedCost]:
        """Normalize an offer; None means the offer is not available"""
        if offer is None:
            return None

        months = duration_to_months(duration_years)
        recurring = period_cost(monthly_recurring(offer.recurring_hourly), self.unit)
        effective = effective_period_cost(offer.fixed_price, offer.recurring_hourly, months, self.unit)
        savings, savings_percent = calculate_savings(self.baseline(on_demand_hourly), effective)

        return NormalizedCost(
            upfront=offer.fixed_price,
            recurring=recurring,
            effective=effective,
            savings=savings,
            savings_percent=savings_percent,
            unit=self.unit,
        )
