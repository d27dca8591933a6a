"""Compute savings plan purchase calculation"""

from dataclasses import dataclass

from ..core.exceptions import InvalidParameterError
from .normalizer import HOURS_PER_MONTH, MONTHS_PER_YEAR, calculate_savings

# Fargate task sizes are given in CPU units and MB, 1024 of each per vCPU / GB
CPU_UNITS_PER_VCPU = 1024
MB_PER_GB = 1024


def to_whole_units(value: float, subunits_per_unit: int) -> float:
    """Convert a subunit quantity (CPU units, MB) to whole units (vCPU, GB)"""
    if subunits_per_unit <= 0:
        raise InvalidParameterError(f"Invalid subunit divisor: {subunits_per_unit}")
    return value / subunits_per_unit


@dataclass(frozen=True)
class PurchaseResult:
    """Figures of one savings plan purchase"""
    hourly_commitment: float
    purchase_amount: float
    monthly_on_demand_cost: float
    monthly_commitment_cost: float
    savings: float
    savings_percent: float


class CommitmentPurchaseCalculator:
    """Derives the hourly commitment and purchase amount of a savings plan"""

    @staticmethod
    def _validate(unit_count: float, duration_years: int):
        if unit_count <= 0:
            raise InvalidParameterError(f"Count must be positive: {unit_count}")
        if duration_years <= 0:
            raise InvalidParameterError(f"Duration must be positive: {duration_years}")

    def _result(self, monthly_on_demand: float, monthly_commitment: float,
                duration_years: int) -> PurchaseResult:
        hourly_commitment = monthly_commitment / HOURS_PER_MONTH
        purchase_amount = hourly_commitment * HOURS_PER_MONTH * MONTHS_PER_YEAR * duration_years
        savings, savings_percent = calculate_savings(monthly_on_demand, monthly_commitment)
        return PurchaseResult(
            hourly_commitment=hourly_commitment,
            purchase_amount=purchase_amount,
            monthly_on_demand_cost=monthly_on_demand,
            monthly_commitment_cost=monthly_commitment,
            savings=savings,
            savings_percent=savings_percent,
        )

    def calculate(self, cpu_rate: float, memory_rate: float,
                  cpu_quantity: float, memory_quantity: float,
                  unit_count: int, duration_years: int,
                  on_demand_cpu_rate: float, on_demand_memory_rate: float) -> PurchaseResult:
        """Two-dimension (vCPU + GB) purchase, quantities in whole units"""
        self._validate(unit_count, duration_years)

        def monthly(cpu: float, memory: float) -> float:
            return (unit_count * cpu_quantity * HOURS_PER_MONTH * cpu
                    + unit_count * memory_quantity * HOURS_PER_MONTH * memory)

        return self._result(
            monthly(on_demand_cpu_rate, on_demand_memory_rate),
            monthly(cpu_rate, memory_rate),
            duration_years,
        )

    def calculate_instances(self, rate: float, on_demand_rate: float,
                            count: int, duration_years: int) -> PurchaseResult:
        """Single-dimension purchase priced per instance hour"""
        self._validate(count, duration_years)
        return self._result(
            count * on_demand_rate * HOURS_PER_MONTH,
            count * rate * HOURS_PER_MONTH,
            duration_years,
        )
