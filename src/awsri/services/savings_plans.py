"""
Compute Savings Plans purchase calculation for Fargate tasks and EC2 instances.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.exceptions import NoPricingDataError
from ..core.regions import region_to_location
from ..pricing.families import (
    EC2_ON_DEMAND_ATTRIBUTES, EC2_SERVICE_CODE, FARGATE_CPU_FILTER,
    FARGATE_MEMORY_FILTER, FARGATE_SERVICE_CODE, term_filter,
)
from ..pricing.matcher import OfferMatcher
from ..pricing.models import (
    Architecture, CommitmentPlanRate, Dimension, PaymentOption,
    SavingsPlanRateCandidate, duration_seconds,
)
from ..pricing.parser import extract_hourly_rate
from ..pricing.purchase import (
    CPU_UNITS_PER_VCPU, MB_PER_GB, CommitmentPurchaseCalculator,
    PurchaseResult, to_whole_units,
)
from ..providers.aws.client import AWSClient

logger = logging.getLogger(__name__)

SAVINGS_PLAN_TYPE = "Compute"
FALLBACK_PAYMENT_OPTION = {PaymentOption.NO_UPFRONT: PaymentOption.ALL_UPFRONT}


@dataclass(frozen=True)
class FargateRates:
    """Hourly vCPU and per-GB rates"""
    cpu: float
    memory: float
    low_confidence: bool = False


class CommitmentPlanService:
    """Resolves on-demand and savings plan rates and derives the purchase"""

    def __init__(self, client: AWSClient,
                 matcher: Optional[OfferMatcher] = None,
                 calculator: Optional[CommitmentPurchaseCalculator] = None):
        self.client = client
        self.matcher = matcher or OfferMatcher()
        self.calculator = calculator or CommitmentPurchaseCalculator()

    # -- on-demand ------------------------------------------------------------

    def _fargate_on_demand_rate(self, location: str, attribute: str, value: str,
                                architecture: Architecture) -> float:
        documents = self.client.get_products(
            FARGATE_SERVICE_CODE,
            [term_filter("location", location), term_filter(attribute, value)],
        )
        if not documents:
            raise NoPricingDataError(
                f"No Fargate on-demand price for {attribute}={value} in {location}"
            )
        document = self.matcher.select_document_by_architecture(documents, architecture)
        return extract_hourly_rate(document)

    def fargate_on_demand_rates(self, region: str, architecture: Architecture) -> FargateRates:
        location = region_to_location(region)
        return FargateRates(
            cpu=self._fargate_on_demand_rate(location, *FARGATE_CPU_FILTER, architecture),
            memory=self._fargate_on_demand_rate(location, *FARGATE_MEMORY_FILTER, architecture),
        )

    def ec2_on_demand_rate(self, region: str, instance_type: str) -> float:
        location = region_to_location(region)
        filters = [term_filter("location", location), term_filter("instanceType", instance_type)]
        filters.extend(term_filter(name, value) for name, value in EC2_ON_DEMAND_ATTRIBUTES)

        documents = self.client.get_products(EC2_SERVICE_CODE, filters)
        if not documents:
            raise NoPricingDataError(f"No EC2 on-demand price for {instance_type} in {location}")
        return extract_hourly_rate(documents[0])

    # -- savings plan rates -----------------------------------------------------

    def _rate_params(self, product: str, service_code: str, region: str,
                     payment_option: PaymentOption,
                     instance_type: Optional[str] = None) -> Dict[str, Any]:
        filters = [{'name': 'region', 'values': [region]}]
        if instance_type:
            filters.append({'name': 'instanceType', 'values': [instance_type]})
        return {
            'savingsPlanTypes': [SAVINGS_PLAN_TYPE],
            'products': [product],
            'serviceCodes': [service_code],
            'savingsPlanPaymentOptions': [payment_option.value],
            'filters': filters,
            'maxResults': self.client.max_results,
        }

    def savings_plan_candidates(self, product: str, service_code: str, region: str,
                                payment_option: PaymentOption,
                                instance_type: Optional[str] = None
                                ) -> List[SavingsPlanRateCandidate]:
        """Offering rates for a payment option, with one fallback option when empty"""
        params = self._rate_params(product, service_code, region, payment_option, instance_type)
        results = self.client.describe_savings_plans_offering_rates(**params)

        fallback = FALLBACK_PAYMENT_OPTION.get(payment_option)
        if not results and fallback:
            logger.info(f"No {payment_option.value} savings plan rates, trying {fallback.value}")
            params['savingsPlanPaymentOptions'] = [fallback.value]
            results = self.client.describe_savings_plans_offering_rates(**params)

        if not results:
            raise NoPricingDataError(
                f"No savings plans offering rates found for payment option: {payment_option.value}"
            )
        return [SavingsPlanRateCandidate.from_api(item) for item in results]

    def fargate_savings_plan_rates(self, region: str, duration_years: int,
                                   architecture: Architecture,
                                   payment_option: PaymentOption) -> FargateRates:
        candidates = self.savings_plan_candidates(
            "Fargate", FARGATE_SERVICE_CODE, region, payment_option
        )
        rates = self.matcher.resolve_dimension_rates(
            candidates, duration_seconds(duration_years), region=region, architecture=architecture
        )
        cpu: CommitmentPlanRate = rates[Dimension.CPU]
        memory: CommitmentPlanRate = rates[Dimension.MEMORY]
        return FargateRates(
            cpu=cpu.rate,
            memory=memory.rate,
            low_confidence=cpu.low_confidence or memory.low_confidence,
        )

    def ec2_savings_plan_rate(self, region: str, instance_type: str, duration_years: int,
                              payment_option: PaymentOption) -> CommitmentPlanRate:
        candidates = self.savings_plan_candidates(
            "EC2", EC2_SERVICE_CODE, region, payment_option, instance_type=instance_type
        )
        return self.matcher.select_instance_rate(
            candidates, duration_seconds(duration_years), region, instance_type
        )

    # -- purchases ----------------------------------------------------------------

    def fargate_purchase(self, region: str, memory_mb: float, cpu_units: float,
                         task_count: int, duration_years: int = 1,
                         architecture: Architecture = Architecture.LINUX,
                         payment_option: PaymentOption = PaymentOption.NO_UPFRONT) -> PurchaseResult:
        """Purchase for task_count tasks of cpu_units CPU units and memory_mb MB"""
        on_demand = self.fargate_on_demand_rates(region, architecture)
        committed = self.fargate_savings_plan_rates(region, duration_years, architecture, payment_option)

        return self.calculator.calculate(
            cpu_rate=committed.cpu,
            memory_rate=committed.memory,
            cpu_quantity=to_whole_units(cpu_units, CPU_UNITS_PER_VCPU),
            memory_quantity=to_whole_units(memory_mb, MB_PER_GB),
            unit_count=task_count,
            duration_years=duration_years,
            on_demand_cpu_rate=on_demand.cpu,
            on_demand_memory_rate=on_demand.memory,
        )

    def ec2_purchase(self, region: str, instance_type: str, count: int,
                     duration_years: int = 1,
                     payment_option: PaymentOption = PaymentOption.NO_UPFRONT) -> PurchaseResult:
        on_demand = self.ec2_on_demand_rate(region, instance_type)
        committed = self.ec2_savings_plan_rate(region, instance_type, duration_years, payment_option)
        return self.calculator.calculate_instances(committed.rate, on_demand, count, duration_years)
