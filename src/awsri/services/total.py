"""
Total reservation cost of a set of RDS instances and ElastiCache nodes.

Instances are given as ``type:count:description[:multiaz]`` specs, priced for
one duration and offering type, and grouped per (family, instance class).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.exceptions import InvalidParameterError, NoPricingDataError
from ..pricing.families import ELASTICACHE, RDS, ResourceFamily
from ..pricing.models import PaymentOption, PriceQuery
from ..pricing.normalizer import duration_to_months, effective_period_cost, monthly_recurring
from ..providers.aws.client import AWSClient
from .reservations import ReservationPricingService

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', 't', '1', 'yes')
FALSE_VALUES = ('false', 'f', '0', 'no')


@dataclass(frozen=True)
class InstanceSpec:
    family: ResourceFamily
    instance_class: str
    count: int
    description: str
    multi_az: bool = False

    def query(self, region: str) -> PriceQuery:
        return PriceQuery(
            family=self.family.name,
            instance_class=self.instance_class,
            product_description=self.description,
            region=region,
            multi_az=self.multi_az,
        )


def _parse_bool(value: str, spec: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise InvalidParameterError(f"Invalid multi-az value in RDS instance {spec}: {value}")


def _parse_count(value: str, spec: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise InvalidParameterError(f"Invalid count in instance {spec}: {value}")
    if count <= 0:
        raise InvalidParameterError(f"Count must be positive in instance {spec}: {value}")
    return count


def parse_rds_spec(spec: str) -> InstanceSpec:
    """Parse ``instance-type:count:product-description:multi-az``"""
    parts = spec.split(':')
    if len(parts) != 4:
        raise InvalidParameterError(
            f"Invalid RDS instance format: {spec}, "
            f"expected format: instance-type:count:product-description:multi-az"
        )
    instance_class, count, description, multi_az = parts
    return InstanceSpec(
        family=RDS,
        instance_class=RDS.normalize_instance_class(instance_class),
        count=_parse_count(count, spec),
        description=description,
        multi_az=_parse_bool(multi_az, spec),
    )


def parse_elasticache_spec(spec: str) -> InstanceSpec:
    """Parse ``node-type:count:product-description``"""
    parts = spec.split(':')
    if len(parts) != 3:
        raise InvalidParameterError(
            f"Invalid ElastiCache instance format: {spec}, "
            f"expected format: node-type:count:product-description"
        )
    node_type, count, description = parts
    return InstanceSpec(
        family=ELASTICACHE,
        instance_class=ELASTICACHE.normalize_instance_class(node_type),
        count=_parse_count(count, spec),
        description=description,
    )


def parse_instance_specs(rds: Iterable[str] = (), elasticache: Iterable[str] = ()) -> List[InstanceSpec]:
    specs = [parse_rds_spec(spec) for spec in rds]
    specs.extend(parse_elasticache_spec(spec) for spec in elasticache)
    return specs


@dataclass
class InstanceCost:
    """Costs of one instance group, already multiplied by its count"""
    family: ResourceFamily
    instance_class: str
    count: int
    upfront: float
    monthly: float
    effective_monthly: float


@dataclass
class TotalReport:
    duration_years: int
    offering_type: PaymentOption
    instances: List[InstanceCost] = field(default_factory=list)

    @property
    def total_upfront(self) -> float:
        return sum(item.upfront for item in self.instances)

    @property
    def total_monthly(self) -> float:
        return sum(item.monthly for item in self.instances)

    @property
    def total_effective_monthly(self) -> float:
        return sum(item.effective_monthly for item in self.instances)

    def grouped(self) -> List[InstanceCost]:
        """Merge entries of the same (family, instance class), first-seen order"""
        groups: Dict[Tuple[str, str], InstanceCost] = {}
        for item in self.instances:
            key = (item.family.name, item.instance_class)
            existing = groups.get(key)
            if existing is None:
                groups[key] = InstanceCost(**vars(item))
                continue
            existing.count += item.count
            existing.upfront += item.upfront
            existing.monthly += item.monthly
            existing.effective_monthly += item.effective_monthly
        return list(groups.values())


class TotalCostService:
    """Prices every instance spec for a single duration and offering type"""

    def __init__(self, client: AWSClient,
                 services: Optional[Dict[str, ReservationPricingService]] = None):
        self.client = client
        self.services = services or {
            family.name: ReservationPricingService(client, family)
            for family in (RDS, ELASTICACHE)
        }

    def price_instance(self, spec: InstanceSpec, region: str, duration_years: int,
                       offering_type: PaymentOption) -> InstanceCost:
        service = self.services[spec.family.name]
        try:
            offer = service.select_offer(spec.query(region), duration_years, offering_type)
        except NoPricingDataError as e:
            raise NoPricingDataError(
                f"No reserved offering for {spec.family.display_name} {spec.instance_class} "
                f"({spec.description}, multi_az={spec.multi_az}): {e}"
            )

        monthly = monthly_recurring(offer.recurring_hourly)
        effective = effective_period_cost(
            offer.fixed_price, offer.recurring_hourly, duration_to_months(duration_years)
        )
        return InstanceCost(
            family=spec.family,
            instance_class=spec.instance_class,
            count=spec.count,
            upfront=offer.fixed_price * spec.count,
            monthly=monthly * spec.count,
            effective_monthly=effective * spec.count,
        )

    def calculate(self, specs: List[InstanceSpec], region: str, duration_years: int,
                  offering_type: PaymentOption) -> TotalReport:
        """Every instance is required; any pricing failure aborts the total"""
        if not specs:
            raise InvalidParameterError("No instances specified")

        report = TotalReport(duration_years=duration_years, offering_type=offering_type)
        for spec in specs:
            cost = self.price_instance(spec, region, duration_years, offering_type)
            logger.debug(
                f"{spec.family.display_name} {spec.instance_class} x{spec.count}: "
                f"upfront={cost.upfront} effective_monthly={cost.effective_monthly}"
            )
            report.instances.append(cost)
        return report
