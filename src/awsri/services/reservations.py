"""
Reservation comparison for RDS instances and ElastiCache nodes.

For each duration and payment option the matching reserved offering is looked
up, normalized against the on-demand baseline, and collected into a report.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.exceptions import NoPricingDataError, OfferNotFoundError, PriceExtractionError
from ..pricing.families import ResourceFamily
from ..pricing.matcher import OfferMatcher
from ..pricing.models import (
    VALID_DURATIONS, CostUnit, NormalizedCost, OfferTarget,
    PaymentOption, PriceQuery, ReservationOffer,
)
from ..pricing.normalizer import CostNormalizer
from ..pricing.parser import extract_hourly_rate
from ..providers.aws.client import AWSClient

logger = logging.getLogger(__name__)

# Failures local to one (duration, payment option) row; rendered as N/A
ROW_ERRORS = (NoPricingDataError, OfferNotFoundError, PriceExtractionError)


@dataclass
class ComparisonRow:
    """One (duration, payment option) row; cost None means not available"""
    duration_years: Optional[int] = None
    payment_option: Optional[PaymentOption] = None
    cost: Optional[NormalizedCost] = None
    separator: bool = False
    reason: str = ""

    @classmethod
    def separator_row(cls) -> "ComparisonRow":
        return cls(separator=True)

    @property
    def available(self) -> bool:
        return self.cost is not None


@dataclass
class ComparisonReport:
    """Normalized reservation costs of one resource against its on-demand price"""
    family: ResourceFamily
    query: PriceQuery
    unit: CostUnit
    on_demand_hourly: float
    on_demand_cost: float
    rows: List[ComparisonRow] = field(default_factory=list)

    @property
    def offer_rows(self) -> List[ComparisonRow]:
        return [row for row in self.rows if not row.separator]


class ReservationPricingService:
    """Queries on-demand prices and reserved offerings of one resource family"""

    def __init__(self, client: AWSClient, family: ResourceFamily,
                 matcher: Optional[OfferMatcher] = None):
        self.client = client
        self.family = family
        self.matcher = matcher or OfferMatcher()

    def on_demand_hourly_rate(self, query: PriceQuery) -> float:
        """On-demand hourly price of the queried resource"""
        documents = self.client.get_products(
            self.family.service_code, self.family.on_demand_filters(query)
        )
        if not documents:
            raise NoPricingDataError(
                f"No on-demand price for {self.family.display_name} "
                f"{self.family.normalize_instance_class(query.instance_class)} "
                f"({query.product_description}, multi_az={query.multi_az}) in {query.region}"
            )
        if len(documents) > 1:
            logger.debug(
                f"{len(documents)} price documents matched, using the first",
                extra={'service': self.family.service_code, 'region': query.region}
            )
        return extract_hourly_rate(documents[0])

    def fetch_offers(self, query: PriceQuery, duration_years: int,
                     payment_option: PaymentOption) -> List[ReservationOffer]:
        raw_offers = self.client.describe_reserved_offerings(
            self.family,
            query.region,
            self.family.offering_params(query, duration_years, payment_option),
        )
        return self.family.parse_offerings(raw_offers)

    def select_offer(self, query: PriceQuery, duration_years: int,
                     payment_option: PaymentOption) -> ReservationOffer:
        """The reserved offering of a (duration, payment option) pair"""
        offers = self.fetch_offers(query, duration_years, payment_option)
        if not offers:
            raise NoPricingDataError(
                f"No {payment_option.value} offering for "
                f"{self.family.normalize_instance_class(query.instance_class)} "
                f"({query.product_description}) over {duration_years}y"
            )
        target = OfferTarget(
            duration_years=duration_years,
            product_description=query.product_description,
            multi_az=query.multi_az if self.family.supports_multi_az else None,
        )
        return self.matcher.select_reservation_offer(offers, target)

    def compare(self, query: PriceQuery, unit: CostUnit = CostUnit.MONTHLY) -> ComparisonReport:
        """Build the duration x payment option comparison.

        The on-demand baseline is required; failing to price it aborts. A row
        whose offering is missing, unmatched or malformed becomes N/A.
        """
        hourly = self.on_demand_hourly_rate(query)
        normalizer = CostNormalizer(unit)
        report = ComparisonReport(
            family=self.family,
            query=query,
            unit=unit,
            on_demand_hourly=hourly,
            on_demand_cost=normalizer.baseline(hourly),
        )

        for index, duration in enumerate(VALID_DURATIONS):
            if index > 0:
                report.rows.append(ComparisonRow.separator_row())
            for payment_option in PaymentOption:
                row = ComparisonRow(duration_years=duration, payment_option=payment_option)
                try:
                    offer = self.select_offer(query, duration, payment_option)
                    row.cost = normalizer.normalize(offer, hourly, duration)
                except ROW_ERRORS as e:
                    logger.warning(
                        f"{duration}y {payment_option.value}: {e}",
                        extra={'service': self.family.name, 'region': query.region}
                    )
                    row.reason = str(e)
                report.rows.append(row)

        return report
