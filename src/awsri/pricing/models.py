"""Data model for pricing queries, offers and normalized costs"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import InvalidParameterError, PriceExtractionError

SECONDS_PER_YEAR = 365 * 24 * 60 * 60
VALID_DURATIONS = (1, 3)


class PaymentOption(str, Enum):
    """Reservation / savings plan payment structures"""
    NO_UPFRONT = "No Upfront"
    PARTIAL_UPFRONT = "Partial Upfront"
    ALL_UPFRONT = "All Upfront"

    @classmethod
    def parse(cls, value: str) -> "PaymentOption":
        """Accept either the API spelling or the kebab form (no-upfront)"""
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower().replace('-', ' ').replace('_', ' ')
        for option in cls:
            if option.value.lower() == normalized:
                return option
        raise InvalidParameterError(
            f"Invalid payment option: {value} "
            f"(must be one of: {', '.join(o.value for o in cls)})"
        )

    @property
    def slug(self) -> str:
        return self.value.lower().replace(' ', '-')


class Dimension(str, Enum):
    """Resource dimension a commitment plan rate applies to"""
    CPU = "cpu"
    MEMORY = "memory"
    INSTANCE = "instance"
    RESERVATION = "reservation"
    UNKNOWN = "unknown"


class CostUnit(str, Enum):
    """Period a normalized cost is expressed in"""
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return 12 if self is CostUnit.YEARLY else 1


class Architecture(str, Enum):
    LINUX = "linux"
    ARM = "arm"


def duration_seconds(years: int) -> int:
    return years * SECONDS_PER_YEAR


class PriceQuery(BaseModel):
    """Attribute filter set for one on-demand price lookup"""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    family: str
    instance_class: str = Field(min_length=1)
    product_description: str = Field(min_length=1)
    region: str = Field(min_length=1)
    multi_az: bool = False
    architecture: Optional[Architecture] = None


@dataclass(frozen=True)
class ReservationOffer:
    """One reserved DB instance / cache node offering"""
    offering_id: str
    duration_seconds: int
    payment_option: str
    fixed_price: float
    recurring_hourly: float
    product_description: str
    multi_az: Optional[bool] = None
    instance_class: str = ""

    @property
    def duration_years(self) -> float:
        return self.duration_seconds / SECONDS_PER_YEAR

    @classmethod
    def from_api(cls, raw: Mapping[str, Any], id_key: str, class_key: str) -> "ReservationOffer":
        """Build an offer from a describe_reserved_*_offerings entry.

        Recurring charges are summed over the hourly entries; when the list is
        empty the flat UsagePrice is used.
        """
        try:
            charges = [
                float(charge['RecurringChargeAmount'])
                for charge in raw.get('RecurringCharges') or []
                if charge.get('RecurringChargeFrequency', 'Hourly') == 'Hourly'
            ]
            recurring = sum(charges) if charges else float(raw.get('UsagePrice') or 0.0)
            return cls(
                offering_id=raw.get(id_key, ''),
                duration_seconds=int(raw['Duration']),
                payment_option=raw.get('OfferingType', ''),
                fixed_price=float(raw['FixedPrice']),
                recurring_hourly=recurring,
                product_description=raw.get('ProductDescription', ''),
                multi_az=raw.get('MultiAZ'),
                instance_class=raw.get(class_key, ''),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PriceExtractionError(f"Malformed reservation offering: {e!r}")


@dataclass(frozen=True)
class OfferTarget:
    """Attributes a reservation offer must carry to be selected"""
    duration_years: int
    product_description: str
    multi_az: Optional[bool] = None

    @property
    def duration_seconds(self) -> int:
        return duration_seconds(self.duration_years)


@dataclass
class SavingsPlanRateCandidate:
    """One entry of describe_savings_plans_offering_rates"""
    rate: Optional[float]
    usage_type: str = ""
    unit: str = ""
    duration_seconds: Optional[int] = None
    properties: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "SavingsPlanRateCandidate":
        try:
            rate = float(raw['rate']) if raw.get('rate') not in (None, '') else None
        except (TypeError, ValueError):
            rate = None
        offering = raw.get('savingsPlanOffering') or {}
        seconds = offering.get('durationSeconds')
        return cls(
            rate=rate,
            usage_type=raw.get('usageType') or '',
            unit=raw.get('unit') or '',
            duration_seconds=int(seconds) if seconds is not None else None,
            properties=list(raw.get('properties') or []),
        )

    @property
    def is_hourly(self) -> bool:
        unit = self.unit.lower()
        return "hour" in unit or "hr" in unit

    def get_property(self, name: str) -> Optional[str]:
        for prop in self.properties:
            if prop.get('name') == name:
                return prop.get('value')
        return None

    @property
    def labels(self) -> List[str]:
        """Usage-type strings carried by this candidate, top-level first"""
        labels = [self.usage_type] if self.usage_type else []
        labels.extend(
            prop['value'] for prop in self.properties
            if prop.get('name') == 'usagetype' and prop.get('value')
        )
        return labels


@dataclass(frozen=True)
class CommitmentPlanRate:
    """Hourly rate of a single resource dimension under a commitment plan"""
    dimension: Dimension
    rate: float
    usage_type: str = ""
    low_confidence: bool = False


@dataclass(frozen=True)
class NormalizedCost:
    """Upfront + recurring cost shape reduced to one comparable period cost"""
    upfront: float
    recurring: float
    effective: float
    savings: float
    savings_percent: float
    unit: CostUnit = CostUnit.MONTHLY
