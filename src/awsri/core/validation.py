"""Input validation for command parameters"""

import re
from typing import Any, Callable, List, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidParameterError
from .regions import REGION_TO_LOCATION
from ..pricing.models import VALID_DURATIONS, Architecture, CostUnit, PaymentOption

R = TypeVar("R", bound="RequestValidator")


class Validator:
    """Central validation utility"""

    # Regex patterns for validation
    PATTERNS = {
        'aws_region': re.compile(r'^[a-z]{2}(-[a-z]+)+-\d{1}$'),
        'instance_class': re.compile(r'^[a-z0-9-]+(\.[a-z0-9-]+)+$'),
    }

    @classmethod
    def validate_duration(cls, duration: Union[int, str]) -> int:
        """Validate a contract duration in years"""
        try:
            years = int(duration)
        except (TypeError, ValueError):
            raise InvalidParameterError(f"Invalid duration: {duration}")
        if years not in VALID_DURATIONS:
            raise InvalidParameterError(
                f"Invalid duration: {duration} (must be one of: {', '.join(map(str, VALID_DURATIONS))})"
            )
        return years

    @classmethod
    def validate_payment_option(cls, payment_option: Union[str, PaymentOption]) -> PaymentOption:
        return PaymentOption.parse(payment_option)

    @classmethod
    def validate_architecture(cls, architecture: Union[str, Architecture]) -> Architecture:
        try:
            return Architecture(str(architecture).lower())
        except ValueError:
            raise InvalidParameterError(
                f"Invalid architecture: {architecture} (must be one of: linux, arm)"
            )

    @classmethod
    def validate_unit(cls, unit: Union[str, CostUnit]) -> CostUnit:
        try:
            return CostUnit(str(unit).lower())
        except ValueError:
            raise InvalidParameterError(f"Invalid unit: {unit} (must be one of: monthly, yearly)")

    @classmethod
    def validate_aws_region(cls, region: str) -> str:
        """Validate AWS region"""
        if not cls.PATTERNS['aws_region'].match(region or ''):
            raise InvalidParameterError(f"Invalid AWS region: {region}")
        if region not in REGION_TO_LOCATION:
            raise InvalidParameterError(f"Unsupported AWS region: {region}")
        return region

    @classmethod
    def validate_instance_class(cls, instance_class: str) -> str:
        """Validate an instance class / node type such as db.t4g.large"""
        if not cls.PATTERNS['instance_class'].match(instance_class or ''):
            raise InvalidParameterError(f"Invalid instance class: {instance_class}")
        return instance_class


def _as_value_error(check: Callable[..., Any], *args: Any) -> Any:
    # pydantic only collects ValueError/AssertionError from validators
    try:
        return check(*args)
    except InvalidParameterError as e:
        raise ValueError(str(e))


class RequestValidator(BaseModel):
    """Base model for request validation"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class ReservationRequest(RequestValidator):
    """Validate an rds / elasticache comparison request"""
    instance_class: str
    product_description: str = Field(min_length=1)
    region: str
    multi_az: bool = False
    unit: CostUnit = CostUnit.MONTHLY

    @field_validator('instance_class')
    @classmethod
    def check_instance_class(cls, value: str) -> str:
        return _as_value_error(Validator.validate_instance_class, value)

    @field_validator('region')
    @classmethod
    def check_region(cls, value: str) -> str:
        return _as_value_error(Validator.validate_aws_region, value)

    @field_validator('unit', mode='before')
    @classmethod
    def check_unit(cls, value: Any) -> CostUnit:
        return _as_value_error(Validator.validate_unit, value)


class CommitmentRequest(RequestValidator):
    """Fields shared by savings plan purchase requests"""
    region: str
    duration: int = 1
    payment_option: PaymentOption = PaymentOption.NO_UPFRONT

    @field_validator('region')
    @classmethod
    def check_region(cls, value: str) -> str:
        return _as_value_error(Validator.validate_aws_region, value)

    @field_validator('duration', mode='before')
    @classmethod
    def check_duration(cls, value: Any) -> int:
        return _as_value_error(Validator.validate_duration, value)

    @field_validator('payment_option', mode='before')
    @classmethod
    def check_payment_option(cls, value: Any) -> PaymentOption:
        return _as_value_error(Validator.validate_payment_option, value)


class FargatePurchaseRequest(CommitmentRequest):
    """Validate a Fargate savings plan request (memory in MB, vcpu in CPU units)"""
    memory: float = Field(gt=0)
    vcpu: float = Field(gt=0)
    task_count: int = Field(gt=0)
    architecture: Architecture = Architecture.LINUX

    @field_validator('architecture', mode='before')
    @classmethod
    def check_architecture(cls, value: Any) -> Architecture:
        return _as_value_error(Validator.validate_architecture, value)


class EC2PurchaseRequest(CommitmentRequest):
    """Validate an EC2 savings plan request"""
    instance_type: str
    count: int = Field(gt=0)

    @field_validator('instance_type')
    @classmethod
    def check_instance_type(cls, value: str) -> str:
        return _as_value_error(Validator.validate_instance_class, value)


class TotalRequest(RequestValidator):
    """Validate a total cost request"""
    region: str
    rds: List[str] = Field(default_factory=list)
    elasticache: List[str] = Field(default_factory=list)
    duration: int = 1
    offering_type: PaymentOption = PaymentOption.PARTIAL_UPFRONT

    @field_validator('region')
    @classmethod
    def check_region(cls, value: str) -> str:
        return _as_value_error(Validator.validate_aws_region, value)

    @field_validator('duration', mode='before')
    @classmethod
    def check_duration(cls, value: Any) -> int:
        return _as_value_error(Validator.validate_duration, value)

    @field_validator('offering_type', mode='before')
    @classmethod
    def check_offering_type(cls, value: Any) -> PaymentOption:
        return _as_value_error(Validator.validate_payment_option, value)


def _format_errors(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item.get('loc', ())) or 'request'
        message = item.get('msg', '')
        # pydantic prefixes errors raised from validators
        message = message.replace('Value error, ', '')
        messages.append(f"{location}: {message}")
    return '; '.join(messages)


def parse_request(model: Type[R], **values: Any) -> R:
    """Build a request model, reporting failures as InvalidParameterError"""
    try:
        return model(**values)
    except ValidationError as e:
        raise InvalidParameterError(_format_errors(e))
