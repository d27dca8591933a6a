import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, ProfileNotFound
import logging
from typing import Any, Callable, Dict, List, Optional

from ...core.base import BaseCloudProvider, CloudCredentials, CloudProvider
from ...core.exceptions import AWSError, ConfigurationError
from ...core.logging import get_performance_logger
from ...pricing.families import ResourceFamily

# The Price List and Savings Plans APIs are only served from us-east-1
PRICING_REGION = "us-east-1"


class AWSClient(BaseCloudProvider):
    """boto3-backed access to the price catalog and offering APIs"""

    def __init__(self, credentials: CloudCredentials,
                 pricing_region: str = PRICING_REGION,
                 max_results: int = 100):
        super().__init__(credentials)
        self.session = None
        self.pricing_region = pricing_region
        self.max_results = max_results
        self.clients: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)
        self.performance = get_performance_logger()

    @classmethod
    def from_settings(cls, profile: Optional[str], region: str,
                      pricing_region: str = PRICING_REGION,
                      max_results: int = 100) -> "AWSClient":
        credentials = CloudCredentials(provider=CloudProvider.AWS, profile=profile, region=region)
        return cls(credentials, pricing_region=pricing_region, max_results=max_results)

    def authenticate(self) -> bool:
        """Create the boto3 session, failing fast when no credentials resolve"""
        try:
            if self.credentials.profile:
                self.session = boto3.Session(profile_name=self.credentials.profile)
            else:
                self.session = boto3.Session()
        except ProfileNotFound as e:
            raise ConfigurationError(f"AWS profile not found: {e}")

        if self.session.get_credentials() is None:
            self.session = None
            raise ConfigurationError(
                "No AWS credentials found (configure a profile or set AWS_ACCESS_KEY_ID)"
            )

        self._authenticated = True
        self.logger.debug(f"Created AWS session: {self.get_provider_info()}")
        return True

    def get_client(self, service: str, region: Optional[str] = None):
        """Get or create a boto3 client for a service"""
        if not self.is_authenticated:
            self.authenticate()

        region = region or self.credentials.region
        if not region:
            raise ConfigurationError(f"No region configured for {service}")
        client_key = f"{service}_{region}"

        if client_key not in self.clients:
            self.clients[client_key] = self.session.client(service, region_name=region)

        return self.clients[client_key]

    def _call(self, operation: str, func: Callable[..., Any], **params) -> Any:
        """Invoke one API operation, translating botocore failures"""
        self.logger.debug(f"Calling {operation}", extra={'operation': operation})
        try:
            with self.performance.timer(operation):
                return func(**params)
        except NoCredentialsError:
            raise ConfigurationError("No AWS credentials found")
        except ClientError as e:
            error = e.response.get('Error', {})
            raise AWSError(
                f"{operation} failed: {error.get('Code', 'Unknown')}: {error.get('Message', str(e))}"
            )
        except BotoCoreError as e:
            raise AWSError(f"{operation} failed: {e}")

    def get_products(self, service_code: str, filters: List[Dict[str, str]],
                     max_results: Optional[int] = None) -> List[str]:
        """Query the Price List API; returns raw JSON price documents"""
        client = self.get_client('pricing', region=self.pricing_region)
        response = self._call(
            'pricing.get_products',
            client.get_products,
            ServiceCode=service_code,
            Filters=filters,
            FormatVersion='aws_v1',
            MaxResults=max_results or self.max_results,
        )
        documents = response.get('PriceList', [])
        self.logger.debug(
            f"{service_code}: {len(documents)} price documents",
            extra={'service': service_code}
        )
        return documents

    def describe_reserved_offerings(self, family: ResourceFamily, region: str,
                                    params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """List reserved offerings of a resource family in a region"""
        client = self.get_client(family.api_service, region=region)
        response = self._call(
            f"{family.api_service}.{family.offerings_operation}",
            getattr(client, family.offerings_operation),
            **params
        )
        return response.get(family.offerings_key, [])

    def describe_savings_plans_offering_rates(self, **params) -> List[Dict[str, Any]]:
        """List savings plan offering rates; the API is served from the pricing region"""
        client = self.get_client('savingsplans', region=self.pricing_region)
        response = self._call(
            'savingsplans.describe_savings_plans_offering_rates',
            client.describe_savings_plans_offering_rates,
            **params
        )
        return response.get('searchResults', [])

    def _paginate(self, service: str, operation: str, key: str, region: str) -> List[Dict[str, Any]]:
        client = self.get_client(service, region=region)
        paginator = client.get_paginator(operation)

        def collect() -> List[Dict[str, Any]]:
            items: List[Dict[str, Any]] = []
            for page in paginator.paginate():
                items.extend(page.get(key, []))
            return items

        return self._call(f"{service}.{operation}", collect)

    def describe_db_instances(self, region: str) -> List[Dict[str, Any]]:
        return self._paginate('rds', 'describe_db_instances', 'DBInstances', region)

    def describe_cache_clusters(self, region: str) -> List[Dict[str, Any]]:
        return self._paginate('elasticache', 'describe_cache_clusters', 'CacheClusters', region)
