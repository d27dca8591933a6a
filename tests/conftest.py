"""Pytest configuration and fixtures"""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from awsri.core.config import Settings
from awsri.pricing.models import SECONDS_PER_YEAR

ONE_YEAR = SECONDS_PER_YEAR
THREE_YEARS = 3 * SECONDS_PER_YEAR


def make_price_document(usd="0.1840000000", unit="Hrs", attributes=None):
    """Price List entry as returned (JSON encoded) by pricing.get_products"""
    return json.dumps({
        "product": {
            "productFamily": "Database Instance",
            "attributes": attributes or {},
            "sku": "ABCDEFGH12345678",
        },
        "serviceCode": "AmazonRDS",
        "terms": {
            "OnDemand": {
                "ABCDEFGH12345678.JRTCKXETXF": {
                    "offerTermCode": "JRTCKXETXF",
                    "priceDimensions": {
                        "ABCDEFGH12345678.JRTCKXETXF.6YS6EN2CT7": {
                            "unit": unit,
                            "description": "On-demand price",
                            "pricePerUnit": {"USD": usd},
                        }
                    },
                }
            }
        },
    })


def make_rds_offering(duration=ONE_YEAR, offering_type="Partial Upfront", fixed=500.0,
                      recurring=0.05, description="mysql", multi_az=True,
                      instance_class="db.t4g.large", offering_id="offer-1"):
    """Entry of describe_reserved_db_instances_offerings"""
    return {
        "ReservedDBInstancesOfferingId": offering_id,
        "DBInstanceClass": instance_class,
        "Duration": duration,
        "FixedPrice": fixed,
        "UsagePrice": 0.0,
        "CurrencyCode": "USD",
        "ProductDescription": description,
        "OfferingType": offering_type,
        "MultiAZ": multi_az,
        "RecurringCharges": [
            {"RecurringChargeAmount": recurring, "RecurringChargeFrequency": "Hourly"}
        ],
    }


def make_cache_offering(duration=ONE_YEAR, offering_type="Partial Upfront", fixed=300.0,
                        recurring=0.03, description="redis", node_type="cache.m5.large",
                        offering_id="cache-offer-1"):
    """Entry of describe_reserved_cache_nodes_offerings"""
    return {
        "ReservedCacheNodesOfferingId": offering_id,
        "CacheNodeType": node_type,
        "Duration": duration,
        "FixedPrice": fixed,
        "UsagePrice": 0.0,
        "ProductDescription": description,
        "OfferingType": offering_type,
        "RecurringCharges": [
            {"RecurringChargeAmount": recurring, "RecurringChargeFrequency": "Hourly"}
        ],
    }


def make_rate(rate, usage_type, duration=ONE_YEAR, region="ap-northeast-1", extra_properties=None,
              unit="Hrs"):
    """Entry of savingsplans.describe_savings_plans_offering_rates"""
    properties = [{"name": "regionCode", "value": region}] if region else []
    properties.extend(extra_properties or [])
    return {
        "savingsPlanOffering": {
            "offeringId": "sp-offering",
            "paymentOption": "No Upfront",
            "planType": "Compute",
            "durationSeconds": duration,
            "currency": "USD",
        },
        "rate": str(rate),
        "unit": unit,
        "productType": "Fargate",
        "serviceCode": "AmazonECS",
        "usageType": usage_type,
        "operation": "",
        "properties": properties,
    }


@pytest.fixture
def price_document():
    return make_price_document()


@pytest.fixture
def fargate_rate_results():
    """Fargate savings plan rates for x86 and ARM, 1 and 3 years"""
    return [
        make_rate("0.0312", "APN1-Fargate-Windows-vCPU-Hours:perCPU"),
        make_rate("0.0403", "APN1-Fargate-vCPU-Hours:perCPU"),
        make_rate("0.0044", "APN1-Fargate-GB-Hours"),
        make_rate("0.0322", "APN1-Fargate-ARM-vCPU-Hours:perCPU"),
        make_rate("0.0035", "APN1-Fargate-ARM-GB-Hours"),
        make_rate("0.0290", "APN1-Fargate-vCPU-Hours:perCPU", duration=THREE_YEARS),
        make_rate("0.0031", "APN1-Fargate-GB-Hours", duration=THREE_YEARS),
    ]


@pytest.fixture
def mock_client():
    """AWSClient double; each test sets the API responses it needs"""
    client = MagicMock()
    client.max_results = 100
    client.get_products.return_value = []
    client.describe_reserved_offerings.return_value = []
    client.describe_savings_plans_offering_rates.return_value = []
    client.describe_db_instances.return_value = []
    client.describe_cache_clusters.return_value = []
    return client


@pytest.fixture
def test_settings():
    """Create test settings"""
    return Settings(
        debug=False,
        aws={"region": "ap-northeast-1"},
        logging={"level": "WARNING", "structured": False},
        output={"format": "table", "unit": "monthly"},
    )


@pytest.fixture
def temp_config_file():
    """Create temporary config file"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        config = {
            "app_name": "awsri-test",
            "aws": {
                "profile": "test",
                "region": "us-west-2"
            },
            "output": {
                "format": "csv",
                "unit": "yearly"
            }
        }
        yaml.dump(config, f)
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    temp_path.unlink(missing_ok=True)


@pytest.fixture
def mock_boto_session():
    """Patch boto3.Session used by AWSClient"""
    with patch('awsri.providers.aws.client.boto3.Session') as mock_session:
        boto_client = MagicMock()
        mock_session.return_value.client.return_value = boto_client
        mock_session.return_value.get_credentials.return_value = MagicMock()
        yield mock_session, boto_client


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset singleton instances between tests"""
    import awsri.core.config as config_module
    config_module.settings = None
    yield
    config_module.settings = None


@pytest.fixture
def mock_env_vars():
    """Mock environment variables"""
    env_vars = {
        "AWSRI_DEBUG": "true",
        "AWSRI_AWS__REGION": "eu-west-1",
        "AWSRI_OUTPUT__FORMAT": "csv",
    }

    with patch.dict(os.environ, env_vars):
        yield env_vars


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as command-line test"
    )
