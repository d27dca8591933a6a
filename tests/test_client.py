"""Tests for the AWS client"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, ProfileNotFound

from awsri.core.exceptions import AWSError, ConfigurationError
from awsri.pricing.families import ELASTICACHE, RDS
from awsri.providers.aws import PRICING_REGION, AWSClient


@pytest.fixture
def client():
    return AWSClient.from_settings(profile=None, region="ap-northeast-1")


class TestAuthentication:
    """Test session creation"""

    def test_profile_session(self, mock_boto_session):
        mock_session, _ = mock_boto_session
        client = AWSClient.from_settings(profile="prod", region="ap-northeast-1")
        assert client.authenticate()
        mock_session.assert_called_once_with(profile_name="prod")
        assert client.is_authenticated
        assert client.get_provider_info()["profile"] == "prod"

    def test_unknown_profile(self, mock_boto_session):
        mock_session, _ = mock_boto_session
        mock_session.side_effect = ProfileNotFound(profile="missing")
        with pytest.raises(ConfigurationError):
            AWSClient.from_settings(profile="missing", region="ap-northeast-1").authenticate()

    def test_no_credentials(self, mock_boto_session, client):
        mock_session, _ = mock_boto_session
        mock_session.return_value.get_credentials.return_value = None
        with pytest.raises(ConfigurationError):
            client.authenticate()


class TestClients:
    """Test client routing"""

    def test_pricing_calls_use_us_east_1(self, mock_boto_session, client):
        mock_session, boto_client = mock_boto_session
        boto_client.get_products.return_value = {"PriceList": ["{}"]}

        assert client.get_products("AmazonRDS", []) == ["{}"]

        mock_session.return_value.client.assert_called_once_with("pricing", region_name=PRICING_REGION)
        kwargs = boto_client.get_products.call_args[1]
        assert kwargs["ServiceCode"] == "AmazonRDS"
        assert kwargs["FormatVersion"] == "aws_v1"
        assert kwargs["MaxResults"] == 100

    def test_clients_cached(self, mock_boto_session, client):
        mock_session, _ = mock_boto_session
        client.get_client("rds", "eu-west-1")
        client.get_client("rds", "eu-west-1")
        assert mock_session.return_value.client.call_count == 1

    def test_session_created_once(self, mock_boto_session, client):
        mock_session, _ = mock_boto_session
        assert not client.is_authenticated
        client.get_client("rds", "eu-west-1")
        client.get_client("pricing", PRICING_REGION)
        assert client.is_authenticated
        mock_session.assert_called_once_with()

    def test_reserved_offerings_in_query_region(self, mock_boto_session, client):
        mock_session, boto_client = mock_boto_session
        boto_client.describe_reserved_cache_nodes_offerings.return_value = {
            "ReservedCacheNodesOfferings": [{"ReservedCacheNodesOfferingId": "x"}]
        }

        offers = client.describe_reserved_offerings(ELASTICACHE, "eu-west-1", {"Duration": "1"})

        assert offers == [{"ReservedCacheNodesOfferingId": "x"}]
        mock_session.return_value.client.assert_called_once_with("elasticache", region_name="eu-west-1")
        boto_client.describe_reserved_cache_nodes_offerings.assert_called_once_with(Duration="1")

    def test_savings_plan_rates(self, mock_boto_session, client):
        mock_session, boto_client = mock_boto_session
        boto_client.describe_savings_plans_offering_rates.return_value = {"searchResults": [{"rate": "0.1"}]}

        assert client.describe_savings_plans_offering_rates(products=["EC2"]) == [{"rate": "0.1"}]
        mock_session.return_value.client.assert_called_once_with("savingsplans", region_name=PRICING_REGION)

    def test_paginated_inventory(self, mock_boto_session, client):
        _, boto_client = mock_boto_session
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"DBInstances": [{"DBInstanceIdentifier": "a"}]},
            {"DBInstances": [{"DBInstanceIdentifier": "b"}]},
        ]
        boto_client.get_paginator.return_value = paginator

        instances = client.describe_db_instances("ap-northeast-1")

        assert [i["DBInstanceIdentifier"] for i in instances] == ["a", "b"]
        boto_client.get_paginator.assert_called_once_with("describe_db_instances")


class TestErrors:
    """Test error translation"""

    def test_client_error(self, mock_boto_session, client):
        _, boto_client = mock_boto_session
        boto_client.describe_reserved_db_instances_offerings.side_effect = ClientError(
            {"Error": {"Code": "Throttling", "Message": "Rate exceeded"}},
            "DescribeReservedDBInstancesOfferings",
        )
        with pytest.raises(AWSError) as exc_info:
            client.describe_reserved_offerings(RDS, "ap-northeast-1", {})
        assert "Throttling" in str(exc_info.value)

    def test_connection_error(self, mock_boto_session, client):
        _, boto_client = mock_boto_session
        boto_client.get_products.side_effect = EndpointConnectionError(endpoint_url="https://pricing")
        with pytest.raises(AWSError):
            client.get_products("AmazonRDS", [])
