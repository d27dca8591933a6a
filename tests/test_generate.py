"""Tests for inventory based argument generation"""

import json

import pytest

from awsri.core.exceptions import InvalidParameterError
from awsri.pricing.families import ELASTICACHE, RDS
from awsri.pricing.models import PaymentOption
from awsri.services.generate import (
    InventoryService, format_args, format_command, format_json, format_output,
)


@pytest.fixture
def inventory_client(mock_client):
    mock_client.describe_db_instances.return_value = [
        {"DBInstanceIdentifier": "a", "DBInstanceClass": "db.m5.large", "Engine": "postgres", "MultiAZ": False},
        {"DBInstanceIdentifier": "b", "DBInstanceClass": "db.m5.large", "Engine": "postgres", "MultiAZ": False},
    ]
    mock_client.describe_cache_clusters.return_value = [
        {"CacheClusterId": "c1", "CacheNodeType": "cache.m5.large", "Engine": "redis"},
        {"CacheClusterId": "c2", "CacheNodeType": "cache.m5.large", "Engine": "redis"},
        {"CacheClusterId": "c3", "CacheNodeType": "cache.m5.large", "Engine": "redis"},
    ]
    return mock_client


class TestInventoryService:
    """Test InventoryService"""

    def test_rds_engine_mapped(self, inventory_client):
        items = InventoryService(inventory_client).rds_inventory("ap-northeast-1")
        assert len(items) == 1
        assert items[0].family is RDS
        assert items[0].description == "postgresql"
        assert items[0].count == 2
        inventory_client.describe_db_instances.assert_called_once_with("ap-northeast-1")

    def test_grouped_by_deployment(self, mock_client):
        mock_client.describe_db_instances.return_value = [
            {"DBInstanceClass": "db.r6g.large", "Engine": "mysql", "MultiAZ": True},
            {"DBInstanceClass": "db.m5.large", "Engine": "mysql", "MultiAZ": False},
            {"DBInstanceClass": "db.r6g.large", "Engine": "mysql", "MultiAZ": False},
        ]
        items = InventoryService(mock_client).rds_inventory("us-east-1")
        assert [(i.short_class, i.multi_az, i.count) for i in items] == [
            ("m5.large", False, 1),
            ("r6g.large", False, 1),
            ("r6g.large", True, 1),
        ]

    def test_missing_engine_uses_default(self, mock_client):
        mock_client.describe_cache_clusters.return_value = [{"CacheNodeType": "cache.t3.micro"}]
        items = InventoryService(mock_client, elasticache_engine="valkey").elasticache_inventory("us-east-1")
        assert items[0].family is ELASTICACHE
        assert items[0].description == "valkey"

    def test_empty_account(self, mock_client):
        assert InventoryService(mock_client).inventory("us-east-1") == []


class TestFormatting:
    """Test the generated output formats"""

    def test_command(self, inventory_client):
        items = InventoryService(inventory_client).inventory("ap-northeast-1")
        assert format_command(items, 1, PaymentOption.PARTIAL_UPFRONT) == (
            'awsri total --rds=m5.large:2:postgresql:false --elasticache=m5.large:3:redis '
            '--duration=1 --offering-type="Partial Upfront"'
        )

    def test_args(self, inventory_client):
        items = InventoryService(inventory_client).inventory("ap-northeast-1")
        assert format_args(items) == "--rds=m5.large:2:postgresql:false --elasticache=m5.large:3:redis"

    def test_json(self, inventory_client):
        items = InventoryService(inventory_client).inventory("ap-northeast-1")
        data = json.loads(format_json(items, 3, PaymentOption.ALL_UPFRONT))
        assert data["duration"] == 3
        assert data["offering_type"] == "All Upfront"
        assert data["instances"][0] == {
            "service_type": "rds",
            "instance_type": "m5.large",
            "count": 2,
            "description": "postgresql",
        }
        assert data["instances"][1]["service_type"] == "elasticache"

    def test_json_multi_az_included_when_set(self, mock_client):
        mock_client.describe_db_instances.return_value = [
            {"DBInstanceClass": "db.m5.large", "Engine": "mysql", "MultiAZ": True},
        ]
        items = InventoryService(mock_client).inventory("us-east-1")
        assert json.loads(format_json(items, 1, PaymentOption.NO_UPFRONT))["instances"][0]["multi_az"] is True

    def test_command_without_instances(self):
        assert format_command([], 1, PaymentOption.NO_UPFRONT) == (
            'awsri total --duration=1 --offering-type="No Upfront"'
        )

    def test_unknown_output(self):
        with pytest.raises(InvalidParameterError):
            format_output([], "yaml", 1, PaymentOption.NO_UPFRONT)
