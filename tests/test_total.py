"""Tests for the total reservation cost service"""

import pytest

from awsri.core.exceptions import InvalidParameterError, NoPricingDataError
from awsri.pricing.families import ELASTICACHE, RDS
from awsri.pricing.models import PaymentOption
from awsri.services.total import (
    InstanceCost, TotalCostService, TotalReport, parse_elasticache_spec,
    parse_instance_specs, parse_rds_spec,
)

from conftest import THREE_YEARS, make_cache_offering, make_rds_offering


class TestParseSpecs:
    """Test instance spec parsing"""

    def test_rds_spec(self):
        spec = parse_rds_spec("m5.large:2:postgresql:true")
        assert spec.family is RDS
        assert spec.instance_class == "db.m5.large"
        assert spec.count == 2
        assert spec.description == "postgresql"
        assert spec.multi_az is True

    def test_rds_prefix_kept(self):
        assert parse_rds_spec("db.r6g.xlarge:1:mysql:false").instance_class == "db.r6g.xlarge"

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("T", True), ("1", True),
        ("false", False), ("F", False), ("0", False),
    ])
    def test_rds_multi_az_values(self, value, expected):
        assert parse_rds_spec(f"m5.large:1:mysql:{value}").multi_az is expected

    def test_elasticache_spec(self):
        spec = parse_elasticache_spec("r6g.large:3:redis")
        assert spec.family is ELASTICACHE
        assert spec.instance_class == "cache.r6g.large"
        assert spec.count == 3
        assert spec.multi_az is False

    @pytest.mark.parametrize("spec", [
        "m5.large:2:postgresql",
        "m5.large:two:postgresql:false",
        "m5.large:0:postgresql:false",
        "m5.large:-1:postgresql:false",
        "m5.large:2:postgresql:maybe",
    ])
    def test_invalid_rds_spec(self, spec):
        with pytest.raises(InvalidParameterError):
            parse_rds_spec(spec)

    @pytest.mark.parametrize("spec", ["m5.large:2", "m5.large:2:redis:true", "m5.large:x:redis"])
    def test_invalid_elasticache_spec(self, spec):
        with pytest.raises(InvalidParameterError):
            parse_elasticache_spec(spec)

    def test_rds_before_elasticache(self):
        specs = parse_instance_specs(rds=["m5.large:1:mysql:false"], elasticache=["m5.large:1:redis"])
        assert [spec.family for spec in specs] == [RDS, ELASTICACHE]


def make_cost(family, instance_class, count, upfront, monthly, effective):
    return InstanceCost(family=family, instance_class=instance_class, count=count,
                        upfront=upfront, monthly=monthly, effective_monthly=effective)


class TestTotalReport:
    """Test TotalReport totals and grouping"""

    @pytest.fixture
    def report(self):
        return TotalReport(
            duration_years=1,
            offering_type=PaymentOption.PARTIAL_UPFRONT,
            instances=[
                make_cost(RDS, "db.m5.large", 2, 1000, 60, 143.3),
                make_cost(ELASTICACHE, "cache.m5.large", 1, 300, 21.6, 46.6),
                make_cost(RDS, "db.m5.large", 1, 500, 30, 71.7),
            ],
        )

    def test_totals(self, report):
        assert report.total_upfront == pytest.approx(1800)
        assert report.total_monthly == pytest.approx(111.6)
        assert report.total_effective_monthly == pytest.approx(261.6)

    def test_grouped(self, report):
        grouped = report.grouped()
        assert [(item.family.name, item.instance_class, item.count) for item in grouped] == [
            ("rds", "db.m5.large", 3),
            ("elasticache", "cache.m5.large", 1),
        ]
        assert grouped[0].upfront == pytest.approx(1500)

    def test_grouping_leaves_instances_untouched(self, report):
        report.grouped()
        assert report.instances[0].count == 2


class TestTotalCostService:
    """Test TotalCostService.calculate"""

    def test_calculate(self, mock_client):
        def offerings(family, region, params):
            if family is RDS:
                return [make_rds_offering(description="postgresql", multi_az=False,
                                          fixed=600.0, recurring=0.05,
                                          instance_class=params["DBInstanceClass"])]
            return [make_cache_offering(fixed=360.0, recurring=0.03)]

        mock_client.describe_reserved_offerings.side_effect = offerings
        specs = parse_instance_specs(rds=["m5.large:2:postgresql:false"],
                                     elasticache=["m5.large:3:redis"])

        report = TotalCostService(mock_client).calculate(
            specs, "ap-northeast-1", 1, PaymentOption.PARTIAL_UPFRONT
        )

        rds, cache = report.instances
        assert rds.upfront == pytest.approx(1200)
        assert rds.monthly == pytest.approx(2 * 0.05 * 720)
        assert rds.effective_monthly == pytest.approx(2 * (600 / 12 + 0.05 * 720))
        assert cache.upfront == pytest.approx(1080)
        assert cache.effective_monthly == pytest.approx(3 * (30 + 0.03 * 720))
        assert report.total_upfront == pytest.approx(2280)
        mock_client.get_products.assert_not_called()

    def test_three_year_amortization(self, mock_client):
        mock_client.describe_reserved_offerings.return_value = [
            make_rds_offering(duration=THREE_YEARS, offering_type="All Upfront",
                              fixed=3600.0, recurring=0.0, multi_az=False)
        ]
        specs = parse_instance_specs(rds=["t4g.large:1:mysql:false"])
        report = TotalCostService(mock_client).calculate(specs, "ap-northeast-1", 3, PaymentOption.ALL_UPFRONT)
        assert report.instances[0].effective_monthly == pytest.approx(100)

    def test_missing_offering_aborts(self, mock_client):
        specs = parse_instance_specs(rds=["m5.large:1:mysql:false"])
        with pytest.raises(NoPricingDataError) as exc_info:
            TotalCostService(mock_client).calculate(specs, "ap-northeast-1", 1, PaymentOption.NO_UPFRONT)
        assert "db.m5.large" in str(exc_info.value)

    def test_no_specs(self, mock_client):
        with pytest.raises(InvalidParameterError):
            TotalCostService(mock_client).calculate([], "ap-northeast-1", 1, PaymentOption.NO_UPFRONT)
