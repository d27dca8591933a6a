"""
Per-resource-family configuration.

RDS and ElastiCache share one query/parse/normalize flow; what differs is
captured here: catalog service code, filter field names, the reserved
offerings API and the engine names used by the catalog.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from .models import PaymentOption, PriceQuery, ReservationOffer

TERM_MATCH = "TERM_MATCH"


def term_filter(field_name: str, value: str) -> Dict[str, str]:
    return {"Type": TERM_MATCH, "Field": field_name, "Value": value}


@dataclass(frozen=True)
class ResourceFamily:
    """Everything that differs between reservable resource families"""
    name: str
    display_name: str
    service_code: str
    api_service: str
    instance_prefix: str
    engine_filter_field: str
    offerings_operation: str
    offerings_key: str
    offering_id_key: str
    instance_class_key: str
    instance_class_param: str
    engine_names: Mapping[str, str] = field(default_factory=dict)
    supports_multi_az: bool = False

    def normalize_instance_class(self, instance_class: str) -> str:
        """Add the family prefix (db., cache.) when missing"""
        if instance_class.startswith(self.instance_prefix):
            return instance_class
        return self.instance_prefix + instance_class

    def strip_instance_class(self, instance_class: str) -> str:
        if instance_class.startswith(self.instance_prefix):
            return instance_class[len(self.instance_prefix):]
        return instance_class

    def engine_name(self, product_description: str) -> str:
        """Catalog engine name for a product description (postgresql -> PostgreSQL)"""
        key = product_description.lower()
        if key in self.engine_names:
            return self.engine_names[key]
        for prefix, engine in self.engine_names.items():
            if key.startswith(prefix):
                return engine
        return product_description

    def on_demand_filters(self, query: PriceQuery) -> List[Dict[str, str]]:
        filters = [
            term_filter("instanceType", self.normalize_instance_class(query.instance_class)),
            term_filter(self.engine_filter_field, self.engine_name(query.product_description)),
            term_filter("regionCode", query.region),
        ]
        if self.supports_multi_az:
            filters.append(term_filter("deploymentOption", "Multi-AZ" if query.multi_az else "Single-AZ"))
        return filters

    def offering_params(self, query: PriceQuery, duration_years: int,
                        payment_option: PaymentOption) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "Duration": str(duration_years),
            "OfferingType": payment_option.value,
            self.instance_class_param: self.normalize_instance_class(query.instance_class),
            "ProductDescription": query.product_description,
        }
        if self.supports_multi_az:
            params["MultiAZ"] = query.multi_az
        return params

    def parse_offerings(self, response_items: List[Mapping[str, Any]]) -> List[ReservationOffer]:
        return [
            ReservationOffer.from_api(item, self.offering_id_key, self.instance_class_key)
            for item in response_items
        ]


RDS = ResourceFamily(
    name="rds",
    display_name="RDS",
    service_code="AmazonRDS",
    api_service="rds",
    instance_prefix="db.",
    engine_filter_field="databaseEngine",
    offerings_operation="describe_reserved_db_instances_offerings",
    offerings_key="ReservedDBInstancesOfferings",
    offering_id_key="ReservedDBInstancesOfferingId",
    instance_class_key="DBInstanceClass",
    instance_class_param="DBInstanceClass",
    engine_names=MappingProxyType({
        "mysql": "MySQL",
        "postgresql": "PostgreSQL",
        "mariadb": "MariaDB",
        "aurora-mysql": "Aurora MySQL",
        "aurora-postgresql": "Aurora PostgreSQL",
        "aurora": "Aurora MySQL",
        "oracle": "Oracle",
        "sqlserver": "SQL Server",
        "db2": "Db2",
    }),
    supports_multi_az=True,
)

ELASTICACHE = ResourceFamily(
    name="elasticache",
    display_name="ElastiCache",
    service_code="AmazonElastiCache",
    api_service="elasticache",
    instance_prefix="cache.",
    engine_filter_field="cacheEngine",
    offerings_operation="describe_reserved_cache_nodes_offerings",
    offerings_key="ReservedCacheNodesOfferings",
    offering_id_key="ReservedCacheNodesOfferingId",
    instance_class_key="CacheNodeType",
    instance_class_param="CacheNodeType",
    engine_names=MappingProxyType({
        "redis": "Redis",
        "memcached": "Memcached",
        "valkey": "Valkey",
    }),
)

# DescribeDBInstances reports engines that differ from reservation product descriptions
RDS_ENGINE_TO_PRODUCT_DESCRIPTION: Mapping[str, str] = MappingProxyType({
    "postgres": "postgresql",
    "aurora-postgresql": "aurora-postgresql",
    "aurora-mysql": "aurora-mysql",
})


def product_description_for_engine(family: ResourceFamily, engine: str) -> str:
    """Reservation product description for an engine reported by describe calls"""
    if family is RDS:
        return RDS_ENGINE_TO_PRODUCT_DESCRIPTION.get(engine, engine)
    return engine


# Commitment plan catalog settings
FARGATE_SERVICE_CODE = "AmazonECS"
FARGATE_CPU_FILTER = ("cputype", "perCPU")
FARGATE_MEMORY_FILTER = ("memorytype", "perGB")
EC2_SERVICE_CODE = "AmazonEC2"
EC2_ON_DEMAND_ATTRIBUTES = (
    ("operatingSystem", "Linux"),
    ("tenancy", "Shared"),
    ("preInstalledSw", "NA"),
    ("capacitystatus", "Used"),
)
