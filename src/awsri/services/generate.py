"""Generate ``awsri total`` arguments from the instances running in an account"""

import json
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..core.exceptions import InvalidParameterError
from ..pricing.families import ELASTICACHE, RDS, ResourceFamily, product_description_for_engine
from ..pricing.models import PaymentOption
from ..providers.aws.client import AWSClient

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('command', 'args', 'json')


@dataclass(frozen=True)
class InventoryItem:
    """Running instances sharing a class, engine and deployment"""
    family: ResourceFamily
    instance_class: str
    count: int
    description: str
    multi_az: bool = False

    @property
    def short_class(self) -> str:
        return self.family.strip_instance_class(self.instance_class)

    def to_arg(self) -> str:
        if self.family is RDS:
            return (f"--rds={self.short_class}:{self.count}:{self.description}:"
                    f"{str(self.multi_az).lower()}")
        return f"--elasticache={self.short_class}:{self.count}:{self.description}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'service_type': self.family.name,
            'instance_type': self.short_class,
            'count': self.count,
            'description': self.description,
        }
        if self.multi_az:
            data['multi_az'] = True
        return data


def _count(family: ResourceFamily, keys: List[Tuple[str, str, bool]]) -> List[InventoryItem]:
    counts: Dict[Tuple[str, str, bool], int] = OrderedDict()
    for key in sorted(keys):
        counts[key] = counts.get(key, 0) + 1
    return [
        InventoryItem(family=family, instance_class=instance_class, count=count,
                      description=description, multi_az=multi_az)
        for (instance_class, description, multi_az), count in counts.items()
    ]


class InventoryService:
    """Counts running DB instances and cache clusters per class"""

    def __init__(self, client: AWSClient, rds_engine: str = "postgresql",
                 elasticache_engine: str = "redis"):
        self.client = client
        self.rds_engine = rds_engine
        self.elasticache_engine = elasticache_engine

    def rds_inventory(self, region: str) -> List[InventoryItem]:
        keys = []
        for instance in self.client.describe_db_instances(region):
            engine = instance.get('Engine') or self.rds_engine
            keys.append((
                instance['DBInstanceClass'],
                product_description_for_engine(RDS, engine),
                bool(instance.get('MultiAZ', False)),
            ))
        return _count(RDS, keys)

    def elasticache_inventory(self, region: str) -> List[InventoryItem]:
        keys = []
        for cluster in self.client.describe_cache_clusters(region):
            engine = cluster.get('Engine') or self.elasticache_engine
            keys.append((
                cluster['CacheNodeType'],
                product_description_for_engine(ELASTICACHE, engine),
                False,
            ))
        return _count(ELASTICACHE, keys)

    def inventory(self, region: str) -> List[InventoryItem]:
        items = self.rds_inventory(region) + self.elasticache_inventory(region)
        logger.info(f"Found {sum(item.count for item in items)} instances in {region}",
                    extra={'region': region})
        return items


def format_args(items: List[InventoryItem]) -> str:
    rds = [item.to_arg() for item in items if item.family is RDS]
    elasticache = [item.to_arg() for item in items if item.family is ELASTICACHE]
    return ' '.join(rds + elasticache)


def format_command(items: List[InventoryItem], duration_years: int,
                   offering_type: PaymentOption) -> str:
    parts = ['awsri total']
    args = format_args(items)
    if args:
        parts.append(args)
    parts.append(f'--duration={duration_years} --offering-type="{offering_type.value}"')
    return ' '.join(parts)


def format_json(items: List[InventoryItem], duration_years: int,
                offering_type: PaymentOption) -> str:
    data = {
        'instances': [item.to_dict() for item in items],
        'duration': duration_years,
        'offering_type': offering_type.value,
    }
    return json.dumps(data, indent=2)


def format_output(items: List[InventoryItem], output: str, duration_years: int,
                  offering_type: PaymentOption) -> str:
    if output == 'command':
        return format_command(items, duration_years, offering_type)
    if output == 'args':
        return format_args(items)
    if output == 'json':
        return format_json(items, duration_years, offering_type)
    raise InvalidParameterError(
        f"Unsupported output format: {output} (must be one of: {', '.join(OUTPUT_FORMATS)})"
    )
