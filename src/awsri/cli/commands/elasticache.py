import click

from ...pricing.families import ELASTICACHE
from ..common import (
    format_option, handle_errors, no_header_option, region_option,
    run_comparison, unit_option,
)


@click.command()
@click.option('--cache-node-type', '-c', required=True, help='Cache node type (cache.r6g.large)')
@click.option('--product-description', '-p', required=True, help='Product description (redis, memcached, valkey)')
@region_option
@unit_option
@format_option
@no_header_option
@click.pass_context
@handle_errors
def elasticache(ctx, cache_node_type, product_description, region, unit, output_format, no_header):
    """
    Compare ElastiCache reserved node offerings with on-demand pricing

    Examples:
        awsri elasticache --cache-node-type cache.r6g.large --product-description redis
        awsri elasticache -c cache.m7g.large -p valkey --unit yearly
    """
    run_comparison(ctx, ELASTICACHE, cache_node_type, product_description, region,
                   False, unit, output_format, no_header)
