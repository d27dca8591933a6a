import click

from ...pricing.families import RDS
from ..common import (
    format_option, handle_errors, no_header_option, region_option,
    run_comparison, unit_option,
)


@click.command()
@click.option('--db-instance-class', '-c', required=True, help='DB instance class (db.t4g.large)')
@click.option('--product-description', '-p', required=True, help='Product description (mysql, postgresql, ...)')
@click.option('--multi-az', is_flag=True, help='Price Multi-AZ deployments')
@region_option
@unit_option
@format_option
@no_header_option
@click.pass_context
@handle_errors
def rds(ctx, db_instance_class, product_description, multi_az, region, unit, output_format, no_header):
    """
    Compare RDS reserved instance offerings with on-demand pricing

    Examples:
        awsri rds --db-instance-class db.t4g.large --product-description mysql --multi-az
        awsri rds -c db.r6g.xlarge -p postgresql --unit yearly --format csv
    """
    run_comparison(ctx, RDS, db_instance_class, product_description, region,
                   multi_az, unit, output_format, no_header)
