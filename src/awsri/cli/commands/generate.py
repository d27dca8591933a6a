import click

from ...core.validation import Validator
from ...services.generate import OUTPUT_FORMATS, InventoryService, format_output
from ..common import (
    PAYMENT_OPTION_HELP, build_client, duration_option, handle_errors,
    region_option, resolve_region,
)


@click.command()
@region_option
@click.option('--rds-engine', default='postgresql', show_default=True,
              help='Engine used for RDS instances that report none')
@click.option('--elasticache-engine', default='redis', show_default=True,
              help='Engine used for cache clusters that report none')
@duration_option
@click.option('--offering-type', default='Partial Upfront', show_default=True, help=PAYMENT_OPTION_HELP)
@click.option('--output', '-o', type=click.Choice(OUTPUT_FORMATS), default='command',
              show_default=True, help='Output format')
@click.pass_context
@handle_errors
def generate(ctx, region, rds_engine, elasticache_engine, duration, offering_type, output):
    """
    Generate `awsri total` arguments from the instances running in an account

    Examples:
        awsri generate --region ap-northeast-1
        awsri generate --output json --offering-type "No Upfront"
    """
    region = Validator.validate_aws_region(resolve_region(ctx, region))
    duration = Validator.validate_duration(duration)
    offering_type = Validator.validate_payment_option(offering_type)

    service = InventoryService(build_client(ctx), rds_engine=rds_engine,
                               elasticache_engine=elasticache_engine)
    items = service.inventory(region)
    click.echo(format_output(items, output, duration, offering_type))
