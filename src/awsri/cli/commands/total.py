import click

from ...core.validation import TotalRequest, parse_request
from ...reporting.table import render_total_csv, render_total_table
from ...services.total import TotalCostService, parse_instance_specs
from ..common import (
    PAYMENT_OPTION_HELP, build_client, duration_option, format_option,
    handle_errors, no_header_option, region_option, resolve_format,
    resolve_no_header, resolve_region,
)


@click.command()
@click.option('--rds', multiple=True,
              help='RDS instances as instance-type:count:product-description:multi-az (repeatable)')
@click.option('--elasticache', multiple=True,
              help='ElastiCache nodes as node-type:count:product-description (repeatable)')
@region_option
@duration_option
@click.option('--offering-type', default='Partial Upfront', show_default=True, help=PAYMENT_OPTION_HELP)
@format_option
@no_header_option
@click.pass_context
@handle_errors
def total(ctx, rds, elasticache, region, duration, offering_type, output_format, no_header):
    """
    Total reservation cost of several RDS instances and ElastiCache nodes

    Examples:
        awsri total --rds m5.large:2:postgresql:false --elasticache m5.large:3:redis
        awsri total --rds db.r6g.large:1:mysql:true --duration 3 --offering-type "All Upfront"
    """
    request = parse_request(
        TotalRequest,
        region=resolve_region(ctx, region),
        rds=list(rds),
        elasticache=list(elasticache),
        duration=duration,
        offering_type=offering_type,
    )
    specs = parse_instance_specs(request.rds, request.elasticache)

    service = TotalCostService(build_client(ctx))
    report = service.calculate(specs, request.region, request.duration, request.offering_type)

    no_header = resolve_no_header(ctx, no_header)
    if resolve_format(ctx, output_format) == 'csv':
        click.echo(render_total_csv(report, no_header), nl=False)
    else:
        render_total_table(ctx.obj['console'], report, show_header=not no_header)
