"""Helpers shared by the command modules"""

import functools
import logging

import click
from rich.console import Console
from rich.markup import escape

from ..core.exceptions import AwsriError
from ..core.validation import ReservationRequest, parse_request
from ..pricing.families import ResourceFamily
from ..pricing.models import PriceQuery
from ..providers.aws.client import AWSClient
from ..reporting.table import render_comparison_csv, render_comparison_table
from ..services.reservations import ReservationPricingService

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)

PAYMENT_OPTION_HELP = "Payment option (No Upfront, Partial Upfront, All Upfront)"


def region_option(func):
    return click.option('--region', '-r', default=None,
                        help='AWS region (defaults to the configured region)')(func)


def duration_option(func):
    return click.option('--duration', '-d', type=click.Choice(['1', '3']), default='1',
                        show_default=True, help='Duration in years')(func)


def no_header_option(func):
    return click.option('--no-header', is_flag=True,
                        help='Do not print the header line')(func)


def build_client(ctx: click.Context) -> AWSClient:
    settings = ctx.obj['settings']
    return AWSClient.from_settings(
        profile=ctx.obj.get('profile'),
        region=settings.aws.region,
        pricing_region=settings.aws.pricing_region,
        max_results=settings.aws.max_results,
    )


def resolve_region(ctx: click.Context, region) -> str:
    return region or ctx.obj['settings'].aws.region


def resolve_no_header(ctx: click.Context, no_header: bool) -> bool:
    return no_header or ctx.obj['settings'].output.no_header


def handle_errors(func):
    """Report AwsriError as a red message and exit with status 1"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except AwsriError as e:
            logger.debug("Command failed", exc_info=True)
            error_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
            ctx.exit(1)
    return wrapper


def format_option(func):
    return click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'csv']),
                        default=None, help='Output format (defaults to the configured format)')(func)


def unit_option(func):
    return click.option('--unit', '-u', type=click.Choice(['monthly', 'yearly']), default=None,
                        help='Cost period (defaults to the configured unit)')(func)


def resolve_format(ctx: click.Context, output_format) -> str:
    return output_format or ctx.obj['settings'].output.format


def run_comparison(ctx: click.Context, family: ResourceFamily, instance_class: str,
                   product_description: str, region, multi_az: bool, unit,
                   output_format, no_header: bool) -> None:
    """Price, compare and print the reservation offerings of one resource"""
    settings = ctx.obj['settings']
    request = parse_request(
        ReservationRequest,
        instance_class=instance_class,
        product_description=product_description,
        region=resolve_region(ctx, region),
        multi_az=multi_az,
        unit=unit or settings.output.unit,
    )
    query = PriceQuery(
        family=family.name,
        instance_class=family.normalize_instance_class(request.instance_class),
        product_description=request.product_description,
        region=request.region,
        multi_az=request.multi_az,
    )

    service = ReservationPricingService(build_client(ctx), family)
    report = service.compare(query, request.unit)

    if resolve_format(ctx, output_format) == 'csv':
        click.echo(render_comparison_csv(report, resolve_no_header(ctx, no_header)), nl=False)
    else:
        render_comparison_table(ctx.obj['console'], report,
                                show_header=not resolve_no_header(ctx, no_header))
