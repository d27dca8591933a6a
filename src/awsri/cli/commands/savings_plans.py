import click

from ...core.validation import EC2PurchaseRequest, FargatePurchaseRequest, parse_request
from ...reporting.table import render_purchase_csv, render_purchase_table
from ...services.savings_plans import CommitmentPlanService
from ..common import (
    PAYMENT_OPTION_HELP, build_client, duration_option, handle_errors,
    no_header_option, region_option, resolve_no_header, resolve_region,
)


def purchase_format_option(func):
    return click.option('--format', '-f', 'output_format', type=click.Choice(['csv', 'table']),
                        default='csv', show_default=True, help='Output format')(func)


def _print_purchase(ctx, result, title, output_format, no_header):
    no_header = resolve_no_header(ctx, no_header)
    if output_format == 'table':
        render_purchase_table(ctx.obj['console'], result, title, show_header=not no_header)
    else:
        click.echo(render_purchase_csv(result, no_header), nl=False)


@click.group(name='compute-savings-plans')
def compute_savings_plans():
    """Compute Savings Plans purchase calculation"""
    pass


@compute_savings_plans.command()
@click.option('--memory', '-m', type=float, required=True, help='Memory per task in MB')
@click.option('--vcpu', '-c', type=float, required=True, help='CPU units per task (1024 = 1 vCPU)')
@click.option('--task-count', '-n', type=int, required=True, help='Number of tasks')
@region_option
@duration_option
@click.option('--architecture', '-a', type=click.Choice(['linux', 'arm']), default='linux',
              show_default=True, help='Task CPU architecture')
@click.option('--payment-option', default='No Upfront', show_default=True, help=PAYMENT_OPTION_HELP)
@purchase_format_option
@no_header_option
@click.pass_context
@handle_errors
def fargate(ctx, memory, vcpu, task_count, region, duration, architecture, payment_option,
            output_format, no_header):
    """
    Savings Plan purchase for always-on Fargate tasks

    Examples:
        awsri compute-savings-plans fargate --memory 2048 --vcpu 1024 --task-count 10
        awsri compute-savings-plans fargate -m 4096 -c 2048 -n 4 --architecture arm --duration 3
    """
    request = parse_request(
        FargatePurchaseRequest,
        region=resolve_region(ctx, region),
        duration=duration,
        payment_option=payment_option,
        memory=memory,
        vcpu=vcpu,
        task_count=task_count,
        architecture=architecture,
    )

    service = CommitmentPlanService(build_client(ctx))
    result = service.fargate_purchase(
        region=request.region,
        memory_mb=request.memory,
        cpu_units=request.vcpu,
        task_count=request.task_count,
        duration_years=request.duration,
        architecture=request.architecture,
        payment_option=request.payment_option,
    )
    title = f"Fargate Savings Plan ({request.region}, {request.duration}y, {request.payment_option.value})"
    _print_purchase(ctx, result, title, output_format, no_header)


@compute_savings_plans.command()
@click.option('--instance-type', '-t', required=True, help='EC2 instance type (m5.large)')
@click.option('--count', '-n', type=int, required=True, help='Number of instances')
@region_option
@duration_option
@click.option('--payment-option', default='No Upfront', show_default=True, help=PAYMENT_OPTION_HELP)
@purchase_format_option
@no_header_option
@click.pass_context
@handle_errors
def ec2(ctx, instance_type, count, region, duration, payment_option, output_format, no_header):
    """
    Savings Plan purchase for always-on Linux EC2 instances

    Examples:
        awsri compute-savings-plans ec2 --instance-type m5.large --count 3
        awsri compute-savings-plans ec2 -t c6g.xlarge -n 2 --duration 3 --no-header
    """
    request = parse_request(
        EC2PurchaseRequest,
        region=resolve_region(ctx, region),
        duration=duration,
        payment_option=payment_option,
        instance_type=instance_type,
        count=count,
    )

    service = CommitmentPlanService(build_client(ctx))
    result = service.ec2_purchase(
        region=request.region,
        instance_type=request.instance_type,
        count=request.count,
        duration_years=request.duration,
        payment_option=request.payment_option,
    )
    title = f"EC2 Savings Plan ({request.instance_type} x{request.count}, {request.region}, {request.duration}y)"
    _print_purchase(ctx, result, title, output_format, no_header)
