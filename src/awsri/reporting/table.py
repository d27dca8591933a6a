"""Table and CSV rendering of comparison, purchase and total results"""

import csv
import io
from typing import List, Sequence

from rich.console import Console
from rich.table import Table

from ..pricing.models import CostUnit
from ..pricing.purchase import PurchaseResult
from ..services.reservations import ComparisonReport, ComparisonRow
from ..services.total import TotalReport

NOT_AVAILABLE = "N/A"
ON_DEMAND = "On-Demand"


def format_money(value: float) -> str:
    return f"{value:.0f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}"


def format_hourly(value: float) -> str:
    """Hourly commitments are printed unrounded, less float noise past 10 places"""
    return repr(round(float(value), 10))


def format_duration(years: int) -> str:
    return f"{years}y"


def _period_label(unit: CostUnit) -> str:
    return "Yearly" if unit is CostUnit.YEARLY else "Monthly"


def _to_csv(header: Sequence[str], rows: List[Sequence[str]], no_header: bool = False) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    if not no_header:
        writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


# -- reservation comparison ---------------------------------------------------

def comparison_headings(unit: CostUnit) -> List[str]:
    period = _period_label(unit)
    return [
        "Duration",
        "Offering Type",
        "Upfront (USD)",
        f"{period} (USD)",
        f"Effective {period} (USD)",
        "Savings/Year" if unit is CostUnit.YEARLY else "Savings/Month",
    ]


def _on_demand_cells(report: ComparisonReport, duration: int) -> List[str]:
    cost = format_money(report.on_demand_cost)
    return [format_duration(duration), ON_DEMAND, "0", cost, cost, "-"]


def _offer_cells(row: ComparisonRow) -> List[str]:
    cells = [format_duration(row.duration_years), row.payment_option.value]
    if not row.available:
        return cells + [NOT_AVAILABLE] * 4
    cost = row.cost
    return cells + [
        format_money(cost.upfront),
        format_money(cost.recurring),
        format_money(cost.effective),
        f"{format_money(cost.savings)} ({format_percent(cost.savings_percent)}%)",
    ]


def comparison_blocks(report: ComparisonReport) -> List[List[List[str]]]:
    """Rows grouped per duration, each block led by its on-demand row"""
    blocks: List[List[List[str]]] = []
    current: List[List[str]] = []
    for row in report.rows:
        if row.separator:
            blocks.append(current)
            current = []
            continue
        if not current:
            current.append(_on_demand_cells(report, row.duration_years))
        current.append(_offer_cells(row))
    if current:
        blocks.append(current)
    return blocks


def render_comparison_table(console: Console, report: ComparisonReport,
                            show_header: bool = True) -> None:
    table = Table(
        title=f"{report.family.display_name} {report.family.normalize_instance_class(report.query.instance_class)} "
              f"({report.query.product_description}, {report.query.region})",
        show_header=show_header,
        header_style="bold cyan",
    )
    for index, heading in enumerate(comparison_headings(report.unit)):
        table.add_column(heading, justify="left" if index < 2 else "right")

    blocks = comparison_blocks(report)
    for index, block in enumerate(blocks):
        for cells in block:
            table.add_row(*cells)
        if index < len(blocks) - 1:
            table.add_section()

    console.print(table)


def render_comparison_csv(report: ComparisonReport, no_header: bool = False) -> str:
    rows = [cells for block in comparison_blocks(report) for cells in block]
    return _to_csv(comparison_headings(report.unit), rows, no_header)


# -- savings plan purchase ----------------------------------------------------

PURCHASE_HEADINGS = [
    "Hourly Commitment",
    "Purchase Amount (USD)",
    "Current Cost (USD/Month)",
    "Cost After Purchase (USD/Month)",
    "Savings (USD/Month)",
    "Savings Rate (%)",
]


def purchase_cells(result: PurchaseResult) -> List[str]:
    return [
        format_hourly(result.hourly_commitment),
        format_money(result.purchase_amount),
        format_money(result.monthly_on_demand_cost),
        format_money(result.monthly_commitment_cost),
        format_money(result.savings),
        format_percent(result.savings_percent),
    ]


def render_purchase_csv(result: PurchaseResult, no_header: bool = False) -> str:
    return _to_csv(PURCHASE_HEADINGS, [purchase_cells(result)], no_header)


def render_purchase_table(console: Console, result: PurchaseResult, title: str,
                          show_header: bool = True) -> None:
    table = Table(title=title, show_header=show_header, header_style="bold cyan")
    for heading in PURCHASE_HEADINGS:
        table.add_column(heading, justify="right")
    table.add_row(*purchase_cells(result))
    console.print(table)


# -- total --------------------------------------------------------------------

TOTAL_HEADINGS = [
    "Duration",
    "Offering Type",
    "Service",
    "Instance Type",
    "Count",
    "Upfront (USD)",
    "Monthly (USD)",
    "Effective Monthly (USD)",
]


def total_rows(report: TotalReport) -> List[List[str]]:
    rows = []
    for item in report.grouped():
        rows.append([
            format_duration(report.duration_years),
            report.offering_type.value,
            item.family.display_name,
            item.instance_class,
            str(item.count),
            format_money(item.upfront),
            format_money(item.monthly),
            format_money(item.effective_monthly),
        ])
    return rows


def total_summary(report: TotalReport) -> List[str]:
    return [
        format_duration(report.duration_years),
        "Total",
        "",
        "",
        str(sum(item.count for item in report.instances)),
        format_money(report.total_upfront),
        format_money(report.total_monthly),
        format_money(report.total_effective_monthly),
    ]


def render_total_table(console: Console, report: TotalReport, show_header: bool = True) -> None:
    table = Table(title="Reserved Instance Total", show_header=show_header, header_style="bold cyan")
    for index, heading in enumerate(TOTAL_HEADINGS):
        table.add_column(heading, justify="right" if index >= 4 else "left")

    for cells in total_rows(report):
        table.add_row(*cells)
    table.add_section()
    table.add_row(*total_summary(report), style="bold")

    console.print(table)


def render_total_csv(report: TotalReport, no_header: bool = False) -> str:
    return _to_csv(TOTAL_HEADINGS, total_rows(report) + [total_summary(report)], no_header)
