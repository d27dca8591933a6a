from .table import (
    render_comparison_csv, render_comparison_table,
    render_purchase_csv, render_purchase_table,
    render_total_csv, render_total_table,
)

__all__ = [
    'render_comparison_csv', 'render_comparison_table',
    'render_purchase_csv', 'render_purchase_table',
    'render_total_csv', 'render_total_table',
]
