"""CSV export views."""

from finance_tracker.export.csv_export import (
    export_category_breakdown_csv,
    export_monthly_summary_csv,
    export_tax_summary_csv,
    export_transactions_csv,
)

__all__ = [
    "export_category_breakdown_csv",
    "export_monthly_summary_csv",
    "export_tax_summary_csv",
    "export_transactions_csv",
]
