"""
CSV Export Formatter

Four read-only views of the ledger rendered as CSV text: the full
ledger, a monthly summary for one year, a category breakdown and a
tax summary.

Quoting is the csv module's minimal quoting: a field is wrapped in
double quotes only when it holds a comma, a double quote or a line
break, and embedded quotes are doubled. Lines end with a bare "\\n".
"""

import csv
import io
from datetime import date
from typing import Iterable, Optional

from finance_tracker.ledger.transactions import match_transactions
from finance_tracker.models.finance import FinanceDocument, Transaction, TransactionType


TRANSACTION_HEADERS = ["Date", "Type", "Category", "Description", "Amount", "Currency", "Tags", "Recurring"]
MONTHLY_HEADERS = ["Month", "Income", "Expenses", "Net", "Transactions"]
CATEGORY_HEADERS = ["Category", "Income", "Expenses", "Net", "Transaction Count"]
TAX_SECTION_HEADERS = ["Category", "Amount"]

TAG_SEPARATOR = "; "


def _render(rows: Iterable[list]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _money(value: float) -> str:
    return f"{value:.2f}"


def _plain_number(value: float) -> str:
    """Shortest text for a number: 12.0 -> "12", -12.5 -> "-12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _in_year(transaction: Transaction, year: int) -> bool:
    return transaction.date.year == year


def export_transactions_csv(
    document: FinanceDocument,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
    type: Optional[TransactionType] = None,
) -> str:
    """
    The ledger, oldest first, with expenses as negative amounts.

    Filters behave like `match_transactions`. Same-day rows keep ledger
    order.
    """
    transactions = match_transactions(
        document,
        start_date=start_date,
        end_date=end_date,
        category=category,
        type=type,
    )
    transactions.sort(key=lambda t: t.date)

    rows = [TRANSACTION_HEADERS]
    for t in transactions:
        rows.append([
            t.date.isoformat(),
            t.type.value,
            t.category,
            t.description,
            _plain_number(t.signed_amount),
            t.currency or "USD",
            TAG_SEPARATOR.join(t.tags or []),
            "Yes" if t.recurring else "No",
        ])
    return _render(rows)


def export_monthly_summary_csv(
    document: FinanceDocument,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> str:
    """All twelve months of `year`, active or not, plus a TOTAL row."""
    year = year or (today or date.today()).year

    months = {month: {"income": 0.0, "expenses": 0.0, "count": 0} for month in range(1, 13)}
    for t in document.transactions:
        if not _in_year(t, year):
            continue
        bucket = months[t.date.month]
        bucket["count"] += 1
        if t.type == TransactionType.INCOME:
            bucket["income"] += t.amount
        else:
            bucket["expenses"] += t.amount

    rows = [MONTHLY_HEADERS]
    for month, bucket in months.items():
        rows.append([
            f"{year}-{month:02d}",
            _money(bucket["income"]),
            _money(bucket["expenses"]),
            _money(bucket["income"] - bucket["expenses"]),
            bucket["count"],
        ])

    total_income = sum(b["income"] for b in months.values())
    total_expenses = sum(b["expenses"] for b in months.values())
    rows.append([
        "TOTAL",
        _money(total_income),
        _money(total_expenses),
        _money(total_income - total_expenses),
        sum(b["count"] for b in months.values()),
    ])
    return _render(rows)


def export_category_breakdown_csv(
    document: FinanceDocument,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> str:
    """Per-category totals, largest combined income plus expenses first."""
    categories: dict[str, dict] = {}
    for t in document.transactions:
        if start_date and t.date < start_date:
            continue
        if end_date and t.date > end_date:
            continue
        bucket = categories.setdefault(t.category, {"income": 0.0, "expenses": 0.0, "count": 0})
        bucket["count"] += 1
        if t.type == TransactionType.INCOME:
            bucket["income"] += t.amount
        else:
            bucket["expenses"] += t.amount

    ranked = sorted(
        categories.items(),
        key=lambda item: item[1]["income"] + item[1]["expenses"],
        reverse=True,
    )

    rows = [CATEGORY_HEADERS]
    for category, bucket in ranked:
        rows.append([
            category,
            _money(bucket["income"]),
            _money(bucket["expenses"]),
            _money(bucket["income"] - bucket["expenses"]),
            bucket["count"],
        ])
    return _render(rows)


def _tax_section(title: str, totals: dict[str, float], total_label: str) -> tuple[list[list], float]:
    rows = [[title], TAX_SECTION_HEADERS]
    total = 0.0
    for category, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True):
        rows.append([category, _money(amount)])
        total += amount
    rows.append([total_label, _money(total)])
    return rows, total


def export_tax_summary_csv(document: FinanceDocument, year: int) -> str:
    """
    Income and expenses for one year, by category.

    Layout:
        Tax Summary for <year>
        <blank>
        INCOME section with Total Income
        <blank>
        EXPENSES section with Total Expenses
        <blank>
        Net Income
    """
    income: dict[str, float] = {}
    expenses: dict[str, float] = {}
    for t in document.transactions:
        if not _in_year(t, year):
            continue
        target = income if t.type == TransactionType.INCOME else expenses
        target[t.category] = target.get(t.category, 0) + t.amount

    income_rows, total_income = _tax_section("INCOME", income, "Total Income")
    expense_rows, total_expenses = _tax_section("EXPENSES", expenses, "Total Expenses")

    rows: list[list] = [[f"Tax Summary for {year}"], []]
    rows.extend(income_rows)
    rows.append([])
    rows.extend(expense_rows)
    rows.append([])
    rows.append(["Net Income", _money(total_income - total_expenses)])
    return _render(rows)
