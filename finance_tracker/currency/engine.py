"""
Currency Engine

Rate caching, USD-pivoted conversion, display formatting and the
multi-currency balance.

DESIGN DECISION: Every conversion routes through USD. An amount is
divided by its source rate and multiplied by the target rate, so the
base currency stays USD no matter what the document's default
currency is. Unknown codes are never rejected here; they degrade to a
1:1 rate.

Rate freshness:
    no cache -> fetch -> fresh -> (age >= cache_hours) -> stale -> fetch -> fresh
A failed fetch keeps whatever cache exists, or the default table.
"""

import math
import re
from datetime import datetime, timedelta
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.config import get_settings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.finance import (
    DEFAULT_EXCHANGE_RATES,
    SUPPORTED_CURRENCIES,
    ExchangeRateCache,
    FinanceDocument,
    TransactionType,
    utcnow,
)
from finance_tracker.models.results import (
    BalanceInCurrency,
    ConversionResult,
    ConvertedTransaction,
    CurrencyBreakdown,
    CurrencyInfo,
    Insight,
    OperationResult,
    TransactionsInCurrency,
)
from finance_tracker.services.rates import RateProviderInterface


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF ",
    "CNY": "¥",
    "INR": "₹",
    "MXN": "MX$",
    "BRL": "R$",
    "KRW": "₩",
}

CURRENCY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
    "INR": "Indian Rupee",
    "MXN": "Mexican Peso",
    "BRL": "Brazilian Real",
    "KRW": "South Korean Won",
}

# Rendered without decimal places
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

_PLACEHOLDER = re.compile(r"\{(\d+)\}")


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round to `places` decimals with halves going up, toward +infinity.

    0.125 -> 0.13 and -2.5 -> -2. The builtin round() sends halves to
    the even neighbour instead.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


# =============================================================================
# RATES
# =============================================================================

def get_exchange_rates(document: FinanceDocument) -> dict[str, float]:
    """Cached rates if present, otherwise the default table."""
    if document.exchange_rates and document.exchange_rates.rates:
        return dict(document.exchange_rates.rates)
    return dict(DEFAULT_EXCHANGE_RATES)


def rates_are_fresh(
    document: FinanceDocument,
    now: Optional[datetime] = None,
    max_age: Optional[timedelta] = None,
) -> bool:
    cache = document.exchange_rates
    if not cache or not cache.rates or cache.last_updated is None:
        return False
    now = now or utcnow()
    max_age = max_age or timedelta(hours=get_settings().rates.cache_hours)
    return now - cache.last_updated < max_age


async def get_rates_if_stale(
    document: FinanceDocument,
    provider: Optional[RateProviderInterface],
    now: Optional[datetime] = None,
    max_age: Optional[timedelta] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[FinanceDocument, dict[str, float]]:
    """
    Return usable rates, refreshing the cache when it is stale.

    Never raises. The returned document carries the new cache when a
    fetch succeeded and is the input document otherwise.
    """
    now = now or utcnow()
    audit_logger = audit_logger or AuditLogger()

    if rates_are_fresh(document, now=now, max_age=max_age):
        return document, dict(document.exchange_rates.rates)

    fresh = None
    if provider is not None:
        try:
            fresh = await provider.fetch_rates()
        except Exception as e:
            # Providers should return None; a raising one must not leak out
            audit_logger.log_external_service_error("exchange_rates", str(e))
            fresh = None

    if fresh:
        updated = document.model_copy(deep=True)
        updated.exchange_rates = ExchangeRateCache(
            rates=fresh,
            last_updated=now,
            base="USD",
        )
        audit_logger.log(AuditEventBuilder.rates_refreshed(len(fresh)))
        return updated, dict(fresh)

    source = "cached" if document.exchange_rates and document.exchange_rates.rates else "default"
    audit_logger.log(AuditEventBuilder.rates_fallback(source))
    return document, get_exchange_rates(document)


# =============================================================================
# CONVERSION & FORMATTING
# =============================================================================

def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Optional[dict[str, float]] = None,
) -> ConversionResult:
    """
    Convert through USD.

    Same-currency conversion is the identity with a rate of exactly 1.
    The converted amount is rounded to 2 places and the rate to 4.
    """
    rates = rates or DEFAULT_EXCHANGE_RATES
    source = from_currency.upper()
    target = to_currency.upper()

    if source == target:
        return ConversionResult(converted_amount=amount, rate=1.0)

    from_rate = rates.get(source) or 1.0
    to_rate = rates.get(target) or 1.0

    amount_in_usd = amount / from_rate
    converted = amount_in_usd * to_rate

    return ConversionResult(
        converted_amount=round_half_up(converted, 2),
        rate=round_half_up(to_rate / from_rate, 4),
    )


def format_currency(amount: float, currency: str = "USD") -> str:
    """
    Prefix the currency symbol.

    JPY and KRW are shown as whole numbers with thousands separators,
    everything else with exactly two decimals. Unknown codes use the
    code itself as prefix.
    """
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")

    if code in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{int(round_half_up(amount)):,}"
    return f"{symbol}{amount:.2f}"


def format_insight(
    insight: Insight,
    currency: str = "USD",
    rates: Optional[dict[str, float]] = None,
    source_currency: str = "USD",
) -> str:
    """
    Fill an insight's {0}, {1}, ... placeholders with formatted amounts.

    Amounts are converted from `source_currency` first when the display
    currency differs.
    """
    def replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index >= len(insight.amounts):
            return match.group(0)
        value = convert_currency(
            insight.amounts[index], source_currency, currency, rates
        ).converted_amount
        return format_currency(value, currency)

    return _PLACEHOLDER.sub(replace, insight.message)


# =============================================================================
# DOCUMENT-LEVEL OPERATIONS
# =============================================================================

def set_default_currency(
    document: FinanceDocument,
    currency: str,
) -> tuple[FinanceDocument, OperationResult]:
    code = currency.strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        return document, OperationResult.invalid(f"Unsupported currency: {currency}")

    updated = document.model_copy(deep=True)
    updated.default_currency = code
    return updated, OperationResult.ok()


def get_transactions_in_currency(
    document: FinanceDocument,
    target_currency: str,
) -> TransactionsInCurrency:
    """Every transaction converted on its own into `target_currency`."""
    rates = get_exchange_rates(document)
    target = target_currency.upper()

    total_income = 0.0
    total_expenses = 0.0
    converted_transactions = []

    for t in document.transactions:
        original_currency = t.currency or document.default_currency or "USD"
        converted = convert_currency(t.amount, original_currency, target, rates).converted_amount

        if t.type == TransactionType.INCOME:
            total_income += converted
        else:
            total_expenses += converted

        converted_transactions.append(ConvertedTransaction(
            id=t.id,
            date=t.date,
            original_amount=t.amount,
            original_currency=original_currency,
            converted_amount=converted,
            target_currency=target,
            category=t.category,
            description=t.description,
            type=t.type,
        ))

    return TransactionsInCurrency(
        transactions=converted_transactions,
        total_income=round_half_up(total_income, 2),
        total_expenses=round_half_up(total_expenses, 2),
    )


def get_balance_in_currency(
    document: FinanceDocument,
    target_currency: str,
) -> BalanceInCurrency:
    """
    Balance in `target_currency`.

    Signed amounts are summed per source currency first, each subtotal
    is converted on its own, and the converted subtotals are added.
    This keeps per-currency rounding boundaries; converting a grand
    total once would not.
    """
    rates = get_exchange_rates(document)
    target = target_currency.upper()

    by_currency: dict[str, float] = {}
    for t in document.transactions:
        code = t.currency or document.default_currency or "USD"
        by_currency[code] = by_currency.get(code, 0) + t.signed_amount

    total = 0.0
    breakdown = {}
    for code, amount in by_currency.items():
        converted = convert_currency(amount, code, target, rates).converted_amount
        breakdown[code] = CurrencyBreakdown(original=amount, converted=converted)
        total += converted

    return BalanceInCurrency(
        balance=round_half_up(total, 2),
        currency=target,
        breakdown=breakdown,
    )


def get_supported_currencies() -> list[CurrencyInfo]:
    return [
        CurrencyInfo(
            code=code,
            name=CURRENCY_NAMES.get(code, code),
            symbol=CURRENCY_SYMBOLS.get(code, code).strip(),
        )
        for code in SUPPORTED_CURRENCIES
    ]
