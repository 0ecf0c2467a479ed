"""Currency engine package."""

from finance_tracker.currency.engine import (
    CURRENCY_NAMES,
    CURRENCY_SYMBOLS,
    ZERO_DECIMAL_CURRENCIES,
    convert_currency,
    format_currency,
    format_insight,
    get_balance_in_currency,
    get_exchange_rates,
    get_rates_if_stale,
    get_supported_currencies,
    get_transactions_in_currency,
    rates_are_fresh,
    round_half_up,
    set_default_currency,
)

__all__ = [
    "CURRENCY_NAMES",
    "CURRENCY_SYMBOLS",
    "ZERO_DECIMAL_CURRENCIES",
    "convert_currency",
    "format_currency",
    "format_insight",
    "get_balance_in_currency",
    "get_exchange_rates",
    "get_rates_if_stale",
    "get_supported_currencies",
    "get_transactions_in_currency",
    "rates_are_fresh",
    "round_half_up",
    "set_default_currency",
]
