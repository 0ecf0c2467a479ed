"""
Finance Tracker - Core Package

The shared business logic behind a personal finance tracker:
transactions, budgets, savings goals, recurring transactions,
spending insights, multi-currency display and CSV export.

DESIGN PRINCIPLES:
1. One finance document, injected, never an ambient singleton
2. Engines are pure: (document, input) -> (new document, result)
3. Expected failures are results, not exceptions
4. Derived numbers (budget spend, goal progress) are never stored
5. Storage and rate providers are swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
