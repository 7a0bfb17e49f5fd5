"""
Display formatting for budget amounts.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from babel.numbers import format_currency

from .models import CENTS

DEFAULT_CURRENCY = 'BRL'
DEFAULT_LOCALE = 'pt_BR'


def format_money(amount: Optional[Decimal], currency: str = DEFAULT_CURRENCY,
                 locale: str = DEFAULT_LOCALE) -> str:
    """Format an amount for people, e.g. ``R$ 15,90``."""
    if amount is None:
        return "-"
    rounded = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    return format_currency(rounded, currency, locale=locale)


def format_score(score: Optional[float]) -> str:
    if score is None:
        return "-"
    return f"{score:.0%}"
