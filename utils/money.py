# utils/money.py
from decimal import Decimal, ROUND_HALF_UP

from config import CURRENCY_SYMBOL

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
     """Coerce to Decimal and round to cents."""
     if not isinstance(value, Decimal):
          value = Decimal(str(value))
     return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value) -> str:
     """R1300.00"""
     return f"{CURRENCY_SYMBOL}{to_money(value):.2f}"
