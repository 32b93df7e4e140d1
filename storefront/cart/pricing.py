"""Cart totals: subtotal, tax, flat-rate shipping."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from storefront.money import ZERO, add, multiply, round_money, to_float

from .models import CartLine

TAX_RATE = Decimal("0.10")
FREE_SHIPPING_THRESHOLD = Decimal("50")  # strictly above this ships free
SHIPPING_FEE = Decimal("5.99")


@dataclass(frozen=True)
class CartTotals:
    """Display totals, each rounded to cents."""
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "subtotal": to_float(self.subtotal),
            "tax": to_float(self.tax),
            "shipping": to_float(self.shipping),
            "total": to_float(self.total),
        }


def compute_totals(lines: Iterable[CartLine]) -> CartTotals:
    """
    Compute totals over cart lines.

    Everything is accumulated unrounded in Decimal; rounding happens once
    per displayed value so repeated additions never drift.
    """
    subtotal = ZERO
    for line in lines:
        subtotal = add(subtotal, line.line_total)

    tax = multiply(subtotal, TAX_RATE)
    shipping = ZERO if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    total = subtotal + tax + shipping

    return CartTotals(
        subtotal=round_money(subtotal),
        tax=round_money(tax),
        shipping=round_money(shipping),
        total=round_money(total),
    )
