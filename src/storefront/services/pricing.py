from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable


@dataclass(frozen=True)
class OrderTotals:
    """Checkout amounts in pesewas."""
    subtotal: int
    shipping: int
    tax: int
    total: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total,
        }


def subtotal_of(items: Iterable[Dict[str, Any]]) -> int:
    return sum(int(i["price_snapshot"]) * int(i["quantity"]) for i in items)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_order_totals(
    subtotal: int,
    free_shipping_threshold: int,
    shipping_flat_rate: int,
    tax_rate_percent: float,
) -> OrderTotals:
    """
    Flat-rate shipping waived at the threshold, plus percentage tax.

    >>> compute_order_totals(60000, 50000, 2000, 0)
    OrderTotals(subtotal=60000, shipping=0, tax=0, total=60000)
    >>> compute_order_totals(1999, 50000, 2000, 12.5)
    OrderTotals(subtotal=1999, shipping=2000, tax=250, total=4249)
    """
    shipping = 0 if subtotal >= free_shipping_threshold else shipping_flat_rate
    # str() keeps floats like 12.5 exact before the Decimal multiply.
    tax = round_half_up(Decimal(subtotal) * Decimal(str(tax_rate_percent)) / Decimal(100))
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )
