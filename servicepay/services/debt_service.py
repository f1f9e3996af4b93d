"""Debt aggregation over a selected set of bills."""

from collections.abc import Iterable
from decimal import Decimal

from servicepay.models.bill import Bill, BillStatus


def total_debt(bills: Iterable[Bill]) -> Decimal:
    """Sum outstanding amounts.

    Only PENDING bills count. A PENDING bill without an amount contributes
    zero; PAID and FUTURE bills are ignored whatever their amount. Callers
    pass the bills of one period, not the whole ledger.

    Args:
        bills: Bills to aggregate (any iterable, may be empty)

    Returns:
        Non-negative total as Decimal (Decimal("0") for no debt)
    """
    total = Decimal("0")
    for bill in bills:
        if bill.status == BillStatus.PENDING and bill.amount is not None:
            amount = bill.amount
            total += amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return total


__all__ = ["total_debt"]
