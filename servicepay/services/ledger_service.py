"""Read-only projections over a service account's bills."""

from collections.abc import Iterable

from servicepay.models.bill import Bill, BillStatus


class Ledger:
    """Ordered collection of bills belonging to one service account.

    Holds a snapshot of the bill sequence it was built from; all methods are
    pure and never modify the bills.
    """

    def __init__(self, bills: Iterable[Bill]):
        """Initialize with the account's bills."""
        self._bills = list(bills)

    @classmethod
    def for_account(cls, account) -> "Ledger":
        """Build a ledger from a ServiceAccount's bills."""
        return cls(account.bills)

    def years_present(self) -> list[int]:
        """Distinct bill years, ascending.

        Returns:
            Sorted list of years without duplicates (empty for an empty ledger)
        """
        return sorted({bill.year for bill in self._bills})

    def bills_for_year(self, year: int) -> list[Bill]:
        """Bills issued for the given year, ordered by month.

        Args:
            year: Calendar year to filter on

        Returns:
            Bills whose year matches, in ascending month order
        """
        return sorted(
            (bill for bill in self._bills if bill.year == year),
            key=lambda bill: bill.month,
        )

    def has_pending(self, year: int) -> bool:
        """True if any bill in the year is PENDING."""
        return any(bill.status == BillStatus.PENDING for bill in self.bills_for_year(year))


__all__ = ["Ledger"]
