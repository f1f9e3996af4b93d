"""Per-account summaries handed to the presentation layer."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from servicepay.models.bill import Bill, BillStatus
from servicepay.models.service_account import ServiceAccount, ServiceCategory, ServiceProvider
from servicepay.services.debt_service import total_debt
from servicepay.services.ledger_service import Ledger
from servicepay.services.period_service import ActivePeriodResolver
from servicepay.services.provider_catalog import get_provider_info, month_name

logger = logging.getLogger(__name__)


def format_amount(amount: Decimal) -> str:
    """Render an amount without trailing cents when it is a whole number."""
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return f"{amount:.2f}"


@dataclass
class BillCell:
    """One month of the active period as displayed in the bill grid."""

    month: int
    year: int
    status: BillStatus
    amount: Decimal | None
    month_name: str
    label: str

    @classmethod
    def from_bill(cls, bill: Bill) -> "BillCell":
        name = month_name(bill.month)
        label = f"{name} {bill.year}: {BillStatus(bill.status).value}"
        if bill.amount:
            label += f" - ${format_amount(bill.amount)}"
        return cls(
            month=bill.month,
            year=bill.year,
            status=BillStatus(bill.status),
            amount=bill.amount,
            month_name=name,
            label=label,
        )


@dataclass
class AccountSummary:
    """The (active_year, period_bills, total_debt) triple plus display data."""

    account_id: str
    provider: ServiceProvider
    provider_name: str
    category: ServiceCategory
    icon: str
    account_number: str
    alias: str | None
    active_year: int
    total_debt: Decimal
    bills: list[BillCell] = field(default_factory=list)


class DashboardService:
    """Build account summaries for display."""

    def __init__(self, resolver: ActivePeriodResolver | None = None):
        self.resolver = resolver or ActivePeriodResolver()

    def summarize(self, account: ServiceAccount) -> AccountSummary:
        """Resolve the active year and aggregate its debt for one account."""
        ledger = Ledger.for_account(account)
        active_year = self.resolver.resolve(ledger)
        period_bills = ledger.bills_for_year(active_year)
        info = get_provider_info(account.provider)

        return AccountSummary(
            account_id=account.id,
            provider=ServiceProvider(account.provider),
            provider_name=info.display_name,
            category=info.category,
            icon=info.icon,
            account_number=account.account_number,
            alias=account.alias,
            active_year=active_year,
            total_debt=total_debt(period_bills),
            bills=[BillCell.from_bill(bill) for bill in period_bills],
        )

    def summarize_all(self, accounts: Iterable[ServiceAccount]) -> list[AccountSummary]:
        """Summaries in the given (directory) order."""
        return [self.summarize(account) for account in accounts]


__all__ = ["AccountSummary", "BillCell", "DashboardService", "format_amount"]
