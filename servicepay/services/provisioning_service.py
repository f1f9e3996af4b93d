"""Provisioning of new service accounts with an initial bill schedule."""

import logging
import random
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date
from decimal import Decimal

from servicepay.models.bill import Bill, BillStatus
from servicepay.models.service_account import ServiceAccount, ServiceProvider

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


class BillSchedulePolicy(ABC):
    """Strategy producing the bills a freshly added account starts with."""

    @abstractmethod
    def build(self, year: int) -> list[Bill]:
        """Return one bill per month of the year, ordered by month."""


class DefaultBillSchedule(BillSchedulePolicy):
    """Placeholder schedule shown until real billing data is synced.

    Months 1-2 are PAID and months 3-4 PENDING, each with a synthesized amount
    in [min_amount, max_amount]; months 5-12 are FUTURE without amount.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        paid_months: int = 2,
        pending_months: int = 2,
        min_amount: int = 100,
        max_amount: int = 399,
    ):
        """Initialize schedule parameters.

        Args:
            rng: Random source for synthesized amounts (seed it in tests)
            paid_months: Number of leading PAID months
            pending_months: Number of PENDING months after the paid ones
            min_amount: Smallest synthesized amount (inclusive)
            max_amount: Largest synthesized amount (inclusive)
        """
        if min_amount <= 0 or max_amount < min_amount:
            raise ValueError("Synthesized amounts must be positive with min_amount <= max_amount")
        if paid_months < 0 or pending_months < 0 or paid_months + pending_months > MONTHS_PER_YEAR:
            raise ValueError("paid_months + pending_months must fit in one year")
        self.rng = rng or random.Random()
        self.paid_months = paid_months
        self.pending_months = pending_months
        self.min_amount = min_amount
        self.max_amount = max_amount

    def status_for_month(self, month: int) -> BillStatus:
        """Status assigned to a 1-based month."""
        if month <= self.paid_months:
            return BillStatus.PAID
        if month <= self.paid_months + self.pending_months:
            return BillStatus.PENDING
        return BillStatus.FUTURE

    def build(self, year: int) -> list[Bill]:
        bills = []
        for month in range(1, MONTHS_PER_YEAR + 1):
            status = self.status_for_month(month)
            amount = None
            if status != BillStatus.FUTURE:
                amount = Decimal(self.rng.randint(self.min_amount, self.max_amount))
            bills.append(Bill(month=month, year=year, status=status, amount=amount))
        return bills


class AccountProvisioner:
    """Create ServiceAccount objects ready to be added to a directory.

    Inputs are expected to be validated already (see api.schemas). The caller
    owns storing the returned account.
    """

    def __init__(
        self,
        schedule_policy: BillSchedulePolicy | None = None,
        clock: Callable[[], date] = date.today,
        default_year: int | None = None,
    ):
        """Initialize provisioner.

        Args:
            schedule_policy: Strategy for the initial bills (default: DefaultBillSchedule)
            clock: Zero-argument callable returning today's date
            default_year: Designated schedule year; None uses the clock's year
        """
        self.schedule_policy = schedule_policy or DefaultBillSchedule()
        self.clock = clock
        self.default_year = default_year

    @staticmethod
    def new_account_id() -> str:
        """Generate an opaque unique account id."""
        return uuid.uuid4().hex

    def provision(
        self,
        provider: ServiceProvider,
        account_number: str,
        alias: str | None = None,
        year: int | None = None,
        owner_id: str | None = None,
    ) -> ServiceAccount:
        """Build a new account with a 12-month bill schedule.

        Args:
            provider: Utility company
            account_number: Validated utility account number
            alias: Optional display label
            year: Schedule year (default: designated year, else current year)
            owner_id: Signed-in user the account belongs to

        Returns:
            New ServiceAccount with its bills attached (not persisted)
        """
        schedule_year = year or self.default_year or self.clock().year
        account = ServiceAccount(
            id=self.new_account_id(),
            owner_id=owner_id,
            provider=ServiceProvider(provider),
            account_number=account_number,
            alias=alias,
        )
        account.bills = self.schedule_policy.build(schedule_year)

        logger.info(
            "Provisioned service account: id=%s provider=%s account_number=%s year=%d bills=%d",
            account.id,
            account.provider.value,
            account.account_number,
            schedule_year,
            len(account.bills),
        )
        return account


__all__ = ["AccountProvisioner", "BillSchedulePolicy", "DefaultBillSchedule"]
