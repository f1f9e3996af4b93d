"""Active billing period selection.

A ledger can span several years (an account provisioned last year that keeps
receiving bills this year). The active period is the single year shown and
aggregated for the account:

1. Empty ledger: the current calendar year.
2. Otherwise the earliest year that still has a PENDING bill.
3. If nothing is pending: the latest year present.
"""

import logging
from collections.abc import Callable
from datetime import date

from servicepay.services.ledger_service import Ledger

logger = logging.getLogger(__name__)


class ActivePeriodResolver:
    """Choose the active year for a ledger."""

    def __init__(self, clock: Callable[[], date] = date.today):
        """Initialize with a clock returning today's date.

        Args:
            clock: Zero-argument callable used for the empty-ledger fallback
        """
        self.clock = clock

    def current_year(self) -> int:
        """Calendar year according to the clock."""
        return self.clock().year

    def resolve(self, ledger: Ledger) -> int:
        """Return the active year for the ledger.

        Args:
            ledger: Ledger to inspect

        Returns:
            Earliest year with a PENDING bill, else the latest year present,
            else the current calendar year for an empty ledger
        """
        years = ledger.years_present()
        if not years:
            year = self.current_year()
            logger.debug("Empty ledger, falling back to current year %d", year)
            return year

        for year in years:
            if ledger.has_pending(year):
                return year

        return years[-1]


__all__ = ["ActivePeriodResolver"]
