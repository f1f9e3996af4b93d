"""Bill ORM model: one month of billing for a service account."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from servicepay.models import Base, BaseModel


class BillStatus(str, Enum):
    """Payment state of a monthly bill."""

    PAID = "PAID"
    """Settled."""

    PENDING = "PENDING"
    """Issued and owed now."""

    FUTURE = "FUTURE"
    """Not yet issued or unknown; carries no amount by convention."""


class Bill(Base, BaseModel):
    """
    Single month's billing record for one service account.

    Bills are plain ORM objects and can be built and inspected in memory
    before they are attached to a session. Amount/status pairing is not
    enforced: a PENDING bill without amount is legal and counts as zero debt.
    """

    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    service_account_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("service_accounts.id"),
        nullable=False,
        index=True,
        comment="Owning service account",
    )

    month: Mapped[int] = mapped_column(nullable=False, comment="Calendar month, 1-12")
    year: Mapped[int] = mapped_column(nullable=False, comment="Calendar year")

    status: Mapped[BillStatus] = mapped_column(
        SQLEnum(BillStatus),
        nullable=False,
        default=BillStatus.FUTURE,
        comment="PAID, PENDING or FUTURE",
    )

    amount: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Bill amount; absent for FUTURE bills",
    )

    service_account: Mapped["ServiceAccount"] = relationship(  # noqa: F821
        "ServiceAccount",
        back_populates="bills",
    )

    __table_args__ = (
        UniqueConstraint("service_account_id", "year", "month", name="uq_bill_account_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_bill_month_range"),
        CheckConstraint("amount IS NULL OR amount >= 0", name="ck_bill_amount_non_negative"),
        Index("idx_bill_account_year", "service_account_id", "year"),
    )

    def __repr__(self) -> str:
        return (
            f"<Bill(id={self.id}, service_account_id={self.service_account_id}, "
            f"year={self.year}, month={self.month}, status={self.status}, "
            f"amount={self.amount})>"
        )


__all__ = ["Bill", "BillStatus"]
