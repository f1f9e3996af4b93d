"""Service account ORM model for utility accounts tracked by a user."""

from enum import Enum

from sqlalchemy import Index, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from servicepay.models import Base, BaseModel


class ServiceCategory(str, Enum):
    """Kind of utility service."""

    WATER = "water"
    GAS = "gas"
    ELECTRICITY = "electricity"


class ServiceProvider(str, Enum):
    """Utility companies an account can be held with.

    Each provider serves exactly one ServiceCategory (see provider_catalog).
    """

    AYSAM = "AYSAM"
    """Water"""

    ECOGAS_CUYANA = "ECOGAS_CUYANA"
    """Gas"""

    EDEMSA = "EDEMSA"
    """Electricity"""


class ServiceAccount(Base, BaseModel):
    """Model representing one utility account and its bill ledger.

    The id is an opaque string assigned by the provisioner at creation time,
    so in-memory accounts are identifiable before they are persisted.
    """

    __tablename__ = "service_accounts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    owner_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Signed-in user this account belongs to",
    )

    provider: Mapped[ServiceProvider] = mapped_column(
        SQLEnum(ServiceProvider),
        nullable=False,
        comment="Utility company",
    )

    account_number: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Utility-assigned account number (alphanumeric and hyphen)",
    )

    alias: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional user label (e.g., 'Home Water')",
    )

    bills: Mapped[list["Bill"]] = relationship(  # noqa: F821
        "Bill",
        back_populates="service_account",
        cascade="all, delete-orphan",
        order_by="[Bill.year, Bill.month]",
    )

    __table_args__ = (Index("idx_service_account_owner", "owner_id", "created_at"),)

    def __repr__(self) -> str:
        return (
            f"<ServiceAccount(id={self.id!r}, provider={self.provider}, "
            f"account_number={self.account_number!r})>"
        )


__all__ = ["ServiceAccount", "ServiceCategory", "ServiceProvider"]
