"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


class BaseModel:
    """Base model with common timestamp fields."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from servicepay.models.bill import Bill, BillStatus  # noqa: E402
from servicepay.models.service_account import (  # noqa: E402
    ServiceAccount,
    ServiceCategory,
    ServiceProvider,
)

__all__ = [
    "Base",
    "BaseModel",
    "Bill",
    "BillStatus",
    "ServiceAccount",
    "ServiceCategory",
    "ServiceProvider",
]
