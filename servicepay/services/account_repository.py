"""Persistence of service accounts and their bills."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from servicepay.models.service_account import ServiceAccount

logger = logging.getLogger(__name__)


class AccountRepository:
    """Service for ServiceAccount database operations.

    Loads a user's accounts into memory and stores newly provisioned ones.
    Database errors are rolled back and re-raised unchanged; nothing is retried.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_for_owner(self, owner_id: str) -> list[ServiceAccount]:
        """Get all accounts of a user in creation order, bills eagerly loaded.

        Args:
            owner_id: Signed-in user identifier

        Returns:
            List of ServiceAccount objects (bills ordered by year, month)
        """
        stmt = (
            select(ServiceAccount)
            .where(ServiceAccount.owner_id == owner_id)
            .options(selectinload(ServiceAccount.bills))
            .order_by(ServiceAccount.created_at, ServiceAccount.id)
        )
        return list(self.db.scalars(stmt).all())

    def add(self, account: ServiceAccount) -> ServiceAccount:
        """Persist a newly provisioned account together with its bills.

        Args:
            account: Account built by AccountProvisioner

        Returns:
            The same account, refreshed from the database

        Raises:
            SQLAlchemyError: Store rejected the write (session rolled back)
        """
        try:
            self.db.add(account)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to persist service account %s", account.id, exc_info=True)
            raise

        self.db.refresh(account)
        logger.info(
            "Stored service account: id=%s owner_id=%s bills=%d",
            account.id,
            account.owner_id,
            len(account.bills),
        )
        return account


__all__ = ["AccountRepository"]
