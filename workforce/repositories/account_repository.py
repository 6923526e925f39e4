"""Account directory backed by SQLAlchemy."""

from typing import Callable, Iterable, NoReturn

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from workforce.core.exceptions import ConflictException
from workforce.models.account import Account, CompanyEmployee, CompanyOwner
from workforce.models.role import AccountRole

logger = structlog.get_logger(__name__)


class AccountRepository:
    """Repository for Account model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: int) -> Account | None:
        """Get account by internal ID"""
        return self.db.get(Account, account_id)

    def get_by_external_id(self, external_id: str) -> Account | None:
        """Get account by identity provider subject"""
        return self.db.query(Account).filter(Account.external_id == external_id).first()

    def get_all(self) -> list[Account]:
        return self.db.query(Account).order_by(Account.id).all()

    def get_all_by_role(self, role: AccountRole) -> list[Account]:
        return self.db.query(Account).filter(Account.role == role).order_by(Account.id).all()

    def get_owner_by_company(self, company_name: str) -> CompanyOwner | None:
        """Get the owner whose company carries the given name"""
        return (
            self.db.query(CompanyOwner)
            .filter(CompanyOwner.company_name == company_name)
            .first()
        )

    def get_holder_ids(self, employee_id: int) -> list[int]:
        """
        Get IDs of every owner whose employee set holds the employee.

        Reads the link rows directly so pending changes must be flushed first.
        """
        rows = (
            self.db.query(CompanyEmployee.owner_id)
            .filter(CompanyEmployee.employee_id == employee_id)
            .all()
        )
        return sorted(row[0] for row in rows)

    def create_if_absent(self, account: Account) -> Account:
        """
        Insert an account unless one with the same external_id exists.

        The unique constraint on external_id picks a single winner when two
        requests race; the loser rolls back and returns the winner's record.

        Returns:
            The stored account (either the new one or the winner)
        """
        existing = self.get_by_external_id(account.external_id)
        if existing:
            return existing

        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self.get_by_external_id(account.external_id)
            if winner is None:
                raise
            logger.info("account_provision_race_lost", external_id=account.external_id)
            return winner

        self.db.refresh(account)
        return account

    def add(self, account: Account) -> Account:
        """
        Stage a new account and flush so it receives an ID (no commit).

        Raises:
            ConflictException: If a unique key is already taken
        """
        self.db.add(account)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self._abort(exc)
        return account

    def save(
        self,
        upserts: Iterable[Account] = (),
        deletes: Iterable[Account] = (),
        check: Callable[[], None] | None = None,
    ) -> None:
        """
        Persist several account changes as one transaction.

        Args:
            upserts: Accounts to insert or update
            deletes: Accounts to remove
            check: Runs after flush and before commit; raising aborts everything

        Raises:
            ConflictException: If a concurrent writer changed the same rows
        """
        upserts = list(upserts)
        try:
            for account in upserts:
                self.db.add(account)
            for account in deletes:
                self.db.delete(account)
            self.db.flush()
            if check is not None:
                check()
            self.db.commit()
        except (IntegrityError, StaleDataError) as exc:
            self._abort(exc)
        except Exception:
            self.db.rollback()
            raise

        for account in upserts:
            self.db.refresh(account)

    def upsert(self, account: Account) -> Account:
        """Insert or update a single account"""
        self.save(upserts=[account])
        return account

    def delete(self, account_id: int) -> None:
        """Delete account by ID. Deleting an absent ID is a no-op."""
        account = self.get(account_id)
        if account is None:
            return
        self.save(deletes=[account])

    def _abort(self, exc: Exception) -> NoReturn:
        self.db.rollback()
        logger.warning("concurrent_modification", error=str(exc))
        raise ConflictException("Account was modified concurrently, retry the request") from exc
