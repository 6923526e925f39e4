"""
Employee/company-owner assignment state machine.

An employee is either Unassigned (``owner_id`` is None and no owner holds it)
or Assigned (``owner_id`` names an owner whose ``employee_links`` hold it).
Every transition writes both sides in one transaction and verifies the link
before committing.
"""

import structlog

from workforce.core.exceptions import (
    ConflictException,
    InvariantViolationException,
    NotFoundException,
)
from workforce.models.account import Account, CompanyEmployee, CompanyOwner, Employee
from workforce.models.base import utcnow
from workforce.models.role import AccountRole
from workforce.repositories.account_repository import AccountRepository

logger = structlog.get_logger(__name__)


class RelationshipManager:
    """Owns every mutation of the employee/owner link"""

    def __init__(self, repo: AccountRepository):
        self.repo = repo

    # Invariant checking

    def verify_employee(self, employee: Employee) -> None:
        """
        Check that exactly the owner named by ``owner_id`` holds the employee.

        Raises:
            InvariantViolationException: If the two sides disagree
        """
        holders = self.repo.get_holder_ids(employee.id)
        expected = [] if employee.owner_id is None else [employee.owner_id]
        if holders != expected:
            self._violation(
                "employee owner reference does not match owner employee sets",
                employee_id=employee.id,
                owner_id=employee.owner_id,
                holder_ids=holders,
            )

    def verify_owner(self, owner: CompanyOwner) -> None:
        """
        Check that every employee held by the owner points back at it.

        Raises:
            InvariantViolationException: If a held id is missing, not an employee,
                or references another owner
        """
        for employee_id in owner.employee_ids:
            employee = self.repo.get(employee_id)
            if (
                employee is None
                or employee.role != AccountRole.EMPLOYEE
                or employee.owner_id != owner.id
            ):
                self._violation(
                    "owner holds an employee that does not reference it",
                    owner_id=owner.id,
                    employee_id=employee_id,
                )

    def _violation(self, message: str, **context) -> None:
        logger.error("assignment_invariant_violated", reason=message, **context)
        raise InvariantViolationException(message)

    def _checked(self, employee: Employee | None, owner: CompanyOwner | None):
        def check() -> None:
            if employee is not None:
                self.verify_employee(employee)
            if owner is not None:
                self.verify_owner(owner)

        return check

    # Link primitives; callers persist the result

    def _link(self, employee: Employee, owner: CompanyOwner) -> None:
        employee.owner_id = owner.id
        owner.employee_links.append(CompanyEmployee(owner_id=owner.id, employee_id=employee.id))
        # Bumps the owner's version so concurrent writers on it conflict
        owner.updated_at = utcnow()

    def _unlink(self, employee: Employee, owner: CompanyOwner) -> None:
        employee.owner_id = None
        for link in list(owner.employee_links):
            if link.employee_id == employee.id:
                owner.employee_links.remove(link)
        owner.updated_at = utcnow()

    # Lookups

    def get_employee(self, employee_id: int) -> Employee:
        """
        Raises:
            NotFoundException: If the id is absent or not an employee
        """
        account = self.repo.get(employee_id)
        if account is None or account.role != AccountRole.EMPLOYEE:
            raise NotFoundException(f"Employee {employee_id} not found")
        return account

    def get_company_owner(self, company_name: str) -> CompanyOwner:
        """
        Raises:
            NotFoundException: If no owner runs a company with that name
        """
        owner = self.repo.get_owner_by_company(company_name)
        if owner is None:
            raise NotFoundException(f"Company '{company_name}' not found")
        return owner

    # Transitions

    def create_employee(self, employee: Employee, owner: CompanyOwner | None = None) -> Employee:
        """Insert an employee, linking it to ``owner`` in the same transaction"""
        self.repo.add(employee)
        if owner is not None:
            self._link(employee, owner)
        upserts = [employee] if owner is None else [employee, owner]
        self.repo.save(upserts=upserts, check=self._checked(employee, owner))
        logger.info("employee_created", employee_id=employee.id, owner_id=employee.owner_id)
        return employee

    def assign(self, employee: Employee, owner: CompanyOwner) -> Employee:
        """
        Move an employee from Unassigned to Assigned.

        Raises:
            ConflictException: If the employee is already assigned
            InvariantViolationException: If the link is found inconsistent
        """
        self.verify_employee(employee)
        if employee.is_assigned:
            raise ConflictException(f"Employee {employee.id} is already assigned")

        self._link(employee, owner)
        self.repo.save(upserts=[employee, owner], check=self._checked(employee, owner))
        logger.info("employee_assigned", employee_id=employee.id, owner_id=owner.id)
        return employee

    def unassign(self, employee: Employee, owner: CompanyOwner) -> Employee:
        """
        Move an employee held by ``owner`` back to Unassigned.

        Raises:
            ConflictException: If the employee is not assigned, or assigned elsewhere
            InvariantViolationException: If the link is found inconsistent
        """
        self.verify_employee(employee)
        if not employee.is_assigned:
            raise ConflictException(f"Employee {employee.id} is not assigned")
        if employee.owner_id != owner.id:
            raise ConflictException(f"Employee {employee.id} is assigned to another company")

        self._unlink(employee, owner)
        self.repo.save(upserts=[employee, owner], check=self._checked(employee, owner))
        logger.info("employee_unassigned", employee_id=employee.id, owner_id=owner.id)
        return employee

    def assign_to_company(self, company_name: str, employee_id: int) -> CompanyOwner:
        """Assign an employee to the owner of a named company; returns the owner"""
        employee = self.get_employee(employee_id)
        if employee.is_assigned:
            raise ConflictException(f"Employee {employee_id} is already assigned")
        owner = self.get_company_owner(company_name)
        self.assign(employee, owner)
        return owner

    def unassign_from_company(self, company_name: str, employee_id: int) -> Employee:
        """Remove an employee from the named company"""
        employee = self.get_employee(employee_id)
        if not employee.is_assigned:
            raise ConflictException(f"Employee {employee_id} is not assigned")
        owner = self.get_company_owner(company_name)
        return self.unassign(employee, owner)

    def delete(self, account: Account) -> None:
        """
        Delete an account without orphaning either side of a link.

        Assigned employees are detached in the same transaction. Owners that
        still hold employees are rejected; callers unassign them first.

        Raises:
            ConflictException: If an owner still holds employees
        """
        account_id, role = account.id, account.role

        if role == AccountRole.EMPLOYEE:
            self.verify_employee(account)
            owner = self.repo.get(account.owner_id) if account.is_assigned else None
            if owner is not None:
                self._unlink(account, owner)

            def check() -> None:
                if self.repo.get_holder_ids(account_id):
                    self._violation(
                        "deleted employee is still held by an owner", employee_id=account_id
                    )
                if owner is not None:
                    self.verify_owner(owner)

            self.repo.save(
                upserts=[owner] if owner is not None else [],
                deletes=[account],
                check=check,
            )
        elif role == AccountRole.COMPANY_OWNER:
            if account.employee_ids:
                raise ConflictException(
                    f"Company owner {account.id} still has {len(account.employee_ids)} "
                    "employees, unassign them first"
                )
            self.repo.save(deletes=[account])
        elif role == AccountRole.ADMIN:
            self.repo.save(deletes=[account])
        else:
            raise ValueError(f"Unhandled account role: {role!r}")

        logger.info("account_deleted", account_id=account_id, role=role.value)
