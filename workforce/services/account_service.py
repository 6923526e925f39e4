import structlog
from sqlalchemy.orm import Session

from workforce.config import settings
from workforce.core.exceptions import ConflictException, NotFoundException
from workforce.models.account import Account, CompanyOwner, Employee
from workforce.models.actor import Actor
from workforce.models.role import AccountRole
from workforce.repositories.account_repository import AccountRepository
from workforce.schemas.account_schemas import CompanyNameUpdate, EmployeeCreate, EmployeeUpdate
from workforce.services import authorization as guard
from workforce.services.relationship_manager import RelationshipManager

logger = structlog.get_logger(__name__)


class AccountService:
    """Service layer for directory operations, each checked by the authorization guard"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository(db)
        self.relationships = RelationshipManager(self.repo)

    def list_accounts(self, actor: Actor) -> list[Account]:
        """List every account (admin only)"""
        guard.can_list_accounts(actor).enforce()
        return self.repo.get_all()

    def get_account(self, account_id: int, actor: Actor) -> Account:
        """
        Get a specific account within the actor's scope.

        The guard runs before the lookup so out-of-scope callers learn
        nothing about whether the id exists.

        Raises:
            AccessDeniedException: If the target is outside the actor's scope
            NotFoundException: If the account does not exist
        """
        guard.can_read_account(actor, account_id).enforce()
        account = self.repo.get(account_id)
        if not account:
            raise NotFoundException("Account not found")
        return account

    def list_employees(self, actor: Actor) -> list[Account]:
        guard.can_list_employees(actor).enforce()
        return self.repo.get_all_by_role(AccountRole.EMPLOYEE)

    def list_company_employees(self, company_name: str, actor: Actor) -> list[Account]:
        """
        List employees assigned to the named company.

        Raises:
            NotFoundException: If no company has that name
        """
        guard.can_list_employees(actor).enforce()
        owner = self.relationships.get_company_owner(company_name)
        return [
            employee
            for employee in self.repo.get_all_by_role(AccountRole.EMPLOYEE)
            if employee.owner_id == owner.id
        ]

    def list_company_names(self, actor: Actor) -> list[str]:
        """Distinct, non-null company names"""
        guard.can_list_companies(actor).enforce()
        names = {
            owner.company_name
            for owner in self.repo.get_all_by_role(AccountRole.COMPANY_OWNER)
            if owner.company_name is not None
        }
        return sorted(names)

    def create_employee(self, data: EmployeeCreate, actor: Actor) -> Employee:
        """
        Create an employee. Owners hire the new employee into their own company.

        Raises:
            ConflictException: If external_id is already taken
        """
        guard.can_create_employee(actor).enforce()

        if data.external_id is not None and self.repo.get_by_external_id(data.external_id):
            raise ConflictException(f"An account for '{data.external_id}' already exists")

        employee = Employee(
            username=data.username,
            external_id=data.external_id,
            salary=data.salary,
        )
        owner = actor.account if actor.is_company_owner() else None
        return self.relationships.create_employee(employee, owner)

    def update_employee(self, account_id: int, data: EmployeeUpdate, actor: Actor) -> Employee:
        """Update an employee's username or salary"""
        guard.can_update_employee(actor, account_id).enforce()
        employee = self.relationships.get_employee(account_id)

        if data.username is not None:
            employee.username = data.username
        if data.salary is not None:
            employee.salary = data.salary

        return self.repo.upsert(employee)

    def delete_account(self, account_id: int, actor: Actor) -> None:
        """
        Delete an account.

        Admins delete any account. Owners delete employees of their company;
        targets outside it are ignored unless STRICT_OWNER_DELETE is set.

        Raises:
            AccessDeniedException: If the actor may not delete the target
            NotFoundException: If the account does not exist
            ConflictException: If the target owner still holds employees
        """
        decision = guard.can_delete_account(actor, account_id)
        if not decision.allowed:
            if actor.is_company_owner() and not settings.STRICT_OWNER_DELETE:
                logger.info(
                    "delete_ignored_unlinked_target",
                    owner_id=actor.account_id,
                    account_id=account_id,
                )
                return
            decision.enforce()

        account = self.repo.get(account_id)
        if not account:
            raise NotFoundException("Account not found")
        self.relationships.delete(account)

    def assign_to_company(self, company_name: str, employee_id: int, actor: Actor) -> CompanyOwner:
        guard.can_assign_to_company(actor).enforce()
        return self.relationships.assign_to_company(company_name, employee_id)

    def assign_to_self(self, employee_id: int, actor: Actor) -> Employee:
        guard.can_assign_to_self(actor).enforce()
        employee = self.relationships.get_employee(employee_id)
        return self.relationships.assign(employee, actor.account)

    def unassign_from_company(self, company_name: str, employee_id: int, actor: Actor) -> Employee:
        guard.can_unassign_from_company(actor).enforce()
        return self.relationships.unassign_from_company(company_name, employee_id)

    def unassign_self(self, employee_id: int, actor: Actor) -> Employee:
        """Release an employee from the acting owner's company"""
        guard.can_unassign_self(actor, employee_id).enforce()
        employee = self.relationships.get_employee(employee_id)
        return self.relationships.unassign(employee, actor.account)

    def set_company_name(self, data: CompanyNameUpdate, actor: Actor) -> CompanyOwner:
        """
        Name (or rename) the acting owner's company.

        Raises:
            ConflictException: If another owner already uses the name
        """
        guard.can_set_company_name(actor).enforce()
        owner = actor.account

        existing = self.repo.get_owner_by_company(data.company_name)
        if existing is not None and existing.id != owner.id:
            raise ConflictException(f"Company '{data.company_name}' already exists")

        owner.company_name = data.company_name
        return self.repo.upsert(owner)

