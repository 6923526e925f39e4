import structlog

from workforce.core.exceptions import AccessDeniedException
from workforce.models.account import Account, CompanyOwner, Employee
from workforce.models.actor import Actor
from workforce.models.principal import Principal
from workforce.models.role import AccountRole
from workforce.repositories.account_repository import AccountRepository

logger = structlog.get_logger(__name__)


class ProvisioningResolver:
    """Maps authenticated principals to local accounts, creating them on first contact"""

    def __init__(self, repo: AccountRepository):
        self.repo = repo

    def resolve(self, principal: Principal) -> Actor:
        """
        Resolve the acting caller for a principal.

        Flow:
        1. Look up the account by external_id
        2. Create one on first contact if the role claims call for it
        3. Admins need no account; anyone else without one is rejected

        Raises:
            AccessDeniedException: If the principal has no account and no admin claim
        """
        account = self.repo.get_by_external_id(principal.external_id)
        if account is None:
            account = self._provision(principal)

        if account is None and not principal.has_role(AccountRole.ADMIN):
            raise AccessDeniedException("No recognised role for this identity")

        return Actor(principal=principal, account=account)

    def _provision(self, principal: Principal) -> Account | None:
        """Create-if-absent keyed by external_id. Writes at most once."""
        if principal.has_role(AccountRole.EMPLOYEE):
            candidate = Employee(
                username=principal.username,
                external_id=principal.external_id,
                salary=0,
            )
        elif principal.has_role(AccountRole.COMPANY_OWNER):
            candidate = CompanyOwner(
                username=principal.username,
                external_id=principal.external_id,
            )
        else:
            # Admin identity is asserted by claim alone
            return None

        account = self.repo.create_if_absent(candidate)
        logger.info(
            "account_provisioned",
            account_id=account.id,
            external_id=principal.external_id,
            role=account.role.value,
        )
        return account
