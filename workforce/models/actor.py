"""Acting caller for request authorization."""

from dataclasses import dataclass

from workforce.models.account import Account
from workforce.models.principal import Principal
from workforce.models.role import AccountRole


@dataclass
class Actor:
    """
    The authenticated caller of a request.

    Pairs the verified principal with its local account. Admins are asserted
    by token claim and may have no account at all.

    Attributes:
        principal: Verified identity from the bearer token
        account: Local account for the principal, None for claim-only admins
    """

    principal: Principal
    account: Account | None = None

    @property
    def role(self) -> AccountRole:
        """The stored account's role when one exists, otherwise admin."""
        if self.account is not None:
            return self.account.role
        return AccountRole.ADMIN

    @property
    def account_id(self) -> int | None:
        return self.account.id if self.account is not None else None

    @property
    def employee_ids(self) -> list[int]:
        """Employees held by the actor; empty unless the actor is an owner."""
        if self.account is not None and self.role == AccountRole.COMPANY_OWNER:
            return self.account.employee_ids
        return []

    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    def is_company_owner(self) -> bool:
        return self.role == AccountRole.COMPANY_OWNER

    def is_self(self, account_id: int) -> bool:
        return self.account_id is not None and self.account_id == account_id

    def holds(self, account_id: int) -> bool:
        return account_id in self.employee_ids

    def __repr__(self) -> str:
        return f"<Actor(external_id='{self.principal.external_id}', role={self.role.value}, account_id={self.account_id})>"
