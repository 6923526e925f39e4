"""
Role- and relationship-scoped access decisions.

Every function is pure: it looks only at the actor (and the target id where
relevant) and returns a Decision. State preconditions such as "employee is
unassigned" are checked by the RelationshipManager, not here.
"""

from dataclasses import dataclass

from workforce.core.exceptions import AccessDeniedException
from workforce.models.actor import Actor
from workforce.models.role import AccountRole


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check"""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def enforce(self) -> None:
        """
        Raises:
            AccessDeniedException: If the decision is a denial
        """
        if not self.allowed:
            raise AccessDeniedException(self.reason or "Access denied")


ALLOW = Decision.allow()


def _unhandled(actor: Actor) -> Decision:
    raise ValueError(f"Unhandled account role: {actor.role!r}")


def _admin_only(actor: Actor, operation: str) -> Decision:
    if actor.role == AccountRole.ADMIN:
        return ALLOW
    if actor.role in (AccountRole.COMPANY_OWNER, AccountRole.EMPLOYEE):
        return Decision.deny(f"Only admins can {operation}")
    return _unhandled(actor)


def _owner_only(actor: Actor, operation: str) -> Decision:
    if actor.role == AccountRole.COMPANY_OWNER:
        return ALLOW
    if actor.role in (AccountRole.ADMIN, AccountRole.EMPLOYEE):
        return Decision.deny(f"Only company owners can {operation}")
    return _unhandled(actor)


def can_list_accounts(actor: Actor) -> Decision:
    return _admin_only(actor, "list all accounts")


def can_list_employees(actor: Actor) -> Decision:
    return _admin_only(actor, "list employees")


def can_list_companies(actor: Actor) -> Decision:
    return _admin_only(actor, "list companies")


def can_read_account(actor: Actor, target_id: int) -> Decision:
    """Admins read anything, owners read themselves and their employees, employees read themselves"""
    if actor.role == AccountRole.ADMIN:
        return ALLOW
    if actor.role == AccountRole.COMPANY_OWNER:
        if actor.is_self(target_id) or actor.holds(target_id):
            return ALLOW
        return Decision.deny("Account is not part of your company")
    if actor.role == AccountRole.EMPLOYEE:
        if actor.is_self(target_id):
            return ALLOW
        return Decision.deny("Employees can only read their own account")
    return _unhandled(actor)


def can_create_employee(actor: Actor) -> Decision:
    if actor.role in (AccountRole.ADMIN, AccountRole.COMPANY_OWNER):
        return ALLOW
    if actor.role == AccountRole.EMPLOYEE:
        return Decision.deny("Employees cannot create accounts")
    return _unhandled(actor)


def can_delete_account(actor: Actor, target_id: int) -> Decision:
    if actor.role == AccountRole.ADMIN:
        return ALLOW
    if actor.role == AccountRole.COMPANY_OWNER:
        if actor.holds(target_id):
            return ALLOW
        return Decision.deny("Employee is not part of your company")
    if actor.role == AccountRole.EMPLOYEE:
        return Decision.deny("Employees cannot delete accounts")
    return _unhandled(actor)


def can_update_employee(actor: Actor, target_id: int) -> Decision:
    if actor.role == AccountRole.ADMIN:
        return ALLOW
    if actor.role == AccountRole.COMPANY_OWNER:
        if actor.holds(target_id):
            return ALLOW
        return Decision.deny("Employee is not part of your company")
    if actor.role == AccountRole.EMPLOYEE:
        return Decision.deny("Employees cannot update accounts")
    return _unhandled(actor)


def can_assign_to_company(actor: Actor) -> Decision:
    return _admin_only(actor, "assign employees to a named company")


def can_unassign_from_company(actor: Actor) -> Decision:
    return _admin_only(actor, "remove employees from a named company")


def can_assign_to_self(actor: Actor) -> Decision:
    return _owner_only(actor, "hire employees into their company")


def can_unassign_self(actor: Actor, target_id: int) -> Decision:
    decision = _owner_only(actor, "remove employees from their company")
    if not decision.allowed:
        return decision
    if actor.holds(target_id):
        return ALLOW
    return Decision.deny("Employee is not part of your company")


def can_set_company_name(actor: Actor) -> Decision:
    return _owner_only(actor, "name their company")
