"""Account role enum used as the account variant tag."""

from enum import Enum as PyEnum


class AccountRole(str, PyEnum):
    """
    Account roles, one per account variant.

    - ADMIN: directory-wide access, asserted by token claim alone
    - COMPANY_OWNER: owns one company and the employees assigned to it
    - EMPLOYEE: may only see its own record

    Values match the role claims issued by the identity provider.
    """

    ADMIN = "admin"
    EMPLOYEE = "employee"
    COMPANY_OWNER = "companyOwner"
