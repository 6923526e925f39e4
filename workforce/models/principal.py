from dataclasses import dataclass, field

from workforce.models.role import AccountRole


@dataclass(frozen=True)
class Principal:
    """
    Verified caller identity supplied by the identity provider.

    Attributes:
        external_id: The token 'sub' claim, the join key to local accounts
        username: Preferred username, falls back to external_id
        role_claims: Role names granted by the identity provider
    """

    external_id: str
    username: str
    role_claims: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: AccountRole) -> bool:
        return role.value in self.role_claims
