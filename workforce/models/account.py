from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from workforce.core.exceptions import ValidationException
from workforce.models.base import Base, TimestampMixin
from workforce.models.role import AccountRole


class Account(Base, TimestampMixin):
    """
    Local user record mirrored from the identity provider.

    Variants share one table and are told apart by ``role``:
    Admin, Employee and CompanyOwner. Never instantiate Account directly.

    ``version`` is an optimistic lock: every UPDATE/DELETE checks it, so two
    requests racing on the same account cannot both succeed.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    external_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True, index=True
    )
    # external_id is the 'sub' claim; NULL for employees who never logged in
    role: Mapped[AccountRole] = mapped_column(
        Enum(AccountRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {
        "polymorphic_on": role,
        "version_id_col": version,
    }

    @validates("role")
    def validate_role(self, key, value):
        expected = self.__mapper__.polymorphic_identity
        if expected is not None and value != expected:
            raise ValidationException(
                f"{type(self).__name__} must have role '{expected.value}', got '{value}'"
            )
        return value

    @validates("external_id")
    def validate_external_id(self, key, value):
        current = self.external_id
        if current is not None and value != current:
            raise ValidationException("external_id cannot be changed once set")
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, username='{self.username}')>"


class Admin(Account):
    """Directory-wide administrator. Carries no extra attributes."""

    __mapper_args__ = {"polymorphic_identity": AccountRole.ADMIN}


class Employee(Account):
    """
    Account that can be employed by one company owner.

    ``owner_id`` is a weak reference to the owner; the owner's
    ``employee_links`` must hold a matching row whenever it is set.
    """

    salary: Mapped[float | None] = mapped_column(
        Numeric(precision=15, scale=2), nullable=True
    )
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=True, index=True
    )

    __mapper_args__ = {"polymorphic_identity": AccountRole.EMPLOYEE}

    @validates("salary")
    def validate_salary(self, key, value):
        if value is not None and value < 0:
            raise ValidationException("salary must be non-negative")
        return value

    @property
    def is_assigned(self) -> bool:
        return self.owner_id is not None


class CompanyOwner(Account):
    """Owner of a single company and of the set of employees assigned to it."""

    company_name: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)

    employee_links: Mapped[list["CompanyEmployee"]] = relationship(
        "CompanyEmployee",
        primaryjoin="CompanyOwner.id == CompanyEmployee.owner_id",
        foreign_keys="CompanyEmployee.owner_id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"polymorphic_identity": AccountRole.COMPANY_OWNER}

    @property
    def employee_ids(self) -> list[int]:
        return sorted(link.employee_id for link in self.employee_links)

    def holds(self, employee_id: int) -> bool:
        return any(link.employee_id == employee_id for link in self.employee_links)


class CompanyEmployee(Base):
    """
    Owner side of an assignment: one row per employee held by an owner.

    ``employee_id`` is unique, so an employee can be held by at most one owner.
    """

    __tablename__ = "company_employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False, index=True
    )
    employee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False, unique=True
    )

    def __repr__(self) -> str:
        return f"<CompanyEmployee(owner_id={self.owner_id}, employee_id={self.employee_id})>"
