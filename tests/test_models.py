import pytest
from workforce.core.exceptions import ValidationException
from workforce.models.account import Admin, CompanyOwner, Employee
from workforce.models.role import AccountRole
from tests.conftest import make_employee


class TestAccountVariants:
    """Tests for variant construction and validation"""

    def test_variant_role_is_set_from_class(self):
        """Each variant carries its own role tag"""
        assert Employee(username="e").role == AccountRole.EMPLOYEE
        assert CompanyOwner(username="o").role == AccountRole.COMPANY_OWNER
        assert Admin(username="a").role == AccountRole.ADMIN

    def test_role_must_match_variant(self):
        """An employee cannot be constructed with the owner role"""
        with pytest.raises(ValidationException):
            Employee(username="e", role=AccountRole.COMPANY_OWNER)

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationException):
            Employee(username="e", salary=-1)

    def test_zero_salary_allowed(self):
        assert Employee(username="e", salary=0).salary == 0

    def test_new_owner_has_no_employees(self):
        owner = CompanyOwner(username="o")
        assert owner.employee_ids == []
        assert owner.company_name is None

    def test_external_id_is_immutable(self, db_session):
        """external_id cannot change once stored"""
        employee = make_employee(db_session, "emma")

        with pytest.raises(ValidationException):
            employee.external_id = "someone-else"

    def test_external_id_can_be_set_once(self, db_session):
        """Employees created without an identity can be linked later"""
        employee = Employee(username="late")
        db_session.add(employee)
        db_session.commit()

        employee.external_id = "late-sub"
        db_session.commit()

        assert employee.external_id == "late-sub"

    def test_polymorphic_load(self, db_session):
        """Loading from the table yields the right variant"""
        from workforce.models.account import Account

        make_employee(db_session, "emma")
        db_session.expunge_all()

        loaded = db_session.query(Account).one()
        assert isinstance(loaded, Employee)
        assert loaded.role == AccountRole.EMPLOYEE
