import pytest
from workforce.core.exceptions import ConflictException
from workforce.models.account import Account, Admin, CompanyOwner, Employee
from workforce.models.role import AccountRole
from tests.conftest import make_employee, make_owner


class TestAccountRepository:
    """Tests for the account directory"""

    def test_get_missing_returns_none(self, repo):
        """Test lookups of unknown keys return None"""
        assert repo.get(12345) is None
        assert repo.get_by_external_id("nobody") is None

    def test_get_all_and_by_role(self, repo, db_session):
        """Test listing all accounts and filtering by role"""
        owner = make_owner(db_session, "olivia", "Acme")
        emma = make_employee(db_session, "emma")
        eric = make_employee(db_session, "eric")

        assert [a.id for a in repo.get_all()] == [owner.id, emma.id, eric.id]
        assert [a.id for a in repo.get_all_by_role(AccountRole.EMPLOYEE)] == [emma.id, eric.id]
        assert repo.get_all_by_role(AccountRole.ADMIN) == []

    def test_get_returns_variant_instance(self, repo, db_session):
        """Test loaded accounts come back as their variant class"""
        owner = make_owner(db_session, "olivia", "Acme")
        db_session.expire_all()

        assert isinstance(repo.get(owner.id), CompanyOwner)

    def test_get_owner_by_company(self, repo, db_session):
        """Test owner lookup by company name"""
        owner = make_owner(db_session, "olivia", "Acme")

        assert repo.get_owner_by_company("Acme").id == owner.id
        assert repo.get_owner_by_company("Globex") is None

    def test_upsert_twice_keeps_one_row(self, repo, db_session):
        """Test upserting the same account twice updates in place"""
        admin = Admin(username="root", external_id="admin-x")
        repo.upsert(admin)
        admin.username = "root2"
        repo.upsert(admin)

        assert db_session.query(Account).count() == 1
        assert repo.get(admin.id).username == "root2"

    def test_upsert_bumps_version(self, repo, db_session):
        """Test every update increments the version"""
        employee = make_employee(db_session, "emma")
        before = employee.version

        employee.salary = 10
        repo.upsert(employee)

        assert employee.version == before + 1

    def test_delete_absent_is_noop(self, repo, db_session):
        """Test deleting an unknown id changes nothing"""
        make_employee(db_session, "emma")

        repo.delete(9999)

        assert db_session.query(Account).count() == 1

    def test_delete_existing(self, repo, db_session):
        """Test deleting an existing account"""
        employee = make_employee(db_session, "emma")
        employee_id = employee.id

        repo.delete(employee_id)

        assert repo.get(employee_id) is None

    def test_create_if_absent_returns_existing(self, repo, db_session):
        """Test create-if-absent returns the stored record"""
        existing = make_employee(db_session, "emma")

        result = repo.create_if_absent(
            Employee(username="other", external_id=existing.external_id, salary=0)
        )

        assert result.id == existing.id
        assert db_session.query(Account).count() == 1

    def test_duplicate_company_name_conflicts(self, repo, db_session):
        """Test a unique key violation is reported as conflict and rolled back"""
        make_owner(db_session, "olivia", "Acme")
        second = make_owner(db_session, "oscar", "Globex")

        second.company_name = "Acme"
        with pytest.raises(ConflictException):
            repo.upsert(second)

        db_session.expire_all()
        assert repo.get(second.id).company_name == "Globex"

    def test_failed_check_discards_all_changes(self, repo, db_session):
        """Test a failing pre-commit check rolls the whole save back"""
        employee = make_employee(db_session, "emma")
        employee.username = "changed"

        def check():
            raise RuntimeError("abort")

        with pytest.raises(RuntimeError):
            repo.save(upserts=[employee], check=check)

        db_session.expire_all()
        assert repo.get(employee.id).username == "emma"
