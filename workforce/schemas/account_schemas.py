from datetime import datetime
from pydantic import BaseModel, Field
from workforce.models.role import AccountRole


class EmployeeCreate(BaseModel):
    """Schema for creating a new employee"""

    username: str = Field(..., min_length=1, max_length=255)
    salary: float = Field(default=0.00, ge=0)
    external_id: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        description="Identity provider subject, lets the employee log in later",
    )


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee"""

    username: str | None = Field(None, min_length=1, max_length=255)
    salary: float | None = Field(None, ge=0)


class CompanyNameUpdate(BaseModel):
    """Name the acting owner's company (OWNER only)"""

    company_name: str = Field(..., min_length=1, max_length=255)


class AccountResponse(BaseModel):
    """
    Schema for account response.

    Variant fields are None when they do not apply: salary/owner_id for
    employees, company_name/employee_ids for company owners.
    """

    id: int
    username: str
    external_id: str | None
    role: AccountRole
    salary: float | None = None
    owner_id: int | None = None
    company_name: str | None = None
    employee_ids: list[int] | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountListResponse(BaseModel):
    """Schema for list of accounts"""

    accounts: list[AccountResponse]
    total: int


class CompanyListResponse(BaseModel):
    """Distinct company names"""

    companies: list[str]
    total: int


class CurrentAccountResponse(BaseModel):
    """The caller as resolved from its token"""

    external_id: str
    username: str
    role: AccountRole
    account: AccountResponse | None = None
