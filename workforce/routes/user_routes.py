from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.dependencies import get_current_actor
from workforce.models.actor import Actor
from workforce.services.account_service import AccountService
from workforce.schemas.account_schemas import (
    AccountListResponse,
    AccountResponse,
    CompanyListResponse,
    CompanyNameUpdate,
    CurrentAccountResponse,
    EmployeeCreate,
    EmployeeUpdate,
)

router = APIRouter()

# Static paths are declared before "/{account_id}" so they are matched first


@router.get("", response_model=AccountListResponse)
async def list_accounts(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """List every account (admin only)"""
    service = AccountService(db)
    accounts = service.list_accounts(actor)
    return AccountListResponse(accounts=accounts, total=len(accounts))


@router.get("/me", response_model=CurrentAccountResponse)
async def get_current_account(actor: Actor = Depends(get_current_actor)):
    """
    Get the caller's identity and local account.

    The first call by an employee or company owner creates their account.
    Admins have no account unless one was created for them.
    """
    return CurrentAccountResponse(
        external_id=actor.principal.external_id,
        username=actor.principal.username,
        role=actor.role,
        account=actor.account,
    )


@router.get("/employees", response_model=AccountListResponse)
async def list_employees(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """List all employees (admin only)"""
    service = AccountService(db)
    employees = service.list_employees(actor)
    return AccountListResponse(accounts=employees, total=len(employees))


@router.get("/company", response_model=CompanyListResponse)
async def list_companies(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """List distinct company names (admin only)"""
    service = AccountService(db)
    companies = service.list_company_names(actor)
    return CompanyListResponse(companies=companies, total=len(companies))


@router.put("/company", response_model=AccountResponse)
async def set_company_name(
    data: CompanyNameUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Name the caller's company.

    - **Requires companyOwner role**
    - Company names are unique
    """
    service = AccountService(db)
    return service.set_company_name(data, actor)


@router.get("/company/{company_name}", response_model=AccountListResponse)
async def list_company_employees(
    company_name: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """List employees of a company (admin only)"""
    service = AccountService(db)
    employees = service.list_company_employees(company_name, actor)
    return AccountListResponse(accounts=employees, total=len(employees))


@router.put("/add/{company_name}/{employee_id}", response_model=AccountResponse)
async def assign_employee_to_company(
    company_name: str,
    employee_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Assign an unassigned employee to a named company.

    - **Requires admin role**
    - Returns the company owner
    """
    service = AccountService(db)
    return service.assign_to_company(company_name, employee_id, actor)


@router.put("/add/{employee_id}", response_model=AccountResponse)
async def assign_employee_to_self(
    employee_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """
    Hire an unassigned employee into the caller's company.

    - **Requires companyOwner role**
    - Returns the employee
    """
    service = AccountService(db)
    return service.assign_to_self(employee_id, actor)


@router.delete("/remove/{company_name}/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unassign_employee_from_company(
    company_name: str,
    employee_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Remove an employee from a named company (admin only)"""
    service = AccountService(db)
    service.unassign_from_company(company_name, employee_id, actor)
    return None


@router.delete("/remove/{employee_id}", response_model=AccountResponse)
async def unassign_employee_from_self(
    employee_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """Release an employee from the caller's company (companyOwner only)"""
    service = AccountService(db)
    return service.unassign_self(employee_id, actor)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """
    Create a new employee.

    - **Requires admin or companyOwner role**
    - Employees created by an owner are assigned to the owner's company
    """
    service = AccountService(db)
    return service.create_employee(data, actor)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """Get specific account details within the caller's scope"""
    service = AccountService(db)
    return service.get_account(account_id, actor)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_employee(
    account_id: int,
    data: EmployeeUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update an employee's username or salary"""
    service = AccountService(db)
    return service.update_employee(account_id, data, actor)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """
    Delete an account.

    - Admins delete any account; assigned employees are detached first
    - Company owners delete employees of their own company
    - Owners that still hold employees cannot be deleted
    """
    service = AccountService(db)
    service.delete_account(account_id, actor)
    return None
