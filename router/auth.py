from fastapi import APIRouter, Depends, status

from models import Employee
from schemas import (
    ApiResponse,
    EmployeeOut,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    TokenResponse,
)
from auth import create_access_token
from dependencies import get_current_employee, get_employee_service
from services.employee_service import EmployeeService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: EmployeeService = Depends(get_employee_service),
):
    """
    Register a new employee and return a token for it.

    Public registration always creates the ``employee`` role.
    """
    employee = service.register(payload)
    return {"success": True, "token": create_access_token(employee.id), "data": employee}


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    service: EmployeeService = Depends(get_employee_service),
):
    token, employee = service.login(payload)
    return {"success": True, "token": token, "data": employee}


@router.get("/me", response_model=ApiResponse[EmployeeOut])
def read_me(current: Employee = Depends(get_current_employee)):
    """Get current employee's profile"""
    return {"success": True, "data": current}


@router.put("/me", response_model=ApiResponse[EmployeeOut])
def update_me(
    payload: ProfileUpdate,
    current: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    """Update own profile. Role and counters cannot be changed here."""
    return {"success": True, "data": service.update_self(current, payload)}
