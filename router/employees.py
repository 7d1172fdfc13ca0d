# employees.py
from fastapi import APIRouter, Depends

from models import Employee
from schemas import ApiResponse, ListResponse, EmployeeOut, EmployeeUpdate
from dependencies import get_current_employee, get_employee_service
from services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["Employees"])


@router.get("", response_model=ListResponse[EmployeeOut])
def read_employees(
    current: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    """Get all employees (manager/admin only)"""
    employees = service.list(current)
    return {"success": True, "count": len(employees), "data": employees}


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeOut])
def read_employee(
    employee_id: int,
    current: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    return {"success": True, "data": service.get(current, employee_id)}


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeOut])
def update_employee(
    employee_id: int,
    update: EmployeeUpdate,
    current: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    return {"success": True, "data": service.update(current, employee_id, update)}


@router.delete("/{employee_id}", response_model=ApiResponse[dict])
def delete_employee(
    employee_id: int,
    current: Employee = Depends(get_current_employee),
    service: EmployeeService = Depends(get_employee_service),
):
    service.delete(current, employee_id)
    return {"success": True, "data": {}}
