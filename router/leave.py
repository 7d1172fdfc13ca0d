"""
Leave Router
============
"""
from fastapi import APIRouter, Depends, Path, status

from models import Employee
from schemas import ApiResponse, ListResponse, LeaveCreate, LeaveOut, LeaveStatusUpdate
from dependencies import get_current_employee, get_leave_service
from services.leave_service import LeaveService

router = APIRouter(prefix="/leaves", tags=["Leaves"])


@router.get("", response_model=ListResponse[LeaveOut])
def list_leaves(
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    """All leave requests, newest start date first (manager/admin only)."""
    leaves = service.list_all(current)
    return {"success": True, "count": len(leaves), "data": leaves}


@router.post("", response_model=ApiResponse[LeaveOut], status_code=status.HTTP_201_CREATED)
def request_leave(
    leave: LeaveCreate,
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    """
    Create a leave request for the current employee.

    The requester is always the caller; any employee id in the body is ignored.
    """
    return {"success": True, "data": service.create(current, leave)}


@router.get("/employee/{employee_id}", response_model=ListResponse[LeaveOut])
def list_employee_leaves(
    employee_id: int = Path(...),
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    leaves = service.list_for_employee(current, employee_id)
    return {"success": True, "count": len(leaves), "data": leaves}


@router.get("/{leave_id}", response_model=ApiResponse[LeaveOut])
def read_leave(
    leave_id: int = Path(...),
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    return {"success": True, "data": service.get(current, leave_id)}


@router.put("/{leave_id}/status", response_model=ApiResponse[LeaveOut])
def review_leave(
    review: LeaveStatusUpdate,
    leave_id: int = Path(...),
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    """
    Approve, reject or reset a leave request (manager/admin only).

    Approval credits the requester's leaves_taken once per transition.
    """
    return {"success": True, "data": service.update_status(current, leave_id, review)}


@router.delete("/{leave_id}", response_model=ApiResponse[dict])
def delete_leave(
    leave_id: int = Path(...),
    current: Employee = Depends(get_current_employee),
    service: LeaveService = Depends(get_leave_service),
):
    service.delete(current, leave_id)
    return {"success": True, "data": {}}
