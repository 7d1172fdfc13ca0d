from fastapi import APIRouter, Depends, status

from models import Employee
from schemas import ApiResponse, ListResponse, FunTaskCreate, FunTaskUpdate, FunTaskOut
from dependencies import get_current_employee, get_fun_task_service
from services.fun_task_service import FunTaskService

router = APIRouter(prefix="/fun-tasks", tags=["Fun Tasks"])


@router.get("", response_model=ListResponse[FunTaskOut])
def list_fun_tasks(
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    tasks = service.list(current)
    return {"success": True, "count": len(tasks), "data": tasks}


@router.post("", response_model=ApiResponse[FunTaskOut], status_code=status.HTTP_201_CREATED)
def create_fun_task(
    payload: FunTaskCreate,
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    """Create a fun task (manager/admin only). The caller becomes its creator."""
    return {"success": True, "data": service.create(current, payload)}


@router.get("/employee/{employee_id}", response_model=ListResponse[FunTaskOut])
def list_employee_fun_tasks(
    employee_id: int,
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    """Fun tasks assigned to one employee."""
    tasks = service.list(current, assigned_to_id=employee_id)
    return {"success": True, "count": len(tasks), "data": tasks}


@router.get("/{fun_task_id}", response_model=ApiResponse[FunTaskOut])
def read_fun_task(
    fun_task_id: int,
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    return {"success": True, "data": service.get(current, fun_task_id)}


@router.put("/{fun_task_id}", response_model=ApiResponse[FunTaskOut])
def update_fun_task(
    fun_task_id: int,
    payload: FunTaskUpdate,
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    return {"success": True, "data": service.update(current, fun_task_id, payload)}


@router.delete("/{fun_task_id}", response_model=ApiResponse[dict])
def delete_fun_task(
    fun_task_id: int,
    current: Employee = Depends(get_current_employee),
    service: FunTaskService = Depends(get_fun_task_service),
):
    service.delete(current, fun_task_id)
    return {"success": True, "data": {}}
