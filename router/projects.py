from fastapi import APIRouter, Depends, status

from models import Employee
from schemas import (
    ApiResponse,
    ListResponse,
    ProjectCreate,
    ProjectOut,
    ProjectUpdate,
    TaskCreate,
    TaskUpdate,
)
from dependencies import get_current_employee, get_project_service
from services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=ListResponse[ProjectOut])
def list_projects(
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    """Projects the caller manages or belongs to; admins see every project."""
    projects = service.list(current)
    return {"success": True, "count": len(projects), "data": projects}


@router.post("", response_model=ApiResponse[ProjectOut], status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    return {"success": True, "data": service.create(current, payload)}


@router.get("/employee/{employee_id}", response_model=ListResponse[ProjectOut])
def list_employee_projects(
    employee_id: int,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    projects = service.list(current, employee_id=employee_id)
    return {"success": True, "count": len(projects), "data": projects}


@router.get("/{project_id}", response_model=ApiResponse[ProjectOut])
def read_project(
    project_id: int,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    return {"success": True, "data": service.get(current, project_id)}


@router.put("/{project_id}", response_model=ApiResponse[ProjectOut])
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    """Update a project; ``team_members`` replaces the whole member set."""
    return {"success": True, "data": service.update(current, project_id, payload)}


@router.delete("/{project_id}", response_model=ApiResponse[dict])
def delete_project(
    project_id: int,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    service.delete(current, project_id)
    return {"success": True, "data": {}}


# ---------- Tasks ----------

@router.post("/{project_id}/tasks", response_model=ApiResponse[ProjectOut], status_code=status.HTTP_201_CREATED)
def add_project_task(
    project_id: int,
    payload: TaskCreate,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    return {"success": True, "data": service.add_task(current, project_id, payload)}


@router.put("/{project_id}/tasks/{task_id}", response_model=ApiResponse[ProjectOut])
def update_project_task(
    project_id: int,
    task_id: int,
    payload: TaskUpdate,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    """Assignee, project manager or admin may update a task."""
    return {"success": True, "data": service.update_task(current, project_id, task_id, payload)}


@router.delete("/{project_id}/tasks/{task_id}", response_model=ApiResponse[ProjectOut])
def delete_project_task(
    project_id: int,
    task_id: int,
    current: Employee = Depends(get_current_employee),
    service: ProjectService = Depends(get_project_service),
):
    return {"success": True, "data": service.delete_task(current, project_id, task_id)}
