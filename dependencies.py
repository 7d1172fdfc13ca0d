from fastapi.security import OAuth2PasswordBearer
from fastapi import Depends
from sqlalchemy.orm import Session
from db import get_db
from models import Employee
from auth import decode_access_token
from exceptions import Unauthenticated, InvalidToken
from repositories import Repositories
from services.employee_service import EmployeeService
from services.leave_service import LeaveService
from services.fun_task_service import FunTaskService
from services.project_service import ProjectService
import logging

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def get_repositories(db: Session = Depends(get_db)) -> Repositories:
    return Repositories(db)


def get_current_employee(
    token: str = Depends(oauth2_scheme),
    repos: Repositories = Depends(get_repositories),
) -> Employee:
    """
    Validate the bearer token and load the employee it names.
    """
    if not token:
        logger.info("Request without bearer token")
        raise Unauthenticated()

    try:
        employee_id = decode_access_token(token)
    except InvalidToken as e:
        logger.warning(f"JWT validation error: {e.message}")
        raise Unauthenticated()

    employee = repos.employees.get(employee_id)
    if employee is None:
        logger.warning(f"Token for unknown employee {employee_id}")
        raise Unauthenticated("No employee found with this token")

    return employee


def get_employee_service(repos: Repositories = Depends(get_repositories)) -> EmployeeService:
    return EmployeeService(repos)


def get_leave_service(repos: Repositories = Depends(get_repositories)) -> LeaveService:
    return LeaveService(repos)


def get_fun_task_service(repos: Repositories = Depends(get_repositories)) -> FunTaskService:
    return FunTaskService(repos)


def get_project_service(repos: Repositories = Depends(get_repositories)) -> ProjectService:
    return ProjectService(repos)
