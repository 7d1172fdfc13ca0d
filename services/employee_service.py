"""
Employee Service - registration, login and profile management
"""
import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError

from auth import hash_password, verify_password, create_access_token
from exceptions import DuplicateEmail, EmployeeInUse, InvalidCredentials, NotFound
from models import Employee, Role
from repositories import Repositories
from schemas import RegisterRequest, LoginRequest, ProfileUpdate, EmployeeUpdate
from services.access_control import authorize
from utils import normalize_email

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "department", "position", "contact_number", "profile_picture")


class EmployeeService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    # ------------------------------------------------------------------
    # Registration & login
    # ------------------------------------------------------------------

    def register(self, payload: RegisterRequest) -> Employee:
        if self.repos.employees.get_by_email(payload.email):
            raise DuplicateEmail()

        employee = Employee(
            name=payload.name,
            email=payload.email,
            hashed_password=hash_password(payload.password),
            role=Role.EMPLOYEE.value,
            department=payload.department,
            position=payload.position,
            contact_number=payload.contact_number,
        )
        try:
            self.repos.employees.add(employee)
            self.repos.commit()
        except IntegrityError:
            self.repos.rollback()
            logger.warning(f"Registration lost a race for {payload.email}")
            raise DuplicateEmail()

        self.repos.refresh(employee)
        logger.info(f"Registered employee {employee.id} ({employee.email})")
        return employee

    def authenticate(self, email: str, password: str) -> Employee:
        employee = self.repos.employees.get_by_email(normalize_email(email))
        # Same error for unknown email and wrong password
        if not employee or not verify_password(password, employee.hashed_password):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()
        return employee

    def login(self, payload: LoginRequest) -> Tuple[str, Employee]:
        employee = self.authenticate(payload.email, payload.password)
        return create_access_token(employee.id), employee

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, caller: Employee, employee_id: int) -> Employee:
        employee = self.repos.employees.get(employee_id)
        if not employee:
            raise NotFound(f"Employee not found with id of {employee_id}")
        authorize(caller, "read", employee)
        return employee

    def list(self, caller: Employee) -> List[Employee]:
        authorize(caller, "list", Employee, "Not authorized to list employees")
        return self.repos.employees.list()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _apply(self, employee: Employee, data: dict) -> Employee:
        if "email" in data:
            other = self.repos.employees.get_by_email(data["email"])
            if other and other.id != employee.id:
                raise DuplicateEmail()
            employee.email = data["email"]

        for field in PROFILE_FIELDS:
            if field in data:
                setattr(employee, field, data[field])

        if "role" in data:
            employee.role = data["role"]

        if "password" in data:
            employee.hashed_password = hash_password(data["password"])

        try:
            self.repos.commit()
        except IntegrityError:
            self.repos.rollback()
            raise DuplicateEmail()
        self.repos.refresh(employee)
        return employee

    def update_self(self, caller: Employee, payload: ProfileUpdate) -> Employee:
        authorize(caller, "update_self", caller)
        return self._apply(caller, payload.model_dump(exclude_unset=True))

    def update(self, caller: Employee, employee_id: int, payload: EmployeeUpdate) -> Employee:
        employee = self.repos.employees.get(employee_id)
        if not employee:
            raise NotFound(f"Employee not found with id of {employee_id}")
        authorize(caller, "update", employee, "Not authorized to update employees")
        updated = self._apply(employee, payload.model_dump(exclude_unset=True))
        logger.info(f"Employee {employee_id} updated by admin {caller.id}")
        return updated

    def delete(self, caller: Employee, employee_id: int) -> None:
        employee = self.repos.employees.get(employee_id)
        if not employee:
            raise NotFound(f"Employee not found with id of {employee_id}")
        authorize(caller, "delete", employee, "Not authorized to delete employees")
        if self.repos.employees.has_dependents(employee_id):
            raise EmployeeInUse()
        self.repos.employees.delete(employee)
        self.repos.commit()
        logger.info(f"Employee {employee_id} deleted by admin {caller.id}")
