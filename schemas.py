from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    Field,
    StringConstraints,
    model_validator,
)
from typing import Annotated, ClassVar, FrozenSet, Generic, List, Literal, Optional, TypeVar
from datetime import datetime, date

T = TypeVar("T")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _lower(value: str) -> str:
    return value.lower()


def _within_bcrypt_limit(value: str) -> str:
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    return value


NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Email = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(_lower)]
# Passwords are kept verbatim, no stripping
Password = Annotated[str, Field(min_length=6), AfterValidator(_within_bcrypt_limit)]

RoleName = Literal["employee", "manager", "admin"]
LeaveTypeName = Literal["sick", "casual", "annual", "maternity", "paternity", "unpaid"]
LeaveStatusName = Literal["pending", "approved", "rejected"]
FunTaskStatusName = Literal["pending", "completed", "approved"]
ProjectStatusName = Literal["not started", "in progress", "completed", "on hold"]
TaskStatusName = Literal["todo", "in progress", "completed"]


class PartialUpdate(BaseModel):
    """
    Base for update bodies: omitted fields stay untouched, explicit nulls are
    rejected unless the field is listed in ``nullable_fields``.
    """
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in sorted(self.model_fields_set - self.nullable_fields):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# ============================================================================
# RESPONSE ENVELOPES
# ============================================================================

class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


# ============================================================================
# AUTH
# ============================================================================

class RegisterRequest(BaseModel):
    name: NonBlankStr
    email: Email
    password: Password
    department: NonBlankStr
    position: NonBlankStr
    contact_number: NonBlankStr

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Doe",
                "email": "jane@company.com",
                "password": "secret123",
                "department": "Engineering",
                "position": "Developer",
                "contact_number": "+1234567890",
            }
        }


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def both_present(self):
        if not (self.email and self.email.strip()) or not self.password:
            raise ValueError("Please provide an email and password")
        return self


class AuthEmployee(BaseModel):
    id: int
    name: str
    email: str
    role: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    data: AuthEmployee


# ============================================================================
# EMPLOYEES
# ============================================================================

class EmployeeSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class EmployeeOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    department: str
    position: str
    joining_date: datetime
    contact_number: str
    profile_picture: str
    leaves_taken: int
    fun_task_points: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(PartialUpdate):
    """Fields an employee may change on their own profile."""
    name: Optional[NonBlankStr] = None
    email: Optional[Email] = None
    password: Optional[Password] = None
    department: Optional[NonBlankStr] = None
    position: Optional[NonBlankStr] = None
    contact_number: Optional[NonBlankStr] = None
    profile_picture: Optional[NonBlankStr] = None


class EmployeeUpdate(ProfileUpdate):
    """Admin update; may also change the role."""
    role: Optional[RoleName] = None


# ============================================================================
# LEAVES
# ============================================================================

class LeaveCreate(BaseModel):
    leave_type: LeaveTypeName
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self

    class Config:
        str_strip_whitespace = True


class LeaveStatusUpdate(BaseModel):
    status: LeaveStatusName


class LeaveOut(BaseModel):
    id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: str
    approved_by_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    employee: Optional[EmployeeSummary] = None
    approved_by: Optional[EmployeeSummary] = None

    class Config:
        from_attributes = True


# ============================================================================
# FUN TASKS
# ============================================================================

class FunTaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    points: int = Field(..., gt=0)
    assigned_to_id: int

    class Config:
        str_strip_whitespace = True


class FunTaskUpdate(PartialUpdate):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    points: Optional[int] = Field(None, gt=0)
    assigned_to_id: Optional[int] = None
    status: Optional[FunTaskStatusName] = None

    class Config:
        str_strip_whitespace = True


class FunTaskOut(BaseModel):
    id: int
    title: str
    description: str
    points: int
    status: str
    completed_at: Optional[datetime] = None
    created_by_id: int
    assigned_to_id: int
    created_at: datetime
    updated_at: datetime
    created_by: Optional[EmployeeSummary] = None
    assigned_to: Optional[EmployeeSummary] = None

    class Config:
        from_attributes = True


# ============================================================================
# PROJECTS & TASKS
# ============================================================================

class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    assigned_to_id: Optional[int] = None
    status: TaskStatusName = "todo"
    due_date: Optional[date] = None

    class Config:
        str_strip_whitespace = True


class TaskUpdate(PartialUpdate):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"assigned_to_id", "due_date"})

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    assigned_to_id: Optional[int] = None
    status: Optional[TaskStatusName] = None
    due_date: Optional[date] = None

    class Config:
        str_strip_whitespace = True


class TaskOut(BaseModel):
    id: int
    project_id: int
    name: str
    description: str
    assigned_to_id: Optional[int] = None
    status: str
    due_date: Optional[date] = None
    assigned_to: Optional[EmployeeSummary] = None

    class Config:
        from_attributes = True


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    status: ProjectStatusName = "not started"
    team_members: List[int] = []

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self

    class Config:
        str_strip_whitespace = True


class ProjectUpdate(PartialUpdate):
    """Dates are checked against the stored project in the service."""
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"team_members"})

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ProjectStatusName] = None
    team_members: Optional[List[int]] = None

    class Config:
        str_strip_whitespace = True


class ProjectOut(BaseModel):
    id: int
    name: str
    description: str
    start_date: date
    end_date: date
    status: str
    manager_id: int
    created_at: datetime
    updated_at: datetime
    manager: Optional[EmployeeSummary] = None
    team_members: List[EmployeeSummary] = []
    tasks: List[TaskOut] = []

    class Config:
        from_attributes = True
