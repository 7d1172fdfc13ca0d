from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Index,
    String,
    Table,
    Text,
    CheckConstraint,
)
from sqlalchemy.orm import relationship, DeclarativeBase
from enum import Enum as PyEnum

from utils import utc_now

# - ALL DateTime fields store UTC time as naive datetime
# - Enumerated fields are plain strings guarded by CHECK constraints


class Base(DeclarativeBase):
    pass


class Role(str, PyEnum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


class LeaveType(str, PyEnum):
    SICK = "sick"
    CASUAL = "casual"
    ANNUAL = "annual"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"


class LeaveStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class FunTaskStatus(str, PyEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    APPROVED = "approved"


class ProjectStatus(str, PyEnum):
    NOT_STARTED = "not started"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"
    ON_HOLD = "on hold"


class TaskStatus(str, PyEnum):
    TODO = "todo"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"


def _in(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


# ============================================================================
# EMPLOYEE MODEL
# ============================================================================

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)

    department = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    joining_date = Column(DateTime, nullable=False, default=utc_now)
    contact_number = Column(String(30), nullable=False)
    profile_picture = Column(String(255), nullable=False, default="default.jpg")

    # Counters maintained by status transitions
    leaves_taken = Column(Integer, nullable=False, default=0)
    fun_task_points = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    leaves = relationship("Leave", foreign_keys="Leave.employee_id", back_populates="employee")
    created_fun_tasks = relationship("FunTask", foreign_keys="FunTask.created_by_id", back_populates="created_by")
    assigned_fun_tasks = relationship("FunTask", foreign_keys="FunTask.assigned_to_id", back_populates="assigned_to")
    managed_projects = relationship("Project", back_populates="manager")
    projects = relationship("Project", secondary="project_team_members", back_populates="team_members")
    assigned_tasks = relationship("Task", back_populates="assigned_to")

    __table_args__ = (
        CheckConstraint(_in("role", Role), name="CHK_employee_role"),
    )

    def __repr__(self):
        return f"<Employee {self.email} ({self.role})>"


# ============================================================================
# LEAVE MODEL
# ============================================================================

class Leave(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    leave_type = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=LeaveStatus.PENDING.value)
    approved_by_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="leaves")
    approved_by = relationship("Employee", foreign_keys=[approved_by_id])

    __table_args__ = (
        CheckConstraint(_in("leave_type", LeaveType), name="CHK_leave_type"),
        CheckConstraint(_in("status", LeaveStatus), name="CHK_leave_status"),
        CheckConstraint("end_date >= start_date", name="CHK_leave_dates"),
        Index("idx_leaves_employee_start", "employee_id", "start_date"),
    )

    def __repr__(self):
        return f"<Leave(id={self.id}, emp_id={self.employee_id}, status={self.status})>"


# ============================================================================
# FUN TASK MODEL
# ============================================================================

class FunTask(Base):
    __tablename__ = "fun_tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    points = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=FunTaskStatus.PENDING.value)
    completed_at = Column(DateTime, nullable=True)

    created_by_id = Column(Integer, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    created_by = relationship("Employee", foreign_keys=[created_by_id], back_populates="created_fun_tasks")
    assigned_to = relationship("Employee", foreign_keys=[assigned_to_id], back_populates="assigned_fun_tasks")

    __table_args__ = (
        CheckConstraint("points > 0", name="CHK_fun_task_points_positive"),
        CheckConstraint(_in("status", FunTaskStatus), name="CHK_fun_task_status"),
    )

    def __repr__(self):
        return f"<FunTask(id={self.id}, points={self.points}, status={self.status})>"


# ============================================================================
# PROJECT & TASK MODELS
# ============================================================================

project_team_members = Table(
    "project_team_members",
    Base.metadata,
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("employee_id", Integer, ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=ProjectStatus.NOT_STARTED.value)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    manager = relationship("Employee", back_populates="managed_projects")
    team_members = relationship("Employee", secondary=project_team_members, back_populates="projects")
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan", order_by="Task.id")

    __table_args__ = (
        CheckConstraint(_in("status", ProjectStatus), name="CHK_project_status"),
        CheckConstraint("end_date > start_date", name="CHK_project_dates"),
    )

    @property
    def team_member_ids(self) -> set:
        return {member.id for member in self.team_members}

    def __repr__(self):
        return f"<Project(id={self.id}, name={self.name}, manager_id={self.manager_id})>"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value)
    due_date = Column(Date, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    project = relationship("Project", back_populates="tasks")
    assigned_to = relationship("Employee", back_populates="assigned_tasks")

    __table_args__ = (
        CheckConstraint(_in("status", TaskStatus), name="CHK_task_status"),
    )

    def __repr__(self):
        return f"<Task(id={self.id}, project_id={self.project_id}, status={self.status})>"
