"""
Persistence gateway: one repository per entity over a SQLAlchemy session.

Services depend on these classes instead of querying models directly; a
``Repositories`` bundle is built per request from the request's session and
doubles as the unit of work (``commit`` / ``rollback``).
"""
from typing import Iterable, List, Optional

from sqlalchemy import select, update, exists, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from models import Employee, Leave, FunTask, Project, Task, project_team_members


class EmployeeRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, employee_id: int) -> Optional[Employee]:
        return self.db.get(Employee, employee_id)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.email == email).first()

    def get_many(self, employee_ids: Iterable[int]) -> List[Employee]:
        ids = set(employee_ids)
        if not ids:
            return []
        return self.db.query(Employee).filter(Employee.id.in_(ids)).all()

    def list(self) -> List[Employee]:
        return self.db.query(Employee).order_by(Employee.id).all()

    def add(self, employee: Employee) -> Employee:
        self.db.add(employee)
        self.db.flush()
        return employee

    def delete(self, employee: Employee) -> None:
        self.db.delete(employee)
        self.db.flush()

    def has_dependents(self, employee_id: int) -> bool:
        """True while any leave, fun task, project or task points at the employee."""
        checks = (
            exists().where(Leave.employee_id == employee_id),
            exists().where(or_(FunTask.created_by_id == employee_id, FunTask.assigned_to_id == employee_id)),
            exists().where(Project.manager_id == employee_id),
            exists().where(Task.assigned_to_id == employee_id),
        )
        return any(self.db.execute(select(check)).scalar() for check in checks)

    def adjust_leaves_taken(self, employee_id: int, days: int) -> None:
        self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(leaves_taken=Employee.leaves_taken + days)
            .execution_options(synchronize_session=False)
        )

    def add_fun_task_points(self, employee_id: int, points: int) -> None:
        self.db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(fun_task_points=Employee.fun_task_points + points)
            .execution_options(synchronize_session=False)
        )


class LeaveRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Leave).options(
            joinedload(Leave.employee),
            joinedload(Leave.approved_by),
        )

    def get(self, leave_id: int) -> Optional[Leave]:
        return self._query().filter(Leave.id == leave_id).first()

    def list(self, employee_id: Optional[int] = None) -> List[Leave]:
        query = self._query()
        if employee_id is not None:
            query = query.filter(Leave.employee_id == employee_id)
        return query.order_by(Leave.start_date.desc(), Leave.id.desc()).all()

    def add(self, leave: Leave) -> Leave:
        self.db.add(leave)
        self.db.flush()
        return leave

    def delete(self, leave: Leave) -> None:
        self.db.delete(leave)
        self.db.flush()

    def lock_status(self, leave_id: int) -> Optional[str]:
        # FOR UPDATE is skipped by dialects without row locks (SQLite)
        return self.db.execute(
            select(Leave.status).where(Leave.id == leave_id).with_for_update()
        ).scalar()

    def compare_and_set_status(self, leave_id: int, expected: str, status: str, approved_by_id: int) -> bool:
        result = self.db.execute(
            update(Leave)
            .where(Leave.id == leave_id, Leave.status == expected)
            .values(status=status, approved_by_id=approved_by_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class FunTaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(FunTask).options(
            joinedload(FunTask.created_by),
            joinedload(FunTask.assigned_to),
        )

    def get(self, fun_task_id: int) -> Optional[FunTask]:
        return self._query().filter(FunTask.id == fun_task_id).first()

    def list(self, assigned_to_id: Optional[int] = None) -> List[FunTask]:
        query = self._query()
        if assigned_to_id is not None:
            query = query.filter(FunTask.assigned_to_id == assigned_to_id)
        return query.order_by(FunTask.id.desc()).all()

    def add(self, fun_task: FunTask) -> FunTask:
        self.db.add(fun_task)
        self.db.flush()
        return fun_task

    def delete(self, fun_task: FunTask) -> None:
        self.db.delete(fun_task)
        self.db.flush()

    def lock_for_transition(self, fun_task_id: int):
        """Return the (status, points, assigned_to_id, completed_at) row, locked where supported."""
        return self.db.execute(
            select(FunTask.status, FunTask.points, FunTask.assigned_to_id, FunTask.completed_at)
            .where(FunTask.id == fun_task_id)
            .with_for_update()
        ).first()

    def compare_and_set_status(self, fun_task_id: int, expected: str, status: str,
                               first_completion: bool = False, **values) -> bool:
        conditions = [FunTask.id == fun_task_id, FunTask.status == expected]
        if first_completion:
            conditions.append(FunTask.completed_at.is_(None))
        result = self.db.execute(
            update(FunTask)
            .where(*conditions)
            .values(status=status, **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class ProjectRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Project).options(
            joinedload(Project.manager),
            selectinload(Project.team_members),
            selectinload(Project.tasks).joinedload(Task.assigned_to),
        )

    def get(self, project_id: int) -> Optional[Project]:
        return self._query().filter(Project.id == project_id).first()

    def list(self, employee_id: Optional[int] = None) -> List[Project]:
        query = self._query()
        if employee_id is not None:
            member_of = select(project_team_members.c.project_id).where(
                project_team_members.c.employee_id == employee_id
            )
            query = query.filter(or_(Project.manager_id == employee_id, Project.id.in_(member_of)))
        return query.order_by(Project.start_date.desc(), Project.id.desc()).all()

    def add(self, project: Project) -> Project:
        self.db.add(project)
        self.db.flush()
        return project

    def delete(self, project: Project) -> None:
        self.db.delete(project)
        self.db.flush()

    def get_task(self, project_id: int, task_id: int) -> Optional[Task]:
        return (
            self.db.query(Task)
            .options(joinedload(Task.project))
            .filter(Task.id == task_id, Task.project_id == project_id)
            .first()
        )

    def add_task(self, task: Task) -> Task:
        self.db.add(task)
        self.db.flush()
        return task

    def delete_task(self, task: Task) -> None:
        self.db.delete(task)
        self.db.flush()


class Repositories:
    """Per-request bundle of repositories sharing one session."""

    def __init__(self, db: Session):
        self.db = db
        self.employees = EmployeeRepository(db)
        self.leaves = LeaveRepository(db)
        self.fun_tasks = FunTaskRepository(db)
        self.projects = ProjectRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, instance) -> None:
        self.db.refresh(instance)
