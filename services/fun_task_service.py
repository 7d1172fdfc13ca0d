"""
Fun Task Service - discretionary tasks that award points on completion
"""
import logging
from typing import List, Optional

from exceptions import NotFound, ValidationError
from models import Employee, FunTask, FunTaskStatus
from repositories import Repositories
from schemas import FunTaskCreate, FunTaskUpdate
from services.access_control import authorize
from utils import utc_now

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "points", "assigned_to_id")


class FunTaskService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def _get(self, fun_task_id: int) -> FunTask:
        fun_task = self.repos.fun_tasks.get(fun_task_id)
        if not fun_task:
            raise NotFound(f"Fun task not found with id of {fun_task_id}")
        return fun_task

    def _check_assignee(self, assignee_id: int) -> None:
        if not self.repos.employees.get(assignee_id):
            raise ValidationError([f"Employee not found with id of {assignee_id}"])

    def create(self, caller: Employee, payload: FunTaskCreate) -> FunTask:
        authorize(caller, "create", FunTask, "Not authorized to create fun tasks")
        self._check_assignee(payload.assigned_to_id)

        fun_task = FunTask(
            title=payload.title,
            description=payload.description,
            points=payload.points,
            assigned_to_id=payload.assigned_to_id,
            created_by_id=caller.id,
            status=FunTaskStatus.PENDING.value,
        )
        self.repos.fun_tasks.add(fun_task)
        self.repos.commit()
        logger.info(f"Fun task {fun_task.id} ({fun_task.points} pts) created by {caller.id}")
        return self._get(fun_task.id)

    def list(self, caller: Employee, assigned_to_id: Optional[int] = None) -> List[FunTask]:
        authorize(caller, "list", FunTask)
        return self.repos.fun_tasks.list(assigned_to_id=assigned_to_id)

    def get(self, caller: Employee, fun_task_id: int) -> FunTask:
        fun_task = self._get(fun_task_id)
        authorize(caller, "read", fun_task)
        return fun_task

    def update(self, caller: Employee, fun_task_id: int, payload: FunTaskUpdate) -> FunTask:
        """
        Update a fun task (creator or admin).

        The first move into ``completed`` stamps completed_at and credits the
        assignee with the task's points. A task that was completed before
        keeps its original stamp and awards nothing when it re-enters
        ``completed``.
        """
        fun_task = self._get(fun_task_id)
        authorize(caller, "update", fun_task, "Not authorized to update this task")

        data = payload.model_dump(exclude_unset=True)
        if "assigned_to_id" in data:
            self._check_assignee(data["assigned_to_id"])

        try:
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(fun_task, field, data[field])
            self.repos.db.flush()

            if "status" in data:
                self._transition(caller, fun_task_id, data["status"])

            self.repos.commit()
        except Exception:
            self.repos.rollback()
            raise

        return self._get(fun_task_id)

    def _transition(self, caller: Employee, fun_task_id: int, new_status: str) -> None:
        row = self.repos.fun_tasks.lock_for_transition(fun_task_id)
        if row is None:
            raise NotFound(f"Fun task not found with id of {fun_task_id}")
        previous, points, assignee_id, completed_at = row

        completed = FunTaskStatus.COMPLETED.value
        first_completion = new_status == completed and previous != completed and completed_at is None

        values = {"completed_at": utc_now()} if first_completion else {}
        swapped = self.repos.fun_tasks.compare_and_set_status(
            fun_task_id, previous, new_status, first_completion=first_completion, **values
        )
        if not swapped:
            raise ValidationError(["Fun task status changed concurrently, please retry"])

        if first_completion:
            self.repos.employees.add_fun_task_points(assignee_id, points)
            logger.info(f"Fun task {fun_task_id} completed: +{points} pts for employee {assignee_id} (by {caller.id})")

    def delete(self, caller: Employee, fun_task_id: int) -> None:
        fun_task = self._get(fun_task_id)
        authorize(caller, "delete", fun_task, "Not authorized to delete this task")
        self.repos.fun_tasks.delete(fun_task)
        self.repos.commit()
        logger.info(f"Fun task {fun_task_id} deleted by {caller.id}")
