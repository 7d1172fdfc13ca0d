"""
Project Service - projects, team membership and nested tasks
"""
import logging
from typing import List, Optional

from exceptions import NotFound, ValidationError
from models import Employee, Project, Task
from repositories import Repositories
from schemas import ProjectCreate, ProjectUpdate, TaskCreate, TaskUpdate
from services.access_control import authorize, can_access

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ("name", "description", "start_date", "end_date", "status")
TASK_FIELDS = ("name", "description", "assigned_to_id", "status", "due_date")


class ProjectService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def _get(self, project_id: int) -> Project:
        project = self.repos.projects.get(project_id)
        if not project:
            raise NotFound(f"Project not found with id of {project_id}")
        return project

    def _get_task(self, project_id: int, task_id: int) -> Task:
        task = self.repos.projects.get_task(project_id, task_id)
        if not task:
            raise NotFound("Project or task not found")
        return task

    def _resolve_members(self, member_ids: List[int]) -> List[Employee]:
        members = self.repos.employees.get_many(member_ids)
        missing = sorted(set(member_ids) - {member.id for member in members})
        if missing:
            raise ValidationError([f"Team members not found: {', '.join(str(i) for i in missing)}"])
        return members

    def _check_assignee(self, assignee_id: Optional[int]) -> None:
        if assignee_id is not None and not self.repos.employees.get(assignee_id):
            raise ValidationError([f"Employee not found with id of {assignee_id}"])

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create(self, caller: Employee, payload: ProjectCreate) -> Project:
        authorize(caller, "create", Project, "Not authorized to create projects")
        members = self._resolve_members(payload.team_members)

        project = Project(
            name=payload.name,
            description=payload.description,
            start_date=payload.start_date,
            end_date=payload.end_date,
            status=payload.status,
            manager_id=caller.id,
            team_members=members,
        )
        self.repos.projects.add(project)
        self.repos.commit()
        logger.info(f"Project {project.id} created by manager {caller.id} with {len(members)} members")
        return self._get(project.id)

    def list(self, caller: Employee, employee_id: Optional[int] = None) -> List[Project]:
        projects = self.repos.projects.list(employee_id=employee_id)
        return [project for project in projects if can_access(caller, "read", project)]

    def get(self, caller: Employee, project_id: int) -> Project:
        project = self._get(project_id)
        authorize(caller, "read", project, "Not authorized to access this project")
        return project

    def update(self, caller: Employee, project_id: int, payload: ProjectUpdate) -> Project:
        project = self._get(project_id)
        authorize(caller, "update", project, "Not authorized to update this project")
        data = payload.model_dump(exclude_unset=True)

        # one side of the range may come from the stored project
        start = data.get("start_date", project.start_date)
        end = data.get("end_date", project.end_date)
        if end <= start:
            raise ValidationError(["End date must be after start date"])

        members = None
        if "team_members" in data:
            members = self._resolve_members(data["team_members"] or [])

        for field in PROJECT_FIELDS:
            if field in data:
                setattr(project, field, data[field])
        if members is not None:
            # Full replacement of the membership set
            project.team_members = members

        self.repos.commit()
        logger.info(f"Project {project_id} updated by {caller.id}")
        return self._get(project_id)

    def delete(self, caller: Employee, project_id: int) -> None:
        project = self._get(project_id)
        authorize(caller, "delete", project, "Not authorized to delete this project")
        self.repos.projects.delete(project)
        self.repos.commit()
        logger.info(f"Project {project_id} deleted by {caller.id}")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(self, caller: Employee, project_id: int, payload: TaskCreate) -> Project:
        project = self._get(project_id)
        authorize(caller, "add_task", project, "Not authorized to add tasks to this project")
        self._check_assignee(payload.assigned_to_id)

        task = Task(
            project_id=project.id,
            name=payload.name,
            description=payload.description,
            assigned_to_id=payload.assigned_to_id,
            status=payload.status,
            due_date=payload.due_date,
        )
        self.repos.projects.add_task(task)
        self.repos.commit()
        logger.info(f"Task {task.id} added to project {project_id} by {caller.id}")
        return self._get(project_id)

    def update_task(self, caller: Employee, project_id: int, task_id: int, payload: TaskUpdate) -> Project:
        task = self._get_task(project_id, task_id)
        authorize(caller, "update", task, "Not authorized to update this task")
        data = payload.model_dump(exclude_unset=True)
        self._check_assignee(data.get("assigned_to_id"))

        for field in TASK_FIELDS:
            if field in data:
                setattr(task, field, data[field])

        self.repos.commit()
        return self._get(project_id)

    def delete_task(self, caller: Employee, project_id: int, task_id: int) -> Project:
        task = self._get_task(project_id, task_id)
        authorize(caller, "delete", task, "Not authorized to delete this task")
        self.repos.projects.delete_task(task)
        self.repos.commit()
        logger.info(f"Task {task_id} removed from project {project_id} by {caller.id}")
        return self._get(project_id)
