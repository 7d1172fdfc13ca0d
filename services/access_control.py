"""
Access Control
==============

One declarative table decides every role/ownership question in the API.

Each (resource, operation) maps to a tuple of clauses. A clause is a tuple
of predicates; the caller is allowed when every clause has at least one
predicate that holds. ``((is_manager_or_admin,), (is_creator, is_admin))``
therefore reads "a manager or admin, who is also the creator or an admin".

Predicates take ``(caller, record)``; ``record`` is None for operations
that do not target an existing row (create, list).
"""
import logging
from typing import Callable, Dict, Tuple, Union

from models import Employee, Leave, FunTask, Project, Task, Role
from exceptions import Forbidden

logger = logging.getLogger(__name__)

Predicate = Callable[[Employee, object], bool]


def anyone(caller, record) -> bool:
    return True


def is_admin(caller, record) -> bool:
    return caller.role == Role.ADMIN.value


def is_manager_or_admin(caller, record) -> bool:
    return caller.role in (Role.MANAGER.value, Role.ADMIN.value)


def is_self(caller, record) -> bool:
    return record is not None and record.id == caller.id


def is_leave_owner(caller, record) -> bool:
    return record is not None and record.employee_id == caller.id


def is_creator(caller, record) -> bool:
    return record is not None and record.created_by_id == caller.id


def is_project_manager(caller, record) -> bool:
    return record is not None and record.manager_id == caller.id


def is_team_member(caller, record) -> bool:
    return record is not None and caller.id in record.team_member_ids


def is_task_assignee(caller, record) -> bool:
    return record is not None and record.assigned_to_id == caller.id


def is_task_project_manager(caller, record) -> bool:
    return record is not None and record.project.manager_id == caller.id


Rule = Tuple[Tuple[Predicate, ...], ...]

RULES: Dict[str, Dict[str, Rule]] = {
    "employee": {
        "read": ((anyone,),),
        "list": ((is_manager_or_admin,),),
        "update_self": ((is_self,),),
        "update": ((is_admin,),),
        "delete": ((is_admin,),),
    },
    "leave": {
        "create": ((anyone,),),
        "read": ((is_leave_owner, is_manager_or_admin),),
        "list_all": ((is_manager_or_admin,),),
        "update_status": ((is_manager_or_admin,),),
        "delete": ((is_leave_owner, is_admin),),
    },
    "fun_task": {
        "read": ((anyone,),),
        "list": ((anyone,),),
        "create": ((is_manager_or_admin,),),
        "update": ((is_creator, is_admin),),
        "delete": ((is_manager_or_admin,), (is_creator, is_admin)),
    },
    "project": {
        "read": ((is_team_member, is_project_manager, is_admin),),
        "create": ((is_manager_or_admin,),),
        "update": ((is_manager_or_admin,), (is_project_manager, is_admin)),
        "delete": ((is_manager_or_admin,), (is_project_manager, is_admin)),
        "add_task": ((is_manager_or_admin,), (is_project_manager, is_admin)),
    },
    "task": {
        "update": ((is_task_assignee, is_task_project_manager, is_admin),),
        "delete": ((is_manager_or_admin,), (is_task_project_manager, is_admin)),
    },
}

_RESOURCE_NAMES = {
    Employee: "employee",
    Leave: "leave",
    FunTask: "fun_task",
    Project: "project",
    Task: "task",
}


def resource_name(resource: Union[type, object]) -> str:
    cls = resource if isinstance(resource, type) else type(resource)
    try:
        return _RESOURCE_NAMES[cls]
    except KeyError:
        raise LookupError(f"No access rules for {cls.__name__}")


def can_access(caller: Employee, operation: str, resource: Union[type, object]) -> bool:
    """
    Decide whether ``caller`` may perform ``operation`` on ``resource``.

    ``resource`` is either a model instance or, for create/list operations,
    the model class itself. Unknown operations are denied.
    """
    rules = RULES[resource_name(resource)]
    rule = rules.get(operation)
    if rule is None:
        return False
    record = None if isinstance(resource, type) else resource
    return all(any(predicate(caller, record) for predicate in clause) for clause in rule)


def authorize(caller: Employee, operation: str, resource: Union[type, object], message: str = None) -> None:
    """Raise Forbidden unless ``can_access`` allows the operation."""
    if not can_access(caller, operation, resource):
        name = resource_name(resource)
        logger.warning(f"Denied {operation} on {name} for employee {caller.id} ({caller.role})")
        raise Forbidden(message or f"Not authorized to {operation.replace('_', ' ')} {name.replace('_', ' ')}")
