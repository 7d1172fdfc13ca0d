"""
Leave Service
=============

Leave requests, approval workflow and the leaves_taken counter.

The counter follows the approved state: entering ``approved`` credits the
inclusive day count, leaving it debits the same amount. The status swap and
the counter update share one transaction and the swap is conditional on the
status read under lock, so concurrent reviews can never credit twice.
"""
import logging
from typing import List

from exceptions import NotFound, ValidationError
from models import Employee, Leave, LeaveStatus
from repositories import Repositories
from schemas import LeaveCreate, LeaveStatusUpdate
from services.access_control import authorize
from utils import inclusive_day_count

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def _get(self, leave_id: int) -> Leave:
        leave = self.repos.leaves.get(leave_id)
        if not leave:
            raise NotFound(f"Leave not found with id of {leave_id}")
        return leave

    # CREATE
    # ============================================================================

    def create(self, caller: Employee, payload: LeaveCreate) -> Leave:
        authorize(caller, "create", Leave)
        leave = Leave(
            employee_id=caller.id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            reason=payload.reason,
            status=LeaveStatus.PENDING.value,
        )
        self.repos.leaves.add(leave)
        self.repos.commit()
        logger.info(f"Leave {leave.id} requested by employee {caller.id}")
        return self._get(leave.id)

    # READ
    # ============================================================================

    def list_all(self, caller: Employee) -> List[Leave]:
        authorize(caller, "list_all", Leave, "Not authorized to list all leaves")
        return self.repos.leaves.list()

    def list_for_employee(self, caller: Employee, employee_id: int) -> List[Leave]:
        if caller.id != employee_id:
            authorize(caller, "list_all", Leave, "Not authorized to access these leaves")
        return self.repos.leaves.list(employee_id=employee_id)

    def get(self, caller: Employee, leave_id: int) -> Leave:
        leave = self._get(leave_id)
        authorize(caller, "read", leave, "Not authorized to access this leave")
        return leave

    # STATUS TRANSITION
    # ============================================================================

    def update_status(self, caller: Employee, leave_id: int, payload: LeaveStatusUpdate) -> Leave:
        leave = self._get(leave_id)
        authorize(caller, "update_status", leave, "Not authorized to update leave status")

        new_status = payload.status
        requester_id = leave.employee_id
        days = inclusive_day_count(leave.start_date, leave.end_date)

        try:
            previous = self.repos.leaves.lock_status(leave_id)
            if previous is None:
                raise NotFound(f"Leave not found with id of {leave_id}")
            if not self.repos.leaves.compare_and_set_status(leave_id, previous, new_status, caller.id):
                raise ValidationError(["Leave status changed concurrently, please retry"])

            approved = LeaveStatus.APPROVED.value
            if new_status == approved and previous != approved:
                self.repos.employees.adjust_leaves_taken(requester_id, days)
                logger.info(f"Leave {leave_id} approved by {caller.id}: +{days} days for employee {requester_id}")
            elif previous == approved and new_status != approved:
                self.repos.employees.adjust_leaves_taken(requester_id, -days)
                logger.info(f"Leave {leave_id} moved from approved to {new_status}: -{days} days for employee {requester_id}")

            self.repos.commit()
        except Exception:
            self.repos.rollback()
            raise

        return self._get(leave_id)

    # DELETE
    # ============================================================================

    def delete(self, caller: Employee, leave_id: int) -> None:
        leave = self._get(leave_id)
        authorize(caller, "delete", leave, "Not authorized to delete this leave")

        requester_id = leave.employee_id
        days = inclusive_day_count(leave.start_date, leave.end_date)
        try:
            if self.repos.leaves.lock_status(leave_id) == LeaveStatus.APPROVED.value:
                self.repos.employees.adjust_leaves_taken(requester_id, -days)
            self.repos.leaves.delete(leave)
            self.repos.commit()
        except Exception:
            self.repos.rollback()
            raise
        logger.info(f"Leave {leave_id} deleted by employee {caller.id}")
