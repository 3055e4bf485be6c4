"""
Approval actions for employee movements.

The guards mirror the server's state machine so obviously invalid actions
never reach the network; the server re-checks every transition.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from hris.client.http import ApiError, Notifier
from hris.client.services.movements import EmployeeMovementService
from hris.client.workflows.formatting import filter_records

logger = logging.getLogger("hris.client.movements")

DELETABLE_STATUSES = ("draft", "pending")
SEARCH_FIELDS = ("employee.full_name", "employee.employee_id")


class MovementActionError(ValueError):
    """A movement action was refused before any request was sent."""


@dataclass
class ActionResult:
    ok: bool
    message: str
    movement: Optional[dict] = None


def can_apply(movement: dict) -> bool:
    return movement.get("status") == "approved" and not movement.get("is_applied")


def can_delete(movement: dict) -> bool:
    return movement.get("status") in DELETABLE_STATUSES


def movement_stats(movements: Iterable[dict]) -> dict:
    movements = list(movements)
    return {
        "total": len(movements),
        "pending": sum(1 for m in movements if m.get("status") == "pending"),
        "approved": sum(1 for m in movements if m.get("status") == "approved"),
        "applied": sum(1 for m in movements if m.get("status") == "applied"),
    }


def search_movements(movements: Iterable[dict], search: Optional[str]) -> List[dict]:
    """Match by employee name or employee number."""
    return filter_records(movements, search, SEARCH_FIELDS)


def _employee_name(movement: dict) -> str:
    employee = movement.get("employee") or {}
    return employee.get("full_name") or f"employee #{movement.get('employee_id')}"


class MovementActions:
    def __init__(self, service: EmployeeMovementService, notifier: Optional[Notifier] = None):
        self.service = service
        self.notify = notifier or service.api.notify

    async def approve(self, movement: dict, notes: Optional[str] = None) -> ActionResult:
        return await self._run(
            self.service.approve(movement["id"], notes),
            f"Movement for {_employee_name(movement)} has been approved",
            "Failed to approve movement",
        )

    async def reject(self, movement: dict, reason: Optional[str]) -> ActionResult:
        if not reason or not reason.strip():
            self.notify("Please provide rejection reason")
            raise MovementActionError("Rejection reason is required")
        return await self._run(
            self.service.reject(movement["id"], reason.strip()),
            f"Movement for {_employee_name(movement)} has been rejected",
            "Failed to reject movement",
        )

    async def apply(self, movement: dict) -> ActionResult:
        if not can_apply(movement):
            raise MovementActionError("Only approved movements that are not yet applied can be applied")
        return await self._run(
            self.service.apply(movement["id"]),
            f"Movement for {_employee_name(movement)} has been applied to employee data",
            "Failed to apply movement",
        )

    async def delete(self, movement: dict) -> ActionResult:
        if not can_delete(movement):
            raise MovementActionError(f"Cannot delete a {movement.get('status')} movement")
        return await self._run(
            self.service.delete(movement["id"]),
            "Movement deleted successfully",
            "Failed to delete movement",
        )

    async def _run(self, call, success: str, failure: str) -> ActionResult:
        try:
            updated = await call
        except ApiError as e:
            logger.error(f"{failure}: {e.message}")
            self.notify(failure)
            return ActionResult(ok=False, message=failure)
        return ActionResult(ok=True, message=success, movement=updated)
