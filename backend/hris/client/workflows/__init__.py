from hris.client.workflows.formatting import filter_records, format_currency, format_income_limit, format_percent
from hris.client.workflows.movements import (
    ActionResult,
    MovementActionError,
    MovementActions,
    can_apply,
    can_delete,
    movement_stats,
    search_movements,
)
from hris.client.workflows.notifications import NotificationPoller
from hris.client.workflows.payroll import PayrollOverview, load_payroll_overview, seed_all_tax_data

__all__ = [
    "ActionResult",
    "MovementActionError",
    "MovementActions",
    "NotificationPoller",
    "PayrollOverview",
    "can_apply",
    "can_delete",
    "filter_records",
    "format_currency",
    "format_income_limit",
    "format_percent",
    "load_payroll_overview",
    "movement_stats",
    "search_movements",
    "seed_all_tax_data",
]
