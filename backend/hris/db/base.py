# Import all the models, so that Base has them before being
# imported by Alembic
from hris.db.base_class import Base  # noqa
from hris.core.audit import AuditLog  # noqa
from hris.models import (  # noqa
    Company,
    Department,
    Position,
    WorkLocation,
    Employee,
    User,
    Role,
    Permission,
    RefreshToken,
    EmployeeMovement,
    Attendance,
    LeaveType,
    LeaveRequest,
    LeaveBalance,
    PayrollSetting,
    TaxConfiguration,
    TaxBracket,
    PTKP,
    Template,
    Notification,
    PerformanceReview,
    Holiday,
    OvertimeRequest,
    EmployeeDocument,
)
