from hris.models.company import Company  # noqa
from hris.models.organization import Department, Position  # noqa
from hris.models.work_location import WorkLocation  # noqa
from hris.models.employee import Employee  # noqa
from hris.models.user import User, Role, Permission  # noqa
from hris.models.refresh_token import RefreshToken  # noqa
from hris.models.movement import EmployeeMovement  # noqa
from hris.models.attendance import Attendance  # noqa
from hris.models.leave import LeaveType, LeaveRequest, LeaveBalance  # noqa
from hris.models.payroll import PayrollSetting, TaxConfiguration, TaxBracket, PTKP  # noqa
from hris.models.template import Template  # noqa
from hris.models.notification import Notification  # noqa
from hris.models.performance import PerformanceReview  # noqa
from hris.models.holiday import Holiday  # noqa
from hris.models.overtime import OvertimeRequest  # noqa
from hris.models.document import EmployeeDocument  # noqa
