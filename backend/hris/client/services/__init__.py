from hris.client.http import ApiClient
from hris.client.services.attendance import AttendanceService
from hris.client.services.auth import AuthService
from hris.client.services.companies import CompanyService
from hris.client.services.departments import DepartmentService
from hris.client.services.employee_documents import EmployeeDocumentService
from hris.client.services.employees import EmployeeService
from hris.client.services.holidays import HolidayService
from hris.client.services.leave import LeaveService
from hris.client.services.movements import EmployeeMovementService
from hris.client.services.notifications import NotificationService
from hris.client.services.overtime import OvertimeService
from hris.client.services.payroll_settings import PayrollSettingsService
from hris.client.services.performance import PerformanceReviewService
from hris.client.services.positions import PositionService
from hris.client.services.rbac import RbacService
from hris.client.services.templates import TemplateService
from hris.client.services.upload import UploadService
from hris.client.services.users import UserService
from hris.client.services.work_locations import WorkLocationService


class Services:
    """Every resource service bound to one ApiClient."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.auth = AuthService(api)
        self.users = UserService(api)
        self.rbac = RbacService(api)
        self.companies = CompanyService(api)
        self.departments = DepartmentService(api)
        self.positions = PositionService(api)
        self.work_locations = WorkLocationService(api)
        self.employees = EmployeeService(api)
        self.movements = EmployeeMovementService(api)
        self.attendance = AttendanceService(api)
        self.leave = LeaveService(api)
        self.overtime = OvertimeService(api)
        self.holidays = HolidayService(api)
        self.payroll_settings = PayrollSettingsService(api)
        self.templates = TemplateService(api)
        self.employee_documents = EmployeeDocumentService(api)
        self.notifications = NotificationService(api)
        self.uploads = UploadService(api)
        self.performance = PerformanceReviewService(api)


__all__ = [
    "AttendanceService",
    "AuthService",
    "CompanyService",
    "DepartmentService",
    "EmployeeDocumentService",
    "EmployeeMovementService",
    "EmployeeService",
    "HolidayService",
    "LeaveService",
    "NotificationService",
    "OvertimeService",
    "PayrollSettingsService",
    "PerformanceReviewService",
    "PositionService",
    "RbacService",
    "Services",
    "TemplateService",
    "UploadService",
    "UserService",
    "WorkLocationService",
]
