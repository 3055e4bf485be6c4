from fastapi import APIRouter

from hris.api.v1 import (
    attendance,
    auth,
    companies,
    documents,
    employees,
    holidays,
    leave,
    movements,
    notifications,
    organization,
    overtime,
    payroll_settings,
    performance,
    rbac,
    templates,
    upload,
    users,
)

api_router = APIRouter()
# Auth must stay reachable without a token
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(rbac.router, prefix="/rbac", tags=["rbac"])

# Organization structure
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(organization.departments_router, prefix="/departments", tags=["departments"])
api_router.include_router(organization.positions_router, prefix="/positions", tags=["positions"])
api_router.include_router(organization.work_locations_router, prefix="/work-locations", tags=["work-locations"])

# Workforce
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(movements.router, prefix="/employee-movements", tags=["employee-movements"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(leave.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(overtime.router, prefix="/overtime", tags=["overtime"])
api_router.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
api_router.include_router(performance.router, prefix="/performance-reviews", tags=["performance-reviews"])
api_router.include_router(payroll_settings.router, prefix="/payroll-settings", tags=["payroll-settings"])

# Documents and notifications
api_router.include_router(documents.router, prefix="/documents/employee", tags=["employee-documents"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
