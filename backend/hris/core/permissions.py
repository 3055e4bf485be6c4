"""Built-in permissions and roles seeded into a fresh database."""

# (name, group, description)
DEFAULT_PERMISSIONS = [
    ("company:read", "company", "View companies"),
    ("company:manage", "company", "Create, update and delete companies"),
    ("department:read", "organization", "View departments"),
    ("department:manage", "organization", "Create, update and delete departments"),
    ("position:read", "organization", "View positions"),
    ("position:manage", "organization", "Create, update and delete positions"),
    ("work_location:read", "organization", "View work locations"),
    ("work_location:manage", "organization", "Create, update and delete work locations"),
    ("employee:read", "employee", "View employees"),
    ("employee:create", "employee", "Create employees"),
    ("employee:update", "employee", "Update employees"),
    ("employee:delete", "employee", "Deactivate employees"),
    ("movement:read", "movement", "View employee movements"),
    ("movement:create", "movement", "Request employee movements"),
    ("movement:approve", "movement", "Approve or reject employee movements"),
    ("movement:apply", "movement", "Apply approved movements to employee records"),
    ("attendance:read", "attendance", "View attendance records of others"),
    ("attendance:manage", "attendance", "Correct attendance records"),
    ("leave:read", "leave", "View leave requests of others"),
    ("leave:approve", "leave", "Approve or reject leave requests"),
    ("leave:manage", "leave", "Manage leave balances"),
    ("overtime:read", "overtime", "View overtime requests of others"),
    ("overtime:approve", "overtime", "Approve or reject overtime requests"),
    ("holiday:manage", "holiday", "Maintain the holiday calendar"),
    ("payroll:read", "payroll", "View payroll settings and tax tables"),
    ("payroll:manage", "payroll", "Change payroll settings and tax tables"),
    ("performance:read", "performance", "View performance reviews"),
    ("performance:manage", "performance", "Create and update performance reviews"),
    ("template:read", "template", "View and download templates"),
    ("template:manage", "template", "Upload and edit templates"),
    ("document:read", "document", "View employee documents"),
    ("document:manage", "document", "Upload, verify and delete employee documents"),
    ("user:read", "administration", "View user accounts"),
    ("user:manage", "administration", "Create, update and delete user accounts"),
    ("role:manage", "administration", "Manage roles and permissions"),
]

# name -> (display name, level, permission names; None means every permission)
DEFAULT_ROLES = {
    "super_admin": ("Super Admin", 100, None),
    "hr_admin": ("HR Admin", 80, [
        name for name, _, _ in DEFAULT_PERMISSIONS
        if not name.startswith(("role:", "user:manage"))
    ]),
    "manager": ("Manager", 50, [
        "company:read", "department:read", "position:read", "work_location:read",
        "employee:read", "movement:read", "movement:create",
        "attendance:read", "leave:read", "leave:approve", "overtime:read", "overtime:approve",
        "performance:read", "performance:manage", "template:read",
    ]),
    "employee": ("Employee", 10, ["template:read"]),
}
