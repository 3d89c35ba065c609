"""Project and team rules"""

# Project statuses
PROJECT_STATUS_PLANNING = "planning"
PROJECT_STATUS_ACTIVE = "active"
PROJECT_STATUS_ON_HOLD = "on_hold"
PROJECT_STATUS_COMPLETED = "completed"
PROJECT_STATUS_CANCELLED = "cancelled"

PROJECT_STATUSES = [
    PROJECT_STATUS_PLANNING,
    PROJECT_STATUS_ACTIVE,
    PROJECT_STATUS_ON_HOLD,
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_CANCELLED,
]

# How the owner (or a project member) is paid
PAYMENT_TYPE_HOURLY = "hourly_rate"
PAYMENT_TYPE_FIXED = "fixed_budget"

PAYMENT_TYPES = [PAYMENT_TYPE_HOURLY, PAYMENT_TYPE_FIXED]

# Member payout state
PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_PAID = "paid"
PAYMENT_STATUS_OVERDUE = "overdue"

PAYMENT_STATUSES = [PAYMENT_STATUS_PENDING, PAYMENT_STATUS_PAID, PAYMENT_STATUS_OVERDUE]

PROJECT_FIELDS = (
    "client_id", "name", "description", "status", "start_date", "end_date",
    "payment_type", "budget", "hourly_rate", "personal_project", "notes",
)

TEAM_MEMBER_FIELDS = ("name", "email", "role", "hourly_rate", "is_active", "notes")

PROJECT_MEMBER_FIELDS = (
    "name", "role", "email", "hourly_rate", "payment_type", "payment_amount",
    "payment_status", "is_active", "left_date", "notes",
)
