"""
Seed demo data for the default user (DEFAULT_USER_EMAIL).
Run:  python seed_demo_data.py
"""
import sys
from datetime import date, timedelta

# ── bootstrap ────────────────────────────────────────────────────
from app.api.deps import get_or_create_default_user
from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import TaskModel

from app.application.tasks import CreateTaskUseCase
from app.application.daily_logs import UpsertDailyLogUseCase
from app.application.clients import CreateClientUseCase
from app.application.invoices import CreateInvoiceUseCase
from app.application.projects import CreateProjectUseCase, AddProjectMemberUseCase
from app.application.team_members import CreateTeamMemberUseCase

db = get_session_factory()()
user = get_or_create_default_user(db)
ACCOUNT_ID = user.id
today = date.today()

existing = db.query(TaskModel).filter_by(account_id=ACCOUNT_ID, date=today).count()
if existing > 0:
    print(f"Today already has {existing} tasks, nothing to seed")
    sys.exit(0)

# ═══════════════════════════════════════════════════════════════
# Tasks for today
# ═══════════════════════════════════════════════════════════════
SAMPLE_TASKS = [
    ("Complete project presentation", "Finish the slides for the quarterly review meeting", "high", "done", True),
    ("Go for a 30-minute walk", "Get some fresh air and exercise", "medium", "done", False),
    ("Read 20 pages of book", 'Continue reading "Atomic Habits"', "low", "todo", False),
    ("Call mom", "Check in and catch up", "medium", "todo", True),
    ("Organize desk", "Clean up workspace and file documents", "low", "in_progress", False),
]

create_task = CreateTaskUseCase(db)
for title, description, priority, status, pinned in SAMPLE_TASKS:
    create_task.execute(
        account_id=ACCOUNT_ID, title=title, day=today, description=description,
        priority=priority, status=status, pinned=pinned,
    )
print(f"Tasks: {len(SAMPLE_TASKS)} for {today}")

# ═══════════════════════════════════════════════════════════════
# Daily log for today
# ═══════════════════════════════════════════════════════════════
UpsertDailyLogUseCase(db).execute(
    ACCOUNT_ID, today,
    journal_entry="Had a productive day! Completed the presentation and went for a nice walk.",
    mood="😊",
    water_glasses=6,
    exercised=True,
    sleep_hours=7.5,
)
print("Daily log: 1")

# ═══════════════════════════════════════════════════════════════
# Client + invoice
# ═══════════════════════════════════════════════════════════════
client = CreateClientUseCase(db).execute(
    ACCOUNT_ID, "Jane Smith", company="Acme Ltd", email="jane@acme.example",
)
invoice = CreateInvoiceUseCase(db).execute(
    account_id=ACCOUNT_ID,
    client_id=client.id,
    title="Website redesign",
    amount="1500.00",
    issue_date=today,
    due_date=today + timedelta(days=30),
    tax_rate=20,
)
print(f"Invoice: {invoice.invoice_number} for {client.name}")

# ═══════════════════════════════════════════════════════════════
# Project + team
# ═══════════════════════════════════════════════════════════════
project = CreateProjectUseCase(db).execute(
    ACCOUNT_ID, "Acme website", client_id=client.id, status="active",
    start_date=today, hourly_rate="95.00",
)
designer = CreateTeamMemberUseCase(db).execute(
    ACCOUNT_ID, "Sam Lee", email="sam@studio.example", role="Designer", hourly_rate="70.00",
)
AddProjectMemberUseCase(db).execute(project.id, ACCOUNT_ID, team_member_id=designer.id)
print(f"Project: {project.name} with 1 member")

db.close()
print("Done")
