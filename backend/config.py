"""
Configuration: environment settings and the fixed enumerations used by the
production forms, the aggregator and the exporter.
"""

import os

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./production.db")

# Supabase/Heroku sometimes return postgres://; SQLAlchemy requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

SHEETS_API_URL = os.environ.get("SHEETS_API_URL", "")
SYNC_TIMEOUT = float(os.environ.get("SYNC_TIMEOUT", "10"))

ORG_NAME = os.environ.get("ORG_NAME", "Halagel")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Bootstrap account created when the user list is empty
DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123")

# Lifetime of a login token
SESSION_TTL_HOURS = float(os.environ.get("SESSION_TTL_HOURS", "12"))

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------
CATEGORIES = ["Liquid", "Semi-Solid", "Solid"]

# Order matters: the dashboard breakdown lists processes in this order
PROCESSES = ["Mixing", "Filling", "Packing", "Labeling", "Quality Check"]
OTHER_PROCESS = "Other"

UNITS = ["KG", "L", "PCS", "BOX"]

ROLES = ["admin", "manager", "planner", "operator"]

# ---------------------------------------------------------------------------
# Store collections
# ---------------------------------------------------------------------------
PRODUCTION = "production"
USERS = "users"
OFF_DAYS = "off_days"
LOGS = "logs"
SETTINGS = "settings"
SESSIONS = "sessions"

COLLECTIONS = [PRODUCTION, USERS, OFF_DAYS, LOGS, SETTINGS, SESSIONS]

# Collections mirrored to the spreadsheet bridge. Settings and sessions stay local.
SYNCED_COLLECTIONS = [PRODUCTION, USERS, OFF_DAYS, LOGS]
