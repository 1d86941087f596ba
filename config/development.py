import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_attendance_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Background sweeps: event status every 15s, attendance finalization every minute
START_SCHEDULER = bool(int(os.getenv("START_SCHEDULER", "1")))
STATUS_SWEEP_SECONDS = float(os.getenv("STATUS_SWEEP_SECONDS", "15"))
FINALIZATION_SWEEP_SECONDS = float(os.getenv("FINALIZATION_SWEEP_SECONDS", "60"))

# Share of the event a student must spend inside the venue
PRESENT_RATIO = float(os.getenv("PRESENT_RATIO", "0.70"))
IDLE_RATIO = float(os.getenv("IDLE_RATIO", "0.30"))

# Face verification is off unless a service URL is configured
FACE_SERVICE_URL = os.getenv("FACE_SERVICE_URL") or None
FACE_SERVICE_TIMEOUT_SECONDS = float(os.getenv("FACE_SERVICE_TIMEOUT_SECONDS", "10"))
