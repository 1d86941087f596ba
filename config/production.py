import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_attendance_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

START_SCHEDULER = bool(int(os.getenv("START_SCHEDULER", "1")))
STATUS_SWEEP_SECONDS = float(os.getenv("STATUS_SWEEP_SECONDS", "15"))
FINALIZATION_SWEEP_SECONDS = float(os.getenv("FINALIZATION_SWEEP_SECONDS", "60"))

PRESENT_RATIO = float(os.getenv("PRESENT_RATIO", "0.70"))
IDLE_RATIO = float(os.getenv("IDLE_RATIO", "0.30"))

FACE_SERVICE_URL = os.getenv("FACE_SERVICE_URL") or None
FACE_SERVICE_TIMEOUT_SECONDS = float(os.getenv("FACE_SERVICE_TIMEOUT_SECONDS", "10"))
