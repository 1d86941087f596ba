import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
START_SCHEDULER = False
STATUS_SWEEP_SECONDS = 15.0
FINALIZATION_SWEEP_SECONDS = 60.0

PRESENT_RATIO = 0.70
IDLE_RATIO = 0.30

FACE_SERVICE_URL = None
FACE_SERVICE_TIMEOUT_SECONDS = 10.0
