import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "umeedai_test"),
}

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

AUDIT_LOG_PATH = os.getenv("AUDIT_LOG_PATH", "logs/audit-test.log")

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
