SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "classroom_portal_test",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
EMAIL_CASE_SENSITIVE = True

# "remember me" sessions last this many days
SESSION_LIFETIME_DAYS = 7
