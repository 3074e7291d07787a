import os
from datetime import timedelta

class Config:
    # Basic Flask config
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # App settings
    APP_NAME = os.environ.get('APP_NAME', 'SomedayMaybe')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Session
    SESSION_TYPE = 'filesystem'
    SESSION_FILE_DIR = os.environ.get('SESSION_FILE_DIR', 'flask_session')
    SESSION_PERMANENT = False
    SESSION_USE_SIGNER = True
    SESSION_KEY_PREFIX = 'someday:'
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # Backend-as-a-service (identity + row store)
    # Description: project URL and public anon key; row filtering per user
    # happens on the service side using the signed-in access token
    BACKEND_URL = os.environ.get('BACKEND_URL', 'http://localhost:54321')
    BACKEND_ANON_KEY = os.environ.get('BACKEND_ANON_KEY', '')
    BACKEND_TIMEOUT = int(os.environ.get('BACKEND_TIMEOUT', 10))   # seconds
    BACKEND_TASKS_TABLE = os.environ.get('BACKEND_TASKS_TABLE', 'tasks')

    # Reminders
    REMINDER_INTERVAL_SECONDS = float(os.environ.get('REMINDER_INTERVAL_SECONDS', 60))
    REMINDER_SUPPRESS_REPEATS = os.environ.get('REMINDER_SUPPRESS_REPEATS', 'False').lower() == 'true'
    NOTICE_POLL_SECONDS = float(os.environ.get('NOTICE_POLL_SECONDS', 10))   # page -> /reminders/poll

    # Boards untouched this long are closed (subscription and reminder timer
    # released); the next request signs back in from the stored tokens
    BOARD_IDLE_SECONDS = float(os.environ.get('BOARD_IDLE_SECONDS', 30 * 60))
