# models/__init__.py
"""
Models initialization file
Plain data objects; persistence is owned by the external row store
"""
from .errors import PlannerError, AuthError, StoreError, ParseError
from .identity import AuthEvent, AuthSession, Identity
from .task import (
    Task,
    TaskDraft,
    PRIORITY_LEVELS,
    TASK_CATEGORIES,
    DEFAULT_DUE_TIME,
    parse_due_datetime
)
