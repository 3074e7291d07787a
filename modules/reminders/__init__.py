# modules/reminders/__init__.py
"""
Reminders Module - time-based task reminders for the open board
"""

from flask import Blueprint

reminders_bp = Blueprint('reminders', __name__, url_prefix='/reminders')

from . import routes  # noqa: E402,F401
