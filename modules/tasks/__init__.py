# modules/tasks/__init__.py
"""
Tasks Module - the task board: list, search, add, complete
"""

from flask import Blueprint

tasks_bp = Blueprint('tasks', __name__, url_prefix='/tasks')

from . import routes  # noqa: E402,F401
