# modules/auth/__init__.py
"""
Auth Module - sign in, sign up, sign out against the identity service
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

# Import routes so they register with the blueprint
from . import routes  # noqa: E402,F401
