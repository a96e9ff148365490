# dealership/blueprints/auth/__init__.py
"""
Auth Blueprint: вход, приглашения, сброс пароля и первичная настройка
"""

from flask import Blueprint

bp = Blueprint('auth', __name__)
setup_bp = Blueprint('setup', __name__)

from dealership.blueprints.auth import routes
