# dealership/blueprints/dashboard/__init__.py
"""
Dashboard Blueprint: статистика и отчеты бэк-офиса
"""

from flask import Blueprint

bp = Blueprint('dashboard', __name__)

from dealership.blueprints.dashboard import routes
