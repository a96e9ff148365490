# dealership/blueprints/support/__init__.py
"""
Support Blueprint для обращений клиентов (тикетов)
"""

from flask import Blueprint

support_bp = Blueprint('support', __name__)

from dealership.blueprints.support import routes
