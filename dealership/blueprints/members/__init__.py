# dealership/blueprints/members/__init__.py
"""
Members Blueprint для участников публичного сайта
"""

from flask import Blueprint

bp = Blueprint('members', __name__)

from dealership.blueprints.members import routes
