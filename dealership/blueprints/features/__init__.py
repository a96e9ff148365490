# dealership/blueprints/features/__init__.py
"""
Features Blueprint для справочника особенностей комплектации
"""

from flask import Blueprint

bp = Blueprint('features', __name__)

from dealership.blueprints.features import routes
