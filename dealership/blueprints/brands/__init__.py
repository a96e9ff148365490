# dealership/blueprints/brands/__init__.py
"""
Brands Blueprint для справочника марок
"""

from flask import Blueprint

bp = Blueprint('brands', __name__)

from dealership.blueprints.brands import routes
