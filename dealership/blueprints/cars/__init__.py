# dealership/blueprints/cars/__init__.py
"""
Cars Blueprint для каталога опубликованных автомобилей
"""

from flask import Blueprint

bp = Blueprint('cars', __name__)

from dealership.blueprints.cars import routes
