# dealership/blueprints/service_center/__init__.py
"""
Service Center Blueprint: каталог услуг и записи на сервис
"""

from flask import Blueprint

services_bp = Blueprint('services', __name__)
bookings_bp = Blueprint('service_bookings', __name__)

from dealership.blueprints.service_center import routes
