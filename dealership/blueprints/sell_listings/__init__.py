# dealership/blueprints/sell_listings/__init__.py
"""
Sell Listings Blueprint для заявок продавцов и их модерации
"""

from flask import Blueprint

bp = Blueprint('sell_listings', __name__)

from dealership.blueprints.sell_listings import routes
