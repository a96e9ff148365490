# tests/conftest.py
from decimal import Decimal

import pytest

from dealership import create_app
from dealership.config import TestingConfig
from dealership.extensions import db as _db
from dealership.models import (
    User, UserRole, UserStatus, Brand, SellListing, SellListingImage, ListingStatus
)


@pytest.fixture
def app():
    app = create_app(TestingConfig)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def _create_user(email, role, status=UserStatus.ACTIVE, password='secret-password'):
    user = User(email=email, name=email.split('@')[0].title(), role=role, status=status)
    user.set_password(password)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return _create_user('admin@example.com', UserRole.ADMIN)


@pytest.fixture
def super_admin_user(app):
    return _create_user('root@example.com', UserRole.SUPER_ADMIN)


@pytest.fixture
def staff_user(app):
    return _create_user('staff@example.com', UserRole.USER)


def _headers_for(user):
    tokens = user.generate_tokens()
    return {'Authorization': f"Bearer {tokens['access_token']}"}


@pytest.fixture
def auth_headers(admin_user):
    return _headers_for(admin_user)


@pytest.fixture
def super_admin_headers(super_admin_user):
    return _headers_for(super_admin_user)


@pytest.fixture
def staff_headers(staff_user):
    return _headers_for(staff_user)


@pytest.fixture
def make_brand(app):
    def factory(name, logo_url='https://cdn.example.com/logo.png'):
        brand = Brand(name=name, logo_url=logo_url)
        _db.session.add(brand)
        _db.session.commit()
        return brand
    return factory


@pytest.fixture
def make_listing(app):
    """Заявка продавца с заданными изображениями"""
    def factory(image_urls=(), listing_id=None, **overrides):
        values = {
            'name': 'Jane Seller',
            'email': 'jane@example.com',
            'phone_number': '+254700000000',
            'car_name': 'Civic 1.8 EX',
            'description': 'Well maintained, single owner. ' * 10,
            'color': 'Silver',
            'location': 'Nairobi',
            'mileage': 84000,
            'brand_name': 'Honda',
            'car_type': 'Sedan',
            'year_of_manufacture': 2016,
            'engine_size': 1.8,
            'fuel_type': 'Petrol',
            'transmission': 'Automatic',
            'drive_type': 'FWD',
            'horse_power': 140,
            'seating_capacity': 5,
            'condition': 'GOOD',
            'selling_price': Decimal('1450000.00'),
            'status': ListingStatus.PENDING,
        }
        values.update(overrides)
        if listing_id is not None:
            values['listing_id'] = listing_id

        listing = SellListing(**values)
        _db.session.add(listing)
        _db.session.flush()

        for position, url in enumerate(image_urls):
            _db.session.add(SellListingImage(
                sell_listing_id=listing.listing_id, url=url, position=position
            ))

        _db.session.commit()
        return listing
    return factory
