"""
Тесты каталога: марки, особенности, автомобили, участники
"""

import pytest

from dealership.blueprints.brands.services import BrandService
from dealership.models import Brand, Car, CarImage, Feature, Member, CarStatus
from dealership.utils.exceptions import ValidationError


def make_car(brand, name='Demio', **overrides):
    values = {'name': name, 'price': 750000, 'brand_id': brand.brand_id, 'model': 'Hatchback'}
    values.update(overrides)
    return Car.create(**values)


# ══════════════════════════════════════════════
# Марки
# ══════════════════════════════════════════════

class TestBrands:

    def test_list_is_public_and_ordered(self, client, make_brand):
        make_brand('Toyota')
        make_brand('Audi')

        response = client.get('/api/brands')

        assert response.status_code == 200
        assert [brand['name'] for brand in response.get_json()['data']] == ['Audi', 'Toyota']

    def test_get_with_cars(self, client, make_brand):
        mazda = make_brand('Mazda')
        make_car(mazda)

        data = client.get(f'/api/brands/{mazda.brand_id}').get_json()['data']

        assert data['cars_count'] == 1
        assert [car['name'] for car in data['cars']] == ['Demio']

    def test_create_requires_admin(self, client, staff_headers):
        response = client.post('/api/brands', json={'name': 'Kia'}, headers=staff_headers)
        assert response.status_code == 403

    def test_create_and_duplicate(self, client, auth_headers):
        response = client.post('/api/brands', json={'name': 'Kia'}, headers=auth_headers)
        assert response.status_code == 201

        response = client.post('/api/brands', json={'name': 'KIA'}, headers=auth_headers)
        assert response.status_code == 409
        assert Brand.query.count() == 1

    def test_update(self, client, auth_headers, make_brand):
        brand = make_brand('Mercedes')
        make_brand('BMW')

        response = client.patch(
            f'/api/brands/{brand.brand_id}', json={'name': 'Mercedes-Benz'}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.get_json()['data']['name'] == 'Mercedes-Benz'

        response = client.patch(f'/api/brands/{brand.brand_id}', json={'name': 'bmw'}, headers=auth_headers)
        assert response.status_code == 409

    def test_delete_with_cars_is_refused(self, client, auth_headers, make_brand):
        brand = make_brand('Subaru')
        make_car(brand, name='Forester')

        assert client.delete(f'/api/brands/{brand.brand_id}', headers=auth_headers).status_code == 409
        assert Brand.get_by_id(brand.brand_id) is not None

    def test_delete(self, client, auth_headers, make_brand):
        brand = make_brand('Lada')
        response = client.delete(f'/api/brands/{brand.brand_id}', headers=auth_headers)
        assert response.status_code == 200
        assert Brand.query.count() == 0

    def test_missing_brand(self, client):
        response = client.get('/api/brands/77')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'BrandNotFoundError'


class TestBrandResolver:

    def test_brand_id_wins(self, make_brand):
        audi = make_brand('Audi')
        make_brand('Toyota')
        assert BrandService.resolve_brand(audi.brand_id, 'Toyota') is audi

    def test_lookup_ignores_case_and_spaces(self, make_brand):
        toyota = make_brand('toyota')
        assert BrandService.resolve_brand(brand_name='  Toyota ') is toyota

    def test_creates_missing_brand_without_commit(self, app, db):
        brand = BrandService.resolve_brand(brand_name='Acme Motors')

        assert brand.brand_id is not None
        assert brand.logo_url == app.config['BRAND_PLACEHOLDER_LOGO']

        db.session.rollback()
        assert Brand.query.count() == 0

    def test_nothing_given(self, app):
        with pytest.raises(ValidationError) as exc_info:
            BrandService.resolve_brand()
        assert exc_info.value.field == 'brand_name'

    def test_unknown_id(self, app):
        with pytest.raises(ValidationError) as exc_info:
            BrandService.resolve_brand(404, 'Honda')
        assert exc_info.value.field == 'brand_id'


# ══════════════════════════════════════════════
# Особенности
# ══════════════════════════════════════════════

class TestFeatures:

    def test_crud(self, client, auth_headers):
        response = client.post('/api/features', json={'name': 'Sunroof'}, headers=auth_headers)
        assert response.status_code == 201
        feature_id = response.get_json()['data']['feature_id']

        assert client.post('/api/features', json={'name': 'sunroof'}, headers=auth_headers).status_code == 409

        response = client.put(
            f'/api/features/{feature_id}', json={'name': 'Panoramic sunroof'}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.get_json()['data']['name'] == 'Panoramic sunroof'

        assert [f['name'] for f in client.get('/api/features').get_json()['data']] == ['Panoramic sunroof']

        assert client.delete(f'/api/features/{feature_id}', headers=auth_headers).status_code == 200
        assert Feature.query.count() == 0

    def test_delete_feature_used_by_car(self, client, auth_headers, make_brand):
        feature = Feature.create(name='Heated seats')
        car = make_car(make_brand('Volvo'))
        car.features = [feature]
        car.save()

        assert client.delete(f'/api/features/{feature.feature_id}', headers=auth_headers).status_code == 200
        assert Car.get_by_id(car.car_id).features == []


# ══════════════════════════════════════════════
# Автомобили
# ══════════════════════════════════════════════

class TestCars:

    def test_create_with_features_and_images(self, client, auth_headers, make_brand):
        brand = make_brand('Nissan')
        feature = Feature.create(name='Bluetooth')

        response = client.post('/api/cars', json={
            'name': 'Note e-Power',
            'price': 1200000,
            'brand_id': brand.brand_id,
            'description': 'x' * 400,
            'features': [feature.feature_id],
            'images': ['https://cdn.example.com/cars/note.jpg'],
        }, headers=auth_headers)

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['brand_name'] == 'Nissan'
        assert data['status'] == CarStatus.NEW
        assert data['mileage'] == 0
        assert len(data['short_description']) == 150
        assert [f['name'] for f in data['features']] == ['Bluetooth']
        assert [image['url'] for image in data['images']] == ['https://cdn.example.com/cars/note.jpg']

    def test_create_with_unknown_brand(self, client, auth_headers):
        response = client.post('/api/cars', json={'name': 'X', 'price': 1, 'brand_id': 99}, headers=auth_headers)
        assert response.status_code == 400

    def test_create_with_unknown_feature(self, client, auth_headers, make_brand):
        brand = make_brand('Nissan')
        response = client.post('/api/cars', json={
            'name': 'X', 'price': 1, 'brand_id': brand.brand_id, 'features': [5]
        }, headers=auth_headers)
        assert response.status_code == 404
        assert Car.query.count() == 0

    def test_update_replaces_features_and_images(self, client, auth_headers, make_brand):
        brand = make_brand('Nissan')
        old_feature = Feature.create(name='Radio')
        new_feature = Feature.create(name='Navigation')
        car = make_car(brand, features=[old_feature], images=[
            CarImage(url='https://cdn.example.com/a.jpg'),
            CarImage(url='https://cdn.example.com/b.jpg'),
        ])
        removed_id = car.images[0].image_id

        response = client.patch(f'/api/cars/{car.car_id}', json={
            'price': 700000,
            'features': [new_feature.feature_id],
            'images': ['https://cdn.example.com/c.jpg'],
            'deleted_images': [removed_id],
        }, headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['price'] == 700000
        assert data['status'] == CarStatus.NEW
        assert [f['name'] for f in data['features']] == ['Navigation']
        assert sorted(image['url'] for image in data['images']) == [
            'https://cdn.example.com/b.jpg', 'https://cdn.example.com/c.jpg'
        ]
        assert CarImage.query.count() == 2

    def test_delete_removes_images(self, client, auth_headers, make_brand):
        car = make_car(make_brand('Nissan'), images=[CarImage(url='https://cdn.example.com/a.jpg')])

        assert client.delete(f'/api/cars/{car.car_id}', headers=auth_headers).status_code == 200
        assert Car.query.count() == 0
        assert CarImage.query.count() == 0

    def test_search(self, client, make_brand):
        toyota = make_brand('Toyota')
        mazda = make_brand('Mazda')
        make_car(toyota, name='Corolla')
        make_car(mazda, name='CX-5', status=CarStatus.USED)

        def names(response):
            return [car['name'] for car in response.get_json()['data']]

        assert names(client.get(f'/api/cars?brand_id={mazda.brand_id}')) == ['CX-5']
        assert names(client.get('/api/cars?status=USED')) == ['CX-5']
        assert names(client.get('/api/cars?search=toyota')) == ['Corolla']
        assert client.get('/api/cars?status=BROKEN').status_code == 400

    def test_bulk_create_reports_each_row(self, client, auth_headers, make_brand):
        brand = make_brand('Honda')

        response = client.post('/api/cars/bulk', json={'cars': [
            {'name': 'Fit', 'price': 600000, 'brand_id': brand.brand_id},
            {'name': 'Vezel', 'brand_id': brand.brand_id},
            {'name': 'Civic', 'price': 900000, 'brand_id': 999},
            {'name': 'CR-V', 'price': 2000000, 'brand_id': brand.brand_id, 'features': [42]},
        ]}, headers=auth_headers)

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['created'] == 1
        assert data['failed'] == 3
        assert [result['success'] for result in data['results']] == [True, False, False, False]
        assert 'price' in data['results'][1]['errors']
        assert 'brand_id' in data['results'][2]['errors']
        assert 'features' in data['results'][3]['errors']
        assert [car.name for car in Car.query] == ['Fit']

    def test_bulk_create_with_no_valid_rows(self, client, auth_headers):
        response = client.post('/api/cars/bulk', json={'cars': [{'name': 'Ghost'}]}, headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['data']['created'] == 0


# ══════════════════════════════════════════════
# Участники
# ══════════════════════════════════════════════

class TestMembers:

    def test_list_filter_and_toggle(self, client, auth_headers):
        active = Member.create(name='Alice', email='alice@example.com')
        Member.create(name='Bob', email='bob@example.com', is_active=False)

        response = client.get('/api/members?is_active=true', headers=auth_headers)
        assert [m['name'] for m in response.get_json()['data']] == ['Alice']

        response = client.get('/api/members?search=bob', headers=auth_headers)
        assert [m['name'] for m in response.get_json()['data']] == ['Bob']

        response = client.patch(
            f'/api/members/{active.member_id}', json={'is_active': False}, headers=auth_headers
        )
        assert response.status_code == 200
        assert Member.get_by_id(active.member_id).is_active is False

    def test_delete_keeps_listings(self, client, auth_headers, make_listing):
        member = Member.create(name='Alice', email='alice@example.com')
        listing = make_listing(member_id=member.member_id)

        assert client.delete(f'/api/members/{member.member_id}', headers=auth_headers).status_code == 200

        assert Member.query.count() == 0
        assert listing.member_id is None

    def test_requires_admin(self, client):
        assert client.get('/api/members').status_code == 401
