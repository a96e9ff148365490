# dealership/blueprints/cars/services.py
import logging
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy import or_, func
from sqlalchemy.orm import joinedload, selectinload
from dealership.extensions import db
from dealership.blueprints.cars.schemas import CarSchema
from dealership.blueprints.features.services import FeatureService
from dealership.models.car import Brand, Car, CarImage
from dealership.utils.exceptions import (
    CarNotFoundError, FeatureNotFoundError, ValidationError, format_validation_error
)
from dealership.utils.helpers import truncate
from dealership.utils.pagination import paginate_query

logger = logging.getLogger(__name__)


class CarService:
    """Сервис каталога автомобилей"""

    @staticmethod
    def search_cars(filters):
        """
        Поиск автомобилей с фильтрами

        Args:
            filters: brand_id, status, search, page, per_page

        Returns:
            Объект пагинации
        """
        query = Car.query.options(joinedload(Car.brand), selectinload(Car.images))

        if filters.get('brand_id'):
            query = query.filter(Car.brand_id == filters['brand_id'])

        if filters.get('status'):
            query = query.filter(Car.status == filters['status'])

        if filters.get('availability') is not None:
            query = query.filter(Car.availability == filters['availability'])

        search = filters.get('search')
        if search:
            pattern = f'%{search.strip().lower()}%'
            query = query.join(Car.brand).filter(or_(
                func.lower(Car.name).like(pattern),
                func.lower(Car.model).like(pattern),
                func.lower(Brand.name).like(pattern)
            ))

        query = query.order_by(Car.created_at.desc(), Car.car_id.desc())

        return paginate_query(query, filters.get('page'), filters.get('per_page'))

    @staticmethod
    def get_car(car_id):
        car = Car.query.options(
            joinedload(Car.brand),
            selectinload(Car.images),
            selectinload(Car.features)
        ).filter(Car.car_id == car_id).first()

        if not car:
            raise CarNotFoundError(car_id)
        return car

    @staticmethod
    def _check_brand(brand_id):
        if not db.session.get(Brand, brand_id):
            raise ValidationError(f"Brand {brand_id} does not exist", 'brand_id')

    @staticmethod
    def _build_car(data):
        data = dict(data)
        feature_ids = data.pop('features', None) or []
        image_urls = data.pop('images', None) or []

        if not data.get('short_description'):
            data['short_description'] = truncate(data.get('description'), 150)

        car = Car(**data)
        car.features = FeatureService.get_features_by_ids(feature_ids)
        for url in image_urls:
            car.images.append(CarImage(url=url))
        return car

    @staticmethod
    def create_car(data):
        """
        Создание автомобиля с особенностями и изображениями

        Raises:
            ValidationError: Марка не существует
            FeatureNotFoundError: Особенность не найдена
        """
        CarService._check_brand(data['brand_id'])

        car = CarService._build_car(data)
        db.session.add(car)
        db.session.commit()

        logger.info(f"Car created: {car.car_id} ({car.name})")
        return car

    @staticmethod
    def update_car(car_id, data):
        """
        Обновление автомобиля.

        Список особенностей заменяется целиком, новые изображения добавляются
        к существующим, изображения из deleted_images удаляются.
        """
        car = CarService.get_car(car_id)
        data = dict(data)

        feature_ids = data.pop('features', None)
        new_images = data.pop('images', None) or []
        deleted_images = data.pop('deleted_images', None) or []

        if 'brand_id' in data:
            CarService._check_brand(data['brand_id'])

        for field, value in data.items():
            setattr(car, field, value)

        if 'description' in data and 'short_description' not in data:
            car.short_description = truncate(car.description, 150)

        if feature_ids is not None:
            car.features = FeatureService.get_features_by_ids(feature_ids)

        if deleted_images:
            for image in list(car.images):
                if image.image_id in deleted_images:
                    car.images.remove(image)

        for url in new_images:
            car.images.append(CarImage(url=url))

        car.touch()
        db.session.commit()

        logger.info(
            f"Car updated: {car.car_id} (+{len(new_images)} / -{len(deleted_images)} images)"
        )
        return car

    @staticmethod
    def delete_car(car_id):
        """Удаление автомобиля (изображения удаляются каскадно)"""
        car = CarService.get_car(car_id)
        car.features = []
        db.session.delete(car)
        db.session.commit()
        logger.info(f"Car deleted: {car_id}")

    @staticmethod
    def bulk_create_cars(rows):
        """
        Массовое создание автомобилей

        Каждая строка проверяется отдельно. Корректные строки сохраняются
        одним коммитом, для остальных возвращаются ошибки.

        Args:
            rows: Список словарей с данными автомобилей

        Returns:
            Словарь с количеством созданных и результатами по строкам
        """
        schema = CarSchema()
        existing_brand_ids = {brand_id for (brand_id,) in db.session.query(Brand.brand_id)}

        results = []
        created = []

        for index, row in enumerate(rows):
            try:
                data = schema.load(row)
            except MarshmallowValidationError as err:
                results.append({
                    'index': index,
                    'success': False,
                    'errors': format_validation_error(err.normalized_messages())
                })
                continue

            if data['brand_id'] not in existing_brand_ids:
                results.append({
                    'index': index,
                    'success': False,
                    'errors': {'brand_id': f"Brand {data['brand_id']} does not exist"}
                })
                continue

            try:
                car = CarService._build_car(data)
            except FeatureNotFoundError as e:
                results.append({'index': index, 'success': False, 'errors': {'features': e.message}})
                continue

            db.session.add(car)
            created.append((index, car))

        db.session.commit()

        for index, car in created:
            results.append({'index': index, 'success': True, 'car_id': car.car_id})
        results.sort(key=lambda result: result['index'])

        logger.info(f"Bulk car import: {len(created)} created, {len(rows) - len(created)} failed")
        return {
            'created': len(created),
            'failed': len(rows) - len(created),
            'results': results
        }
