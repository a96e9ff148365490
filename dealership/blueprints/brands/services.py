# dealership/blueprints/brands/services.py
import logging
from flask import current_app
from dealership.extensions import db
from dealership.models.car import Brand
from dealership.utils.exceptions import BrandNotFoundError, ConflictError, ValidationError

logger = logging.getLogger(__name__)


class BrandService:
    """Сервис для работы с марками автомобилей"""

    @staticmethod
    def get_brands():
        """Все марки, отсортированные по названию"""
        return Brand.query.order_by(Brand.name).all()

    @staticmethod
    def get_brand(brand_id):
        brand = db.session.get(Brand, brand_id)
        if not brand:
            raise BrandNotFoundError(brand_id)
        return brand

    @staticmethod
    def create_brand(data):
        """
        Создание марки

        Raises:
            ConflictError: Если марка с таким названием уже есть
        """
        name = data['name'].strip()
        if Brand.find_by_name(name):
            raise ConflictError(f"Brand '{name}' already exists")

        brand = Brand(name=name, logo_url=data.get('logo_url'))
        db.session.add(brand)
        db.session.commit()

        logger.info(f"Brand created: {brand.brand_id} ({brand.name})")
        return brand

    @staticmethod
    def update_brand(brand_id, data):
        brand = BrandService.get_brand(brand_id)

        if 'name' in data:
            name = data['name'].strip()
            existing = Brand.find_by_name(name)
            if existing and existing.brand_id != brand.brand_id:
                raise ConflictError(f"Brand '{name}' already exists")
            brand.name = name

        if 'logo_url' in data:
            brand.logo_url = data['logo_url']

        brand.touch()
        db.session.commit()
        return brand

    @staticmethod
    def delete_brand(brand_id):
        """
        Удаление марки

        Raises:
            ConflictError: Если к марке привязаны автомобили
        """
        brand = BrandService.get_brand(brand_id)

        cars_count = brand.cars_count
        if cars_count:
            raise ConflictError(f"Brand is used by {cars_count} car(s) and cannot be deleted")

        db.session.delete(brand)
        db.session.commit()
        logger.info(f"Brand deleted: {brand_id}")

    @staticmethod
    def resolve_brand(brand_id=None, brand_name=None):
        """
        Определение марки для нового автомобиля.

        Приоритет: явный brand_id, затем поиск по названию без учета регистра,
        затем создание новой марки с логотипом-заглушкой. Сессия не коммитится,
        новая марка только добавляется и сбрасывается (flush), чтобы получить ID.

        Args:
            brand_id: ID существующей марки
            brand_name: Название марки

        Returns:
            Марка автомобиля

        Raises:
            ValidationError: Если не передано ни ID, ни название, или ID не существует
        """
        if brand_id is not None:
            brand = db.session.get(Brand, brand_id)
            if not brand:
                raise ValidationError(f"Brand {brand_id} does not exist", 'brand_id')
            return brand

        name = (brand_name or '').strip()
        if not name:
            raise ValidationError("Either brand_id or brand_name is required", 'brand_name')

        brand = Brand.find_by_name(name)
        if brand:
            return brand

        brand = Brand(name=name, logo_url=current_app.config.get('BRAND_PLACEHOLDER_LOGO'))
        db.session.add(brand)
        db.session.flush()

        logger.info(f"Brand '{name}' not found, created new brand {brand.brand_id}")
        return brand
