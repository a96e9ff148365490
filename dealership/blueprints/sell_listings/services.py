# dealership/blueprints/sell_listings/services.py
import logging
from sqlalchemy import or_, func
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, DataError, DBAPIError, StatementError
from sqlalchemy.orm import joinedload, selectinload
from dealership.extensions import db
from dealership.blueprints.brands.services import BrandService
from dealership.blueprints.sell_listings.images import resolve_listing_image_urls
from dealership.models.car import Car, CarImage, CarStatus
from dealership.models.member import Member
from dealership.models.listing import (
    SellListing, SellListingImage, SellListingOriginal, ListingStatus, EDITABLE_LISTING_FIELDS
)
from dealership.utils.exceptions import (
    BaseAppException, ValidationError, InternalServerError,
    ListingNotFoundError, ListingAlreadyApprovedError, InvalidStatusTransitionError,
    MemberNotFoundError
)
from dealership.utils.helpers import truncate
from dealership.utils.pagination import paginate_query

logger = logging.getLogger(__name__)


# Колонки автомобиля и поля заявки, из которых они заполняются
CAR_FIELDS_FROM_LISTING = {
    'name': 'car_name',
    'price': 'selling_price',
    'description': 'description',
    'model': 'car_type',
    'mileage': 'mileage',
    'engine_power': 'engine_power',
    'seats': 'seating_capacity',
    'color': 'color',
    'year_of_manufacture': 'year_of_manufacture',
    'current_location': 'location',
    'drive': 'drive_type',
    'engine_size': 'engine_size',
    'fuel_type': 'fuel_type',
    'horse_power': 'horse_power',
    'transmission': 'transmission',
    'torque': 'torque',
    'acceleration': 'acceleration',
}

SHORT_DESCRIPTION_LENGTH = 150


class SellListingService:
    """Сервис заявок продавцов и их модерации"""

    @staticmethod
    def create_listing(data):
        """
        Создание заявки с публичного сайта

        Args:
            data: Проверенные данные заявки (CreateSellListingSchema)

        Returns:
            Созданная заявка в статусе PENDING
        """
        data = dict(data)
        additional_images = data.pop('additional_images', None) or []
        member_id = data.pop('member_id', None)

        if member_id is not None and not db.session.get(Member, member_id):
            raise MemberNotFoundError(member_id)

        listing = SellListing(
            status=ListingStatus.PENDING,
            member_id=member_id,
            **data
        )
        db.session.add(listing)
        db.session.flush()

        for position, url in enumerate(additional_images):
            db.session.add(SellListingImage(
                sell_listing_id=listing.listing_id,
                url=url,
                position=position
            ))

        db.session.commit()

        logger.info(
            f"Sell listing {listing.listing_id} submitted by {listing.email} "
            f"with {len(additional_images)} image(s)"
        )
        return listing

    @staticmethod
    def list_listings(filters):
        """
        Список заявок, новые первыми

        Args:
            filters: status, search, page, per_page

        Returns:
            Объект пагинации
        """
        query = SellListing.query.options(selectinload(SellListing.images))

        if filters.get('status'):
            query = query.filter(SellListing.status == filters['status'])

        search = filters.get('search')
        if search:
            pattern = f'%{search.strip().lower()}%'
            query = query.filter(or_(
                func.lower(SellListing.car_name).like(pattern),
                func.lower(SellListing.name).like(pattern),
                func.lower(SellListing.email).like(pattern),
                func.lower(SellListing.brand_name).like(pattern)
            ))

        query = query.order_by(SellListing.created_at.desc(), SellListing.listing_id.desc())

        return paginate_query(query, filters.get('page'), filters.get('per_page'))

    @staticmethod
    def get_listing(listing_id):
        """
        Заявка вместе с изображениями, автомобилем и участником.

        Если отношение images пришло пустым, изображения перечитываются
        прямым запросом к таблице.

        Returns:
            Кортеж (заявка, список изображений)
        """
        listing = SellListing.query.options(
            selectinload(SellListing.images),
            joinedload(SellListing.car),
            joinedload(SellListing.member)
        ).filter(SellListing.listing_id == listing_id).first()

        if not listing:
            raise ListingNotFoundError(listing_id)

        images = list(listing.images)
        if not images:
            images = SellListingImage.for_listing(listing_id)
            if images:
                logger.warning(
                    f"Listing {listing_id}: images relation was empty, "
                    f"{len(images)} image(s) found by direct query"
                )

        return listing, images

    @staticmethod
    def get_listing_images(listing_id):
        if not db.session.get(SellListing, listing_id):
            raise ListingNotFoundError(listing_id)
        return SellListingImage.for_listing(listing_id)

    @staticmethod
    def add_listing_images(listing_id, urls):
        """Добавление изображений в конец списка изображений заявки"""
        listing = db.session.get(SellListing, listing_id)
        if not listing:
            raise ListingNotFoundError(listing_id)

        last_position = db.session.query(
            func.max(SellListingImage.position)
        ).filter(SellListingImage.sell_listing_id == listing_id).scalar()
        start = 0 if last_position is None else last_position + 1

        images = []
        for offset, url in enumerate(urls):
            image = SellListingImage(sell_listing_id=listing_id, url=url, position=start + offset)
            db.session.add(image)
            images.append(image)

        listing.touch()
        db.session.commit()

        logger.info(f"Added {len(images)} image(s) to listing {listing_id}")
        return images

    @staticmethod
    def update_listing_status(listing_id, status, rejection_reason=None, edited_listing=None):
        """
        Смена статуса заявки

        Args:
            listing_id: ID заявки
            status: Новый статус
            rejection_reason: Причина отказа (обязательна для REJECTED)
            edited_listing: Исправленные поля заявки (для APPROVED)

        Returns:
            Обновленная заявка

        Raises:
            ValidationError: Некорректный статус или отсутствует причина отказа
            ListingNotFoundError: Заявка не найдена
            ListingAlreadyApprovedError: Заявка уже одобрена
            InvalidStatusTransitionError: Переход из текущего статуса запрещен
        """
        if status not in ListingStatus.ALL:
            raise ValidationError(f"Invalid status: {status}", 'status')

        if status == ListingStatus.APPROVED:
            return SellListingService.approve_listing(listing_id, edited_listing or {})

        reason = (rejection_reason or '').strip()
        try:
            listing = SellListingService._lock_listing(listing_id)

            if not listing.can_transition_to(status):
                raise InvalidStatusTransitionError(listing.status, status)

            if status == ListingStatus.REJECTED and not reason:
                raise ValidationError("Rejection reason is required", 'rejection_reason')
        except BaseAppException:
            db.session.rollback()
            raise

        listing.status = status
        if status == ListingStatus.REJECTED:
            listing.rejection_reason = reason
        listing.touch()
        db.session.commit()

        logger.info(f"Listing {listing_id} status changed to {status}")
        return listing

    @staticmethod
    def approve_listing(listing_id, edited_listing):
        """
        Одобрение заявки: публикация автомобиля и архивирование исходных данных.

        Все записи (марка, автомобиль, изображения, архивный снимок, заявка)
        выполняются в одной транзакции и фиксируются одним коммитом.
        При любой ошибке транзакция откатывается целиком.

        Args:
            listing_id: ID заявки
            edited_listing: Исправленные администратором поля (+ brand_id/brand_name)

        Returns:
            Одобренная заявка
        """
        edited = dict(edited_listing)
        brand_id = edited.pop('brand_id', None)
        brand_name = edited.get('brand_name')

        step = 'fetch_listing'
        try:
            listing = SellListingService._lock_listing(listing_id, with_images=True)

            if listing.is_approved:
                raise ListingAlreadyApprovedError(listing_id)

            if not listing.can_transition_to(ListingStatus.APPROVED):
                raise InvalidStatusTransitionError(listing.status, ListingStatus.APPROVED)

            step = 'resolve_brand'
            brand = BrandService.resolve_brand(brand_id, brand_name)

            step = 'create_car'
            values = listing.editable_values()
            values.update({
                field: value for field, value in edited.items()
                if field in EDITABLE_LISTING_FIELDS
            })
            car = SellListingService._build_car(values, brand)
            db.session.add(car)
            db.session.flush()

            step = 'copy_images'
            image_urls = resolve_listing_image_urls(listing)
            for url in image_urls:
                db.session.add(CarImage(car_id=car.car_id, url=url))
            if not image_urls:
                logger.warning(f"Listing {listing_id} approved without images")

            step = 'archive_original'
            original = SellListingOriginal.snapshot(listing, brand.name, car.car_id)
            db.session.add(original)
            db.session.flush()

            step = 'update_listing'
            for field, value in edited.items():
                if field in EDITABLE_LISTING_FIELDS:
                    setattr(listing, field, value)
            listing.brand_name = brand.name
            listing.brand_id = brand.brand_id
            listing.car_id = car.car_id
            listing.status = ListingStatus.APPROVED
            listing.rejection_reason = None
            listing.touch()

            step = 'commit'
            db.session.commit()

        except BaseAppException as e:
            db.session.rollback()
            logger.warning(f"Approval of listing {listing_id} failed at step '{step}': {e.message}")
            raise

        except (IntegrityError, DataError) as e:
            db.session.rollback()
            logger.error(f"Approval of listing {listing_id} failed at step '{step}': {e}")
            raise ValidationError(f"Invalid listing data: {e.orig}")

        except StatementError as e:
            db.session.rollback()
            logger.error(f"Approval of listing {listing_id} failed at step '{step}': {e}")
            if isinstance(e, DBAPIError):
                raise InternalServerError(f"Failed to approve listing: {e.orig}")
            raise ValidationError(f"Invalid listing data: {e.orig}")

        except Exception as e:
            db.session.rollback()
            logger.exception(f"Approval of listing {listing_id} failed at step '{step}': {e}")
            raise InternalServerError(f"Failed to approve listing: {e}")

        logger.info(
            f"Listing {listing_id} approved: car {car.car_id}, brand {brand.brand_id}, "
            f"{len(image_urls)} image(s), original {original.original_id}"
        )
        return listing

    @staticmethod
    def _lock_listing(listing_id, with_images=False):
        """Заявка с блокировкой строки до конца транзакции"""
        # Блокировка закрывает гонку двух одновременных смен статуса
        query = SellListing.query
        if with_images:
            query = query.options(selectinload(SellListing.images))

        listing = query.filter(
            SellListing.listing_id == listing_id
        ).with_for_update(of=SellListing).first()

        if not listing:
            raise ListingNotFoundError(listing_id)
        return listing

    @staticmethod
    def _build_car(values, brand):
        """Новый автомобиль из полей заявки"""
        car_values = {
            column: values.get(field) for column, field in CAR_FIELDS_FROM_LISTING.items()
        }
        car_values['short_description'] = truncate(values.get('description'), SHORT_DESCRIPTION_LENGTH)
        car_values['availability'] = values.get('available_for_viewing') is not False
        if car_values['mileage'] is None:
            car_values['mileage'] = 0

        return Car(
            brand_id=brand.brand_id,
            status=CarStatus.USED,
            **car_values
        )

    @staticmethod
    def delete_listing(listing_id):
        """
        Удаление заявки.

        Сначала удаляются изображения заявки. Ошибка на этом шаге записывается
        в лог и не прерывает удаление самой заявки.
        """
        listing = db.session.get(SellListing, listing_id)
        if not listing:
            raise ListingNotFoundError(listing_id)

        try:
            deleted_images = SellListingImage.query.filter(
                SellListingImage.sell_listing_id == listing_id
            ).delete(synchronize_session=False)
            db.session.commit()
            logger.info(f"Deleted {deleted_images} image(s) of listing {listing_id}")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to delete images of listing {listing_id}: {e}")

        listing = db.session.get(SellListing, listing_id)
        db.session.delete(listing)
        db.session.commit()

        logger.info(f"Listing {listing_id} deleted")
