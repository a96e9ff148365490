# dealership/blueprints/service_center/services.py
import logging
from datetime import timezone
from sqlalchemy.orm import joinedload, selectinload
from dealership.extensions import db
from dealership.models.service import Service, ServiceBooking, ServiceBookingResponse, BookingStatus
from dealership.utils.exceptions import ServiceNotFoundError, BookingNotFoundError, ConflictError
from dealership.utils.mail import send_booking_status_email, send_booking_response_email
from dealership.utils.pagination import paginate_query

logger = logging.getLogger(__name__)


def _to_naive_utc(value):
    """Даты хранятся в UTC без tzinfo"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ServiceCatalogService:
    """Сервис каталога услуг"""

    @staticmethod
    def get_services(active_only=False):
        query = Service.query
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name).all()

    @staticmethod
    def get_service(service_id):
        service = db.session.get(Service, service_id)
        if not service:
            raise ServiceNotFoundError(service_id)
        return service

    @staticmethod
    def create_service(data):
        service = Service(**data)
        db.session.add(service)
        db.session.commit()

        logger.info(f"Service created: {service.service_id} ({service.name})")
        return service

    @staticmethod
    def update_service(service_id, data):
        service = ServiceCatalogService.get_service(service_id)
        for field, value in data.items():
            setattr(service, field, value)
        service.touch()
        db.session.commit()
        return service

    @staticmethod
    def delete_service(service_id):
        """
        Удаление услуги

        Raises:
            ConflictError: Если на услугу есть записи
        """
        service = ServiceCatalogService.get_service(service_id)

        bookings_count = service.bookings.count()
        if bookings_count:
            raise ConflictError(f"Service has {bookings_count} booking(s) and cannot be deleted")

        db.session.delete(service)
        db.session.commit()
        logger.info(f"Service deleted: {service_id}")


class BookingService:
    """Сервис записей на сервисное обслуживание"""

    @staticmethod
    def create_booking(data):
        """
        Запись клиента на сервис

        Raises:
            ServiceNotFoundError: Услуга не найдена
        """
        data = dict(data)
        service = ServiceCatalogService.get_service(data['service_id'])
        data['preferred_date'] = _to_naive_utc(data['preferred_date'])
        data['alternate_date'] = _to_naive_utc(data.get('alternate_date'))

        booking = ServiceBooking(status=BookingStatus.PENDING, **data)
        db.session.add(booking)
        db.session.commit()

        send_booking_status_email(booking)

        logger.info(f"Booking {booking.booking_id} created for service {service.service_id}")
        return booking

    @staticmethod
    def get_bookings(filters):
        query = ServiceBooking.query.options(joinedload(ServiceBooking.service))

        if filters.get('status'):
            query = query.filter(ServiceBooking.status == filters['status'])

        if filters.get('service_id'):
            query = query.filter(ServiceBooking.service_id == filters['service_id'])

        query = query.order_by(ServiceBooking.created_at.desc(), ServiceBooking.booking_id.desc())
        return paginate_query(query, filters.get('page'), filters.get('per_page'))

    @staticmethod
    def get_booking(booking_id):
        booking = ServiceBooking.query.options(
            joinedload(ServiceBooking.service),
            selectinload(ServiceBooking.responses)
        ).filter(ServiceBooking.booking_id == booking_id).first()

        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    @staticmethod
    def update_status(booking_id, status, response=None):
        """
        Смена статуса записи с необязательным ответом клиенту

        Клиент получает письмо о смене статуса и, если передан ответ,
        отдельное письмо с ответом.
        """
        booking = BookingService.get_booking(booking_id)

        booking.status = status
        booking.touch()

        response_text = (response or '').strip()
        if response_text:
            booking.responses.append(ServiceBookingResponse(message=response_text))

        db.session.commit()

        if response_text:
            send_booking_response_email(booking, response_text)
        send_booking_status_email(booking)

        logger.info(f"Booking {booking_id} status changed to {status}")
        return booking

    @staticmethod
    def add_response(booking_id, message):
        booking = BookingService.get_booking(booking_id)

        response = ServiceBookingResponse(message=message.strip())
        booking.responses.append(response)
        booking.touch()
        db.session.commit()

        send_booking_response_email(booking, response.message)
        return response

    @staticmethod
    def delete_booking(booking_id):
        booking = BookingService.get_booking(booking_id)
        db.session.delete(booking)
        db.session.commit()
        logger.info(f"Booking {booking_id} deleted")
