# dealership/models/__init__.py
"""
Модели данных бэк-офиса дилерского центра
"""

# Базовые модели
from .base import BaseModel, TimestampMixin, utcnow

# Пользователи и доступ
from .user import (
    User,
    UserRole,
    UserStatus,
    Invitation,
    InvitationStatus,
    PasswordResetToken,
    RevokedToken,
    UserActivity
)

# Каталог автомобилей
from .car import (
    Brand,
    Feature,
    Car,
    CarImage,
    CarStatus,
    car_features,
    validate_car_year
)

# Участники сайта
from .member import Member

# Заявки на продажу
from .listing import (
    SellListing,
    SellListingImage,
    SellListingOriginal,
    ListingStatus,
    ListingCondition,
    EDITABLE_LISTING_FIELDS,
    ARCHIVED_LISTING_FIELDS
)

# Поддержка и сервис
from .support import Ticket, TicketResponse, TicketStatus
from .service import Service, ServiceBooking, ServiceBookingResponse, BookingStatus

# Экспортируем все модели для удобства импорта
__all__ = [
    # Базовые
    'BaseModel', 'TimestampMixin', 'utcnow',

    # Пользователи
    'User', 'UserRole', 'UserStatus', 'Invitation', 'InvitationStatus',
    'PasswordResetToken', 'RevokedToken', 'UserActivity',

    # Автомобили
    'Brand', 'Feature', 'Car', 'CarImage', 'CarStatus', 'car_features',
    'validate_car_year',

    # Участники
    'Member',

    # Заявки
    'SellListing', 'SellListingImage', 'SellListingOriginal',
    'ListingStatus', 'ListingCondition',
    'EDITABLE_LISTING_FIELDS', 'ARCHIVED_LISTING_FIELDS',

    # Поддержка и сервис
    'Ticket', 'TicketResponse', 'TicketStatus',
    'Service', 'ServiceBooking', 'ServiceBookingResponse', 'BookingStatus'
]
