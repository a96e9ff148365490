# dealership/utils/exceptions.py
"""
Кастомные исключения для приложения
"""


class BaseAppException(Exception):
    """Базовое исключение приложения"""
    def __init__(self, message="Application error", code=500):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(BaseAppException):
    """Ошибка валидации данных"""
    def __init__(self, message="Validation error", field=None):
        self.field = field
        super().__init__(message, 400)


class AuthenticationError(BaseAppException):
    """Ошибка аутентификации"""
    def __init__(self, message="Authentication failed"):
        super().__init__(message, 401)


class AuthorizationError(BaseAppException):
    """Ошибка авторизации"""
    def __init__(self, message="Access denied"):
        super().__init__(message, 403)


class NotFoundError(BaseAppException):
    """Ресурс не найден"""
    def __init__(self, message="Resource not found", resource=None):
        self.resource = resource
        super().__init__(message, 404)


class ConflictError(BaseAppException):
    """Конфликт данных"""
    def __init__(self, message="Data conflict"):
        super().__init__(message, 409)


class RateLimitError(BaseAppException):
    """Превышен лимит запросов"""
    def __init__(self, message="Rate limit exceeded"):
        super().__init__(message, 429)


class InternalServerError(BaseAppException):
    """Внутренняя ошибка сервера"""
    def __init__(self, message="Internal server error"):
        super().__init__(message, 500)


# Специфичные исключения для доменов

class UserNotFoundError(NotFoundError):
    """Пользователь не найден"""
    def __init__(self, user_id=None):
        message = f"User {user_id} not found" if user_id else "User not found"
        super().__init__(message, "user")


class ListingNotFoundError(NotFoundError):
    """Объявление не найдено"""
    def __init__(self, listing_id=None):
        message = f"Listing {listing_id} not found" if listing_id else "Listing not found"
        super().__init__(message, "listing")


class CarNotFoundError(NotFoundError):
    """Автомобиль не найден"""
    def __init__(self, car_id=None):
        message = f"Car {car_id} not found" if car_id else "Car not found"
        super().__init__(message, "car")


class BrandNotFoundError(NotFoundError):
    """Бренд не найден"""
    def __init__(self, brand_id=None):
        message = f"Brand {brand_id} not found" if brand_id else "Brand not found"
        super().__init__(message, "brand")


class FeatureNotFoundError(NotFoundError):
    """Особенность не найдена"""
    def __init__(self, feature_id=None):
        message = f"Feature {feature_id} not found" if feature_id else "Feature not found"
        super().__init__(message, "feature")


class MemberNotFoundError(NotFoundError):
    """Участник не найден"""
    def __init__(self, member_id=None):
        message = f"Member {member_id} not found" if member_id else "Member not found"
        super().__init__(message, "member")


class TicketNotFoundError(NotFoundError):
    """Тикет не найден"""
    def __init__(self, ticket_id=None):
        message = f"Ticket {ticket_id} not found" if ticket_id else "Ticket not found"
        super().__init__(message, "ticket")


class ServiceNotFoundError(NotFoundError):
    """Услуга не найдена"""
    def __init__(self, service_id=None):
        message = f"Service {service_id} not found" if service_id else "Service not found"
        super().__init__(message, "service")


class BookingNotFoundError(NotFoundError):
    """Бронирование не найдено"""
    def __init__(self, booking_id=None):
        message = f"Booking {booking_id} not found" if booking_id else "Booking not found"
        super().__init__(message, "booking")


class EmailAlreadyExistsError(ConflictError):
    """Email уже зарегистрирован"""
    def __init__(self, email=None):
        message = f"User with email {email} already exists" if email else "User with this email already exists"
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Неверные учетные данные"""
    def __init__(self):
        super().__init__("Invalid email or password")


class InvalidTokenError(ValidationError):
    """Невалидный или истекший одноразовый токен"""
    def __init__(self, message="Invalid or expired token"):
        super().__init__(message, "token")


class ListingAlreadyApprovedError(ConflictError):
    """Объявление уже одобрено"""
    def __init__(self, listing_id=None):
        message = f"Listing {listing_id} is already approved" if listing_id else "Listing is already approved"
        super().__init__(message)


class InvalidStatusTransitionError(ConflictError):
    """Недопустимая смена статуса заявки"""
    def __init__(self, current, target):
        super().__init__(f"Cannot change listing status from {current} to {target}")


# Утилитарные функции для работы с исключениями
def handle_db_error(error):
    """Обработка ошибок базы данных"""
    from sqlalchemy.exc import IntegrityError, DataError, DBAPIError, StatementError

    if isinstance(error, IntegrityError):
        if 'unique' in str(error).lower():
            return ConflictError("Data already exists")
        else:
            return ConflictError("Data integrity error")
    elif isinstance(error, DataError):
        return ValidationError("Invalid data format")
    elif isinstance(error, StatementError) and not isinstance(error, DBAPIError):
        # Ошибка приведения типов параметров до обращения к драйверу
        return ValidationError("Invalid data format")
    else:
        return InternalServerError("Database error")


def format_validation_error(errors):
    """Форматирование ошибок валидации Marshmallow"""
    formatted_errors = {}

    for field, messages in errors.items():
        if isinstance(messages, list):
            formatted_errors[field] = messages[0]  # Берем первую ошибку
        else:
            formatted_errors[field] = str(messages)

    return formatted_errors
