# dealership/utils/decorators.py
"""
Декораторы для авторизации, валидации и других общих задач
"""

import logging
from functools import wraps
from flask import request, jsonify, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from dealership.extensions import db
from dealership.utils.exceptions import (
    BaseAppException, ValidationError, AuthenticationError, AuthorizationError,
    format_validation_error, handle_db_error
)

logger = logging.getLogger(__name__)


def validate_json(schema_class, partial=False):
    """Декоратор для валидации JSON данных с помощью Marshmallow схемы"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not request.is_json:
                raise ValidationError("Request must be JSON")

            try:
                schema = schema_class()
                g.validated_data = schema.load(request.get_json(silent=True) or {}, partial=partial)
            except MarshmallowValidationError as err:
                formatted_errors = format_validation_error(err.normalized_messages())
                raise ValidationError(f"Validation failed: {formatted_errors}")

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def auth_required(f):
    """Декоратор для проверки аутентификации сотрудника"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from dealership.models.user import User

        verify_jwt_in_request()

        identity = get_jwt_identity()
        try:
            user = db.session.get(User, int(identity))
        except (TypeError, ValueError):
            raise AuthenticationError("Token does not contain a valid user identity")

        if not user:
            raise AuthenticationError("User not found")

        if not user.is_active:
            raise AuthorizationError("Account is not active")

        # Сохраняем пользователя в g для использования в роуте
        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def roles_required(*roles):
    """Декоратор для проверки роли сотрудника"""
    def decorator(f):
        @wraps(f)
        @auth_required
        def decorated_function(*args, **kwargs):
            if g.current_user.role not in roles:
                logger.info(
                    f"Access denied for user {g.current_user.user_id} "
                    f"with role {g.current_user.role} to {request.endpoint}"
                )
                raise AuthorizationError("Insufficient permissions")
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def admin_required(f):
    """Декоратор для проверки прав администратора"""
    from dealership.models.user import UserRole
    return roles_required(*UserRole.STAFF_ADMINS)(f)


def handle_errors(f):
    """Декоратор для обработки ошибок и возврата JSON ответов"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except BaseAppException as e:
            db.session.rollback()
            logger.warning(f"Application error: {e.message}")
            return jsonify({
                'error': e.__class__.__name__,
                'message': e.message
            }), e.code

        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database error: {str(e)}")
            handled_error = handle_db_error(e)
            return jsonify({
                'error': handled_error.__class__.__name__,
                'message': handled_error.message
            }), handled_error.code

        except (HTTPException, JWTExtendedException, PyJWTError):
            # Обрабатываются зарегистрированными обработчиками приложения
            raise

        except Exception as e:
            db.session.rollback()
            logger.exception(f"Unexpected error: {str(e)}")
            return jsonify({
                'error': 'InternalServerError',
                'message': 'An unexpected error occurred'
            }), 500

    return decorated_function


def paginate(default_per_page=20, max_per_page=100):
    """Декоратор для пагинации результатов"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                page = int(request.args.get('page', 1))
                per_page = int(request.args.get('per_page', request.args.get('limit', default_per_page)))
            except ValueError:
                raise ValidationError("Invalid pagination parameters")

            if page < 1:
                page = 1

            if per_page > max_per_page:
                per_page = max_per_page
            elif per_page < 1:
                per_page = default_per_page

            g.pagination = {
                'page': page,
                'per_page': per_page,
                'offset': (page - 1) * per_page
            }

            return f(*args, **kwargs)

        return decorated_function
    return decorator
