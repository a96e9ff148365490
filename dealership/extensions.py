# dealership/extensions.py
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_marshmallow import Marshmallow
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_mail import Mail
from celery import Celery

# Инициализация расширений
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
ma = Marshmallow()
cache = Cache()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"]
)
mail = Mail()


def make_celery(app):
    """Создание Celery instance с Flask контекстом"""
    celery = Celery(
        app.import_name,
        backend=app.config['CELERY_RESULT_BACKEND'],
        broker=app.config['CELERY_BROKER_URL']
    )
    celery.conf.update(
        broker_url=app.config['CELERY_BROKER_URL'],
        result_backend=app.config['CELERY_RESULT_BACKEND'],
        task_always_eager=app.config.get('TESTING', False)
    )

    class ContextTask(celery.Task):
        """Обертка для выполнения задач в контексте Flask приложения"""
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery


# Настройки JWT
def _token_error(message):
    """Ответ 401 в формате ошибок приложения"""
    from flask import jsonify
    return jsonify({'error': 'AuthenticationError', 'message': message}), 401


@jwt.token_in_blocklist_loader
def check_if_token_revoked(jwt_header, jwt_payload):
    """Отозванные токены хранятся в revoked_tokens"""
    from dealership.models.user import RevokedToken
    return RevokedToken.is_jti_blacklisted(jwt_payload['jti'])


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return _token_error('Token has expired')


@jwt.invalid_token_loader
def invalid_token_callback(error):
    return _token_error('Invalid token')


@jwt.unauthorized_loader
def missing_token_callback(error):
    return _token_error('Authorization token is required')


@jwt.revoked_token_loader
def revoked_token_callback(jwt_header, jwt_payload):
    return _token_error('Token has been revoked')


@jwt.additional_claims_loader
def add_claims_to_jwt(identity):
    """Роль и email сотрудника в claims токена"""
    from dealership.models.user import User
    user = db.session.get(User, int(identity))
    return {
        'role': user.role if user else 'USER',
        'email': user.email if user else None
    }
