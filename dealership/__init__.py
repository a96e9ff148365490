# dealership/__init__.py
import logging
from flask import Flask
from flask_cors import CORS
from dealership.extensions import db, jwt, migrate, ma, cache, limiter, mail
from dealership.config import Config


def create_app(config_class=Config):
    """Factory function для создания Flask приложения"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Инициализация расширений
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)
    cache.init_app(app)
    limiter.init_app(app)
    mail.init_app(app)
    CORS(app)

    # /api/cars и /api/cars/ обрабатываются одинаково
    app.url_map.strict_slashes = False

    # Регистрация blueprints
    from dealership.blueprints.auth import bp as auth_bp, setup_bp
    from dealership.blueprints.sell_listings import bp as sell_listings_bp
    from dealership.blueprints.brands import bp as brands_bp
    from dealership.blueprints.features import bp as features_bp
    from dealership.blueprints.cars import bp as cars_bp
    from dealership.blueprints.members import bp as members_bp
    from dealership.blueprints.support import support_bp
    from dealership.blueprints.service_center import services_bp, bookings_bp
    from dealership.blueprints.dashboard import bp as dashboard_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(setup_bp, url_prefix='/api/setup')
    app.register_blueprint(sell_listings_bp, url_prefix='/api/sell-listings')
    app.register_blueprint(brands_bp, url_prefix='/api/brands')
    app.register_blueprint(features_bp, url_prefix='/api/features')
    app.register_blueprint(cars_bp, url_prefix='/api/cars')
    app.register_blueprint(members_bp, url_prefix='/api/members')
    app.register_blueprint(support_bp, url_prefix='/api/tickets')
    app.register_blueprint(services_bp, url_prefix='/api/services')
    app.register_blueprint(bookings_bp, url_prefix='/api/service-bookings')
    app.register_blueprint(dashboard_bp, url_prefix='/api')

    # Регистрация обработчиков ошибок
    register_error_handlers(app)

    # Импорт моделей для правильной работы миграций
    from dealership import models

    @app.route('/health')
    def health_check():
        """Проверка работоспособности API"""
        return {'status': 'healthy', 'version': '1.0.0'}

    return app


def configure_logging(app):
    """Уровень логирования из LOG_LEVEL"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    logging.getLogger('dealership').setLevel(level)
    app.logger.setLevel(level)


def register_error_handlers(app):
    """Регистрация обработчиков ошибок"""
    from flask import jsonify
    from flask_limiter.errors import RateLimitExceeded
    from dealership.utils.exceptions import BaseAppException

    @app.errorhandler(BaseAppException)
    def handle_app_exception(e):
        db.session.rollback()
        return jsonify({'error': e.__class__.__name__, 'message': e.message}), e.code

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(e):
        return jsonify({
            'error': 'RateLimitError',
            'message': f"Rate limit exceeded: {e.description}"
        }), 429

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({'error': 'NotFoundError', 'message': 'Resource not found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({'error': 'MethodNotAllowed', 'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_internal_error(e):
        db.session.rollback()
        app.logger.error(f"Unhandled server error: {e}")
        return jsonify({'error': 'InternalServerError', 'message': 'Something went wrong'}), 500
