# run.py
import os
import click
from dealership import create_app
from dealership.extensions import db
from dealership.config import config
from dealership.tasks import init_celery

# Получаем конфигурацию из переменной окружения
config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config[config_name])

# Celery worker: celery -A run.celery worker --beat
celery = init_celery(app)


@app.cli.command('init-db')
def init_db():
    """Инициализация базы данных"""
    print("Создание таблиц базы данных...")
    db.create_all()
    print("Таблицы созданы успешно!")


@app.cli.command('drop-db')
def drop_db():
    """Удаление всех таблиц"""
    if input("Вы уверены? Это удалит все данные! (yes/no): ") == 'yes':
        print("Удаление таблиц...")
        db.drop_all()
        print("Таблицы удалены!")


@app.cli.command('seed-data')
def seed_data():
    """Заполнение базы данных базовыми данными"""
    from scripts.seed_data import seed_initial_data
    print("Заполнение базовых данных...")
    seed_initial_data()


@app.cli.command('create-super-admin')
@click.option('--email', prompt=True)
@click.option('--name', prompt=True)
@click.password_option()
def create_super_admin(email, name, password):
    """Создание первого супер-администратора"""
    from dealership.blueprints.auth.services import SetupService
    from dealership.utils.exceptions import BaseAppException

    try:
        user = SetupService.create_super_admin(email, name, password)
    except BaseAppException as e:
        raise click.ClickException(e.message)

    print(f"Супер-администратор {user.email} создан!")


@app.shell_context_processor
def make_shell_context():
    """Контекст для Flask shell"""
    from dealership import models
    return {
        'db': db,
        'User': models.User,
        'SellListing': models.SellListing,
        'Car': models.Car,
        'Brand': models.Brand,
    }


@app.route('/')
def index():
    """Главная страница API"""
    return {
        'message': 'Dealership Back-Office API',
        'version': '1.0.0',
        'endpoints': {
            'auth': '/api/auth',
            'sell_listings': '/api/sell-listings',
            'cars': '/api/cars',
            'brands': '/api/brands',
            'features': '/api/features',
            'members': '/api/members',
            'tickets': '/api/tickets',
            'services': '/api/services',
            'service_bookings': '/api/service-bookings',
            'dashboard': '/api/dashboard/stats',
            'health': '/health'
        }
    }


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
