# scripts/seed_data.py
"""
Скрипт для заполнения базы данных базовыми справочными данными
"""

from decimal import Decimal
from dealership.extensions import db
from dealership.models import Brand, Feature, Service


def get_or_create(model, defaults=None, **lookup):
    """Поиск записи по полям lookup или создание с defaults"""
    instance = model.query.filter_by(**lookup).first()
    if instance:
        return instance, False

    instance = model(**lookup, **(defaults or {}))
    db.session.add(instance)
    return instance, True


def seed_brands():
    """Заполнение марок"""
    brands_data = [
        ('Toyota', 'https://placehold.co/200x200?text=Toyota'),
        ('Honda', 'https://placehold.co/200x200?text=Honda'),
        ('Nissan', 'https://placehold.co/200x200?text=Nissan'),
        ('Mazda', 'https://placehold.co/200x200?text=Mazda'),
        ('Subaru', 'https://placehold.co/200x200?text=Subaru'),
        ('Mercedes-Benz', 'https://placehold.co/200x200?text=Mercedes-Benz'),
        ('BMW', 'https://placehold.co/200x200?text=BMW'),
        ('Volkswagen', 'https://placehold.co/200x200?text=Volkswagen'),
    ]

    for name, logo_url in brands_data:
        brand, created = get_or_create(Brand, name=name, defaults={'logo_url': logo_url})
        if created:
            print(f"Создана марка: {name}")


def seed_features():
    """Заполнение особенностей комплектации"""
    features_data = [
        'Air Conditioning', 'Navigation System', 'Sunroof', 'Leather Seats',
        'Backup Camera', 'Parking Sensors', 'Bluetooth', 'Cruise Control',
        'Keyless Entry', 'Heated Seats', 'Alloy Wheels', 'Four Wheel Drive',
    ]

    for name in features_data:
        feature, created = get_or_create(Feature, name=name)
        if created:
            print(f"Создана особенность: {name}")


def seed_services():
    """Заполнение каталога услуг"""
    services_data = [
        ('Oil Change', 'Engine oil and filter replacement', Decimal('3500.00'), '1 hour'),
        ('Full Service', 'Complete inspection and scheduled maintenance', Decimal('15000.00'), '4 hours'),
        ('Brake Service', 'Brake pads and discs inspection and replacement', Decimal('8000.00'), '2 hours'),
        ('Wheel Alignment', 'Four wheel alignment and balancing', Decimal('4000.00'), '1 hour'),
        ('Diagnostics', 'Computer diagnostics of engine and electronics', Decimal('2500.00'), '30 minutes'),
    ]

    for name, description, price, duration in services_data:
        service, created = get_or_create(
            Service,
            name=name,
            defaults={'description': description, 'price': price, 'duration': duration}
        )
        if created:
            print(f"Создана услуга: {name}")


def seed_initial_data():
    """Заполнение всех базовых данных"""
    print("Начинаем заполнение базовых данных...")

    seed_brands()
    seed_features()
    seed_services()

    try:
        db.session.commit()
        print("Базовые данные успешно загружены!")
    except Exception as e:
        db.session.rollback()
        print(f"Ошибка при загрузке данных: {e}")
        raise


if __name__ == '__main__':
    from dealership import create_app

    app = create_app()
    with app.app_context():
        seed_initial_data()
