# dealership/models/car.py
from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, Numeric, func
from dealership.models.base import BaseModel, check_in, serialize_value
from dealership.extensions import db


class CarStatus:
    """Статусы опубликованного автомобиля"""
    NEW = 'NEW'
    USED = 'USED'
    SOLD = 'SOLD'

    ALL = (NEW, USED, SOLD)


# Связь многие-ко-многим автомобилей и особенностей
car_features = db.Table(
    'car_features',
    Column('car_id', Integer, ForeignKey('cars.car_id', ondelete='CASCADE'), primary_key=True),
    Column('feature_id', Integer, ForeignKey('features.feature_id', ondelete='CASCADE'), primary_key=True)
)


class Brand(BaseModel):
    """Марки автомобилей"""
    __tablename__ = 'brands'

    brand_id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    logo_url = Column(String(500))

    # Отношения
    cars = db.relationship('Car', back_populates='brand', lazy='dynamic')

    @classmethod
    def find_by_name(cls, name):
        """Поиск марки по названию без учета регистра"""
        return cls.query.filter(
            func.lower(cls.name) == name.strip().lower()
        ).first()

    @property
    def cars_count(self):
        return self.cars.count()

    def to_dict(self, include_cars=False):
        data = {
            'brand_id': self.brand_id,
            'name': self.name,
            'logo_url': self.logo_url,
            'cars_count': self.cars_count,
            'created_at': serialize_value(self.created_at),
            'updated_at': serialize_value(self.updated_at)
        }

        if include_cars:
            data['cars'] = [car.to_dict() for car in self.cars.order_by(Car.created_at.desc())]

        return data

    def __repr__(self):
        return f'<Brand {self.name}>'


class Feature(BaseModel):
    """Особенности комплектации"""
    __tablename__ = 'features'

    feature_id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)

    cars = db.relationship('Car', secondary=car_features, back_populates='features')

    @classmethod
    def find_by_name(cls, name):
        """Поиск особенности по названию без учета регистра"""
        return cls.query.filter(
            func.lower(cls.name) == name.strip().lower()
        ).first()

    def to_dict(self):
        return {
            'feature_id': self.feature_id,
            'name': self.name,
            'cars_count': len(self.cars),
            'created_at': serialize_value(self.created_at),
            'updated_at': serialize_value(self.updated_at)
        }

    def __repr__(self):
        return f'<Feature {self.name}>'


class Car(BaseModel):
    """Опубликованный автомобиль дилерского центра"""
    __tablename__ = 'cars'

    car_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    description = Column(Text)
    short_description = Column(String(150))
    brand_id = Column(Integer, ForeignKey('brands.brand_id'), nullable=False, index=True)
    model = Column(String(100))
    mileage = Column(Integer, default=0)
    status = Column(String(10), nullable=False, default=CarStatus.NEW)
    engine_power = Column(Integer)
    seats = Column(Integer)
    color = Column(String(50))
    year_of_manufacture = Column(Integer)
    current_location = Column(String(255))
    availability = Column(Boolean, default=True)
    drive = Column(String(50))
    engine_size = Column(Float)
    fuel_type = Column(String(50))
    horse_power = Column(Integer)
    transmission = Column(String(50))
    torque = Column(String(50))
    aspiration = Column(String(50))
    acceleration = Column(Float)
    badge = Column(String(50))

    __table_args__ = (
        check_in('status', CarStatus.ALL, 'check_car_status'),
    )

    # Отношения
    brand = db.relationship('Brand', back_populates='cars')
    images = db.relationship(
        'CarImage', back_populates='car',
        cascade='all, delete-orphan', order_by='CarImage.image_id'
    )
    features = db.relationship('Feature', secondary=car_features, back_populates='cars')

    def to_dict(self, include_details=False):
        data = super().to_dict()
        data['brand_name'] = self.brand.name if self.brand else None

        if include_details:
            data['images'] = [image.to_dict() for image in self.images]
            data['features'] = [
                {'feature_id': feature.feature_id, 'name': feature.name}
                for feature in self.features
            ]

        return data

    def __repr__(self):
        return f'<Car {self.car_id}: {self.name}>'


class CarImage(BaseModel):
    """Изображения автомобиля"""
    __tablename__ = 'car_images'

    image_id = Column(Integer, primary_key=True)
    car_id = Column(Integer, ForeignKey('cars.car_id', ondelete='CASCADE'), nullable=False, index=True)
    url = Column(String(1000), nullable=False)

    car = db.relationship('Car', back_populates='images')

    def __repr__(self):
        return f'<CarImage {self.image_id} car={self.car_id}>'


def validate_car_year(year):
    """Валидация года автомобиля"""
    from datetime import datetime
    current_year = datetime.now().year

    if not isinstance(year, int):
        return False

    # Проверяем разумные границы
    return 1900 <= year <= current_year + 1
