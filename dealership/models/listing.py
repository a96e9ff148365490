# dealership/models/listing.py
"""
Модели заявок на продажу автомобиля (sell listings)
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, Date, ForeignKey, Numeric, JSON
from dealership.models.base import BaseModel, check_in, serialize_value
from dealership.extensions import db


class ListingStatus:
    """Статусы заявки на продажу"""
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    SOLD = 'SOLD'

    ALL = (PENDING, APPROVED, REJECTED, SOLD)

    # Допустимые переходы, остальные статусы конечные
    TRANSITIONS = {
        PENDING: (APPROVED, REJECTED),
        APPROVED: (SOLD,),
    }

    @classmethod
    def can_transition(cls, current, target):
        return target in cls.TRANSITIONS.get(current, ())


class ListingCondition:
    """Состояние автомобиля по оценке продавца"""
    GOOD = 'GOOD'
    AVERAGE = 'AVERAGE'
    POOR = 'POOR'
    BAD = 'BAD'

    ALL = (GOOD, AVERAGE, POOR, BAD)


# Контакты продавца
SELLER_FIELDS = ('name', 'email', 'phone_number')

# Характеристики автомобиля
CAR_SPEC_FIELDS = (
    'car_name', 'description', 'color', 'location', 'mileage', 'brand_name',
    'car_type', 'year_of_manufacture',
    'engine_power', 'engine_type', 'engine_size', 'fuel_type', 'transmission',
    'drive_type', 'horse_power', 'torque', 'acceleration', 'top_speed',
    'vin_number', 'registration_number', 'last_service_date', 'number_of_owners',
    'seating_capacity', 'doors', 'weight', 'fuel_tank_capacity',
)

# Оснащение и системы безопасности
EQUIPMENT_FIELDS = (
    'has_ac', 'has_power_steering', 'has_navigation', 'has_sunroof',
    'has_leather_seats', 'has_backup_camera', 'has_parking_sensors',
    'has_bluetooth_audio', 'has_cruise_control', 'has_keyless_entry',
    'has_abs', 'has_airbags', 'has_esp', 'has_traction_control',
)

# Состояние, цена и условия просмотра
OFFER_FIELDS = (
    'condition', 'selling_price', 'market_value', 'is_negotiable',
    'reason_for_selling', 'available_for_viewing', 'best_time_to_contact',
    'additional_info',
)

# Поля, которые администратор может исправить при одобрении заявки
EDITABLE_LISTING_FIELDS = SELLER_FIELDS + CAR_SPEC_FIELDS + EQUIPMENT_FIELDS + OFFER_FIELDS

# Поля, копируемые в архивный снимок при одобрении
ARCHIVED_LISTING_FIELDS = EDITABLE_LISTING_FIELDS + ('image_url', 'document_urls')


class SellerSubmissionMixin:
    """Общие колонки заявки продавца и ее архивного снимка"""

    # Продавец
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)

    # Основная информация
    car_name = Column(String(255), nullable=False)
    description = Column(Text)
    color = Column(String(50))
    location = Column(String(255))
    mileage = Column(Integer, nullable=False, default=0)
    brand_name = Column(String(100), nullable=False)
    car_type = Column(String(100))
    year_of_manufacture = Column(Integer)

    # Двигатель и динамика
    engine_power = Column(Integer)
    engine_type = Column(String(50))
    engine_size = Column(Float)
    fuel_type = Column(String(50))
    transmission = Column(String(50))
    drive_type = Column(String(50))
    horse_power = Column(Integer)
    torque = Column(String(50))
    acceleration = Column(Float)
    top_speed = Column(Integer)

    # Документы и характеристики
    vin_number = Column(String(17))
    registration_number = Column(String(50))
    last_service_date = Column(Date)
    number_of_owners = Column(Integer)
    seating_capacity = Column(Integer)
    doors = Column(Integer)
    weight = Column(Float)
    fuel_tank_capacity = Column(Float)

    # Оснащение
    has_ac = Column(Boolean, default=False)
    has_power_steering = Column(Boolean, default=False)
    has_navigation = Column(Boolean, default=False)
    has_sunroof = Column(Boolean, default=False)
    has_leather_seats = Column(Boolean, default=False)
    has_backup_camera = Column(Boolean, default=False)
    has_parking_sensors = Column(Boolean, default=False)
    has_bluetooth_audio = Column(Boolean, default=False)
    has_cruise_control = Column(Boolean, default=False)
    has_keyless_entry = Column(Boolean, default=False)

    # Безопасность
    has_abs = Column(Boolean, default=False)
    has_airbags = Column(Boolean, default=False)
    has_esp = Column(Boolean, default=False)
    has_traction_control = Column(Boolean, default=False)

    # Состояние и цена
    condition = Column(String(10), nullable=False, default=ListingCondition.GOOD)
    selling_price = Column(Numeric(12, 2), nullable=False)
    market_value = Column(Numeric(12, 2))
    is_negotiable = Column(Boolean, default=False)
    reason_for_selling = Column(Text)

    # Изображение (устаревшее единственное поле) и документы
    image_url = Column(String(1000))
    document_urls = Column(JSON, default=list)

    # Просмотр автомобиля
    available_for_viewing = Column(Boolean, default=True)
    best_time_to_contact = Column(String(100))

    additional_info = Column(JSON)


class SellListing(SellerSubmissionMixin, BaseModel):
    """Заявка продавца на продажу автомобиля"""
    __tablename__ = 'sell_listings'

    listing_id = Column(Integer, primary_key=True)
    status = Column(String(10), nullable=False, default=ListingStatus.PENDING, index=True)
    rejection_reason = Column(Text)

    brand_id = Column(Integer, ForeignKey('brands.brand_id', ondelete='SET NULL'))
    car_id = Column(Integer, ForeignKey('cars.car_id', ondelete='SET NULL'))
    member_id = Column(Integer, ForeignKey('members.member_id', ondelete='SET NULL'))

    __table_args__ = (
        check_in('status', ListingStatus.ALL, 'check_sell_listing_status'),
        check_in('condition', ListingCondition.ALL, 'check_sell_listing_condition'),
    )

    # Отношения
    images = db.relationship(
        'SellListingImage', back_populates='listing',
        order_by='SellListingImage.position', passive_deletes=True
    )
    brand = db.relationship('Brand')
    car = db.relationship('Car')
    member = db.relationship('Member', back_populates='sell_listings')

    @property
    def is_pending(self):
        return self.status == ListingStatus.PENDING

    @property
    def is_approved(self):
        return self.status == ListingStatus.APPROVED

    def can_transition_to(self, status):
        return ListingStatus.can_transition(self.status, status)

    def editable_values(self):
        """Текущие значения редактируемых полей"""
        return {field: getattr(self, field) for field in EDITABLE_LISTING_FIELDS}

    def to_dict(self, include_details=False, images=None):
        data = super().to_dict()

        if include_details:
            listing_images = self.images if images is None else images
            data['images'] = [image.to_dict() for image in listing_images]
            data['car'] = self.car.to_dict() if self.car else None
            data['member'] = self.member.to_dict() if self.member else None

        return data

    def __repr__(self):
        return f'<SellListing {self.listing_id}: {self.car_name} [{self.status}]>'


class SellListingImage(BaseModel):
    """Изображение заявки, загруженное продавцом"""
    __tablename__ = 'sell_listing_images'

    image_id = Column(Integer, primary_key=True)
    sell_listing_id = Column(
        Integer, ForeignKey('sell_listings.listing_id', ondelete='CASCADE'),
        nullable=False, index=True
    )
    url = Column(String(1000), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    listing = db.relationship('SellListing', back_populates='images')

    @classmethod
    def for_listing(cls, listing_id):
        """Изображения заявки напрямую из таблицы, в порядке загрузки"""
        return cls.query.filter(
            cls.sell_listing_id == listing_id
        ).order_by(cls.position, cls.image_id).all()

    def __repr__(self):
        return f'<SellListingImage {self.image_id} listing={self.sell_listing_id}>'


class SellListingOriginal(SellerSubmissionMixin, BaseModel):
    """Неизменяемый архивный снимок данных продавца на момент одобрения"""
    __tablename__ = 'sell_listing_originals'

    original_id = Column(Integer, primary_key=True)
    status = Column(String(10), nullable=False, default=ListingStatus.APPROVED)
    sell_listing_id = Column(Integer, ForeignKey('sell_listings.listing_id', ondelete='SET NULL'))
    car_id = Column(Integer, ForeignKey('cars.car_id', ondelete='SET NULL'), index=True)

    __table_args__ = (
        check_in('status', ListingStatus.ALL, 'check_sell_listing_original_status'),
    )

    car = db.relationship('Car')

    @classmethod
    def snapshot(cls, listing, brand_name, car_id):
        """Снимок полей заявки в том виде, в каком их прислал продавец"""
        values = {field: getattr(listing, field) for field in ARCHIVED_LISTING_FIELDS}
        values['brand_name'] = brand_name
        return cls(
            sell_listing_id=listing.listing_id,
            car_id=car_id,
            status=ListingStatus.APPROVED,
            **values
        )

    def to_summary(self):
        """Краткое представление для отчетов"""
        return {
            'original_id': self.original_id,
            'name': self.name,
            'email': self.email,
            'phone_number': self.phone_number,
            'car_name': self.car_name,
            'selling_price': serialize_value(self.selling_price),
            'status': self.status,
            'created_at': serialize_value(self.created_at),
            'updated_at': serialize_value(self.updated_at)
        }

    def __repr__(self):
        return f'<SellListingOriginal {self.original_id} car={self.car_id}>'
