# dealership/models/service.py
"""
Модели сервисного обслуживания: каталог услуг и записи на сервис
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Numeric
from dealership.models.base import BaseModel, check_in, serialize_value
from dealership.extensions import db


class BookingStatus:
    """Статусы записи на сервис"""
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'
    RESCHEDULED = 'RESCHEDULED'

    ALL = (PENDING, CONFIRMED, COMPLETED, CANCELLED, RESCHEDULED)


class Service(BaseModel):
    """Услуга сервисного центра"""
    __tablename__ = 'services'

    service_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(12, 2))
    duration = Column(String(50))
    image_url = Column(String(1000))
    is_active = Column(Boolean, nullable=False, default=True)

    bookings = db.relationship('ServiceBooking', back_populates='service', lazy='dynamic')

    def to_brief(self):
        return {
            'service_id': self.service_id,
            'name': self.name,
            'price': serialize_value(self.price)
        }

    def __repr__(self):
        return f'<Service {self.name}>'


class ServiceBooking(BaseModel):
    """Запись клиента на сервисное обслуживание"""
    __tablename__ = 'service_bookings'

    booking_id = Column(Integer, primary_key=True)
    service_id = Column(Integer, ForeignKey('services.service_id'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)
    car_details = Column(Text, nullable=False)
    preferred_date = Column(DateTime, nullable=False)
    alternate_date = Column(DateTime)
    message = Column(Text)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING, index=True)

    __table_args__ = (
        check_in('status', BookingStatus.ALL, 'check_booking_status'),
    )

    service = db.relationship('Service', back_populates='bookings')
    responses = db.relationship(
        'ServiceBookingResponse', back_populates='booking',
        cascade='all, delete-orphan', order_by='ServiceBookingResponse.created_at.desc()'
    )

    def to_dict(self, include_responses=False):
        data = super().to_dict()
        data['service'] = self.service.to_brief() if self.service else None
        if include_responses:
            data['responses'] = [response.to_dict() for response in self.responses]
        return data

    def __repr__(self):
        return f'<ServiceBooking {self.booking_id} [{self.status}]>'


class ServiceBookingResponse(BaseModel):
    """Ответ сотрудника по записи на сервис"""
    __tablename__ = 'service_booking_responses'

    response_id = Column(Integer, primary_key=True)
    booking_id = Column(
        Integer, ForeignKey('service_bookings.booking_id', ondelete='CASCADE'),
        nullable=False, index=True
    )
    message = Column(Text, nullable=False)

    booking = db.relationship('ServiceBooking', back_populates='responses')
