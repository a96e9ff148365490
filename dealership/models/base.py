# dealership/models/base.py
from datetime import datetime, date, timezone
from decimal import Decimal
from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declared_attr
from dealership.extensions import db


def utcnow():
    """Текущее время в UTC без tzinfo (так хранятся все временные метки)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize_value(value):
    """Приведение значения колонки к JSON-совместимому виду"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class TimestampMixin:
    """Миксин для добавления временных меток"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=utcnow, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class BaseModel(TimestampMixin, db.Model):
    """Базовая модель с общими полями"""
    __abstract__ = True

    def save(self):
        """Сохранение записи"""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self):
        """Жесткое удаление записи"""
        db.session.delete(self)
        db.session.commit()

    def touch(self):
        """Обновление метки updated_at без коммита"""
        self.updated_at = utcnow()

    def to_dict(self, exclude=None):
        """Преобразование в словарь"""
        exclude = exclude or []
        return {
            column.name: serialize_value(getattr(self, column.name))
            for column in self.__table__.columns
            if column.name not in exclude
        }

    @classmethod
    def create(cls, **kwargs):
        """Создание новой записи"""
        instance = cls(**kwargs)
        return instance.save()

    @classmethod
    def get_by_id(cls, record_id):
        """Получение записи по первичному ключу"""
        return db.session.get(cls, record_id)


def check_in(column, values, name):
    """CHECK-ограничение на допустимые значения строковой колонки"""
    allowed = ', '.join(f"'{value}'" for value in values)
    return db.CheckConstraint(f"{column} IN ({allowed})", name=name)
