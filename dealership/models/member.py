# dealership/models/member.py
from sqlalchemy import Column, Integer, String, Boolean, or_
from dealership.models.base import BaseModel
from dealership.extensions import db


class Member(BaseModel):
    """Зарегистрированный участник публичного сайта"""
    __tablename__ = 'members'

    member_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone_number = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)

    sell_listings = db.relationship('SellListing', back_populates='member')

    @classmethod
    def search(cls, query, text):
        """Фильтр по имени, email или телефону"""
        pattern = f'%{text}%'
        return query.filter(or_(
            cls.name.ilike(pattern),
            cls.email.ilike(pattern),
            cls.phone_number.like(pattern)
        ))

    def __repr__(self):
        return f'<Member {self.email}>'
