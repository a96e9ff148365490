# dealership/models/support.py
"""
Модели для системы поддержки
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, or_
from dealership.models.base import BaseModel, check_in
from dealership.extensions import db


class TicketStatus:
    """Статусы обращения"""
    OPEN = 'OPEN'
    IN_PROGRESS = 'IN_PROGRESS'
    RESOLVED = 'RESOLVED'
    CLOSED = 'CLOSED'

    ALL = (OPEN, IN_PROGRESS, RESOLVED, CLOSED)


class Ticket(BaseModel):
    """Модель тикета поддержки"""
    __tablename__ = 'tickets'

    ticket_id = Column(Integer, primary_key=True)
    ticket_number = Column(String(20), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50))
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=TicketStatus.OPEN, index=True)

    __table_args__ = (
        check_in('status', TicketStatus.ALL, 'check_ticket_status'),
    )

    responses = db.relationship(
        'TicketResponse', back_populates='ticket',
        cascade='all, delete-orphan', order_by='TicketResponse.created_at.desc()'
    )

    @staticmethod
    def format_number(sequence):
        """Номер тикета вида TKT-1001"""
        return f"TKT-{sequence:04d}"

    @classmethod
    def search(cls, query, text):
        pattern = f'%{text}%'
        return query.filter(or_(
            cls.name.ilike(pattern),
            cls.email.ilike(pattern),
            cls.ticket_number.ilike(pattern),
            cls.message.ilike(pattern)
        ))

    def to_dict(self, include_responses=False):
        data = super().to_dict()
        if include_responses:
            data['responses'] = [response.to_dict() for response in self.responses]
        return data

    def __repr__(self):
        return f'<Ticket {self.ticket_number} [{self.status}]>'


class TicketResponse(BaseModel):
    """Ответ сотрудника на тикет"""
    __tablename__ = 'ticket_responses'

    response_id = Column(Integer, primary_key=True)
    ticket_id = Column(Integer, ForeignKey('tickets.ticket_id', ondelete='CASCADE'), nullable=False, index=True)
    message = Column(Text, nullable=False)

    ticket = db.relationship('Ticket', back_populates='responses')
