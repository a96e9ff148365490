# dealership/blueprints/support/services.py
"""
Сервис обращений клиентов
"""

import logging
from sqlalchemy.orm import selectinload
from dealership.extensions import db
from dealership.models.support import Ticket, TicketResponse, TicketStatus
from dealership.utils.exceptions import TicketNotFoundError
from dealership.utils.mail import send_ticket_created_email, send_ticket_status_email
from dealership.utils.pagination import paginate_query

logger = logging.getLogger(__name__)

FIRST_TICKET_SEQUENCE = 1001


class SupportService:
    """Сервис для работы с тикетами поддержки"""

    @staticmethod
    def next_ticket_number():
        """Следующий свободный номер тикета: TKT-(количество + 1001)"""
        sequence = Ticket.query.count() + FIRST_TICKET_SEQUENCE
        number = Ticket.format_number(sequence)

        while Ticket.query.filter(Ticket.ticket_number == number).first():
            sequence += 1
            number = Ticket.format_number(sequence)

        return number

    @staticmethod
    def create_ticket(data):
        ticket = Ticket(
            ticket_number=SupportService.next_ticket_number(),
            status=TicketStatus.OPEN,
            **data
        )
        db.session.add(ticket)
        db.session.commit()

        send_ticket_created_email(ticket)

        logger.info(f"Ticket {ticket.ticket_number} created by {ticket.email}")
        return ticket

    @staticmethod
    def get_tickets(filters):
        query = Ticket.query

        if filters.get('status'):
            query = query.filter(Ticket.status == filters['status'])

        if filters.get('search'):
            query = Ticket.search(query, filters['search'].strip())

        query = query.order_by(Ticket.created_at.desc(), Ticket.ticket_id.desc())
        return paginate_query(query, filters.get('page'), filters.get('per_page'))

    @staticmethod
    def get_ticket(ticket_id):
        ticket = Ticket.query.options(
            selectinload(Ticket.responses)
        ).filter(Ticket.ticket_id == ticket_id).first()

        if not ticket:
            raise TicketNotFoundError(ticket_id)
        return ticket

    @staticmethod
    def update_ticket(ticket_id, status, response=None):
        """
        Смена статуса тикета

        Args:
            ticket_id: ID тикета
            status: Новый статус
            response: Текст ответа клиенту (сохраняется и отправляется письмом)
        """
        ticket = SupportService.get_ticket(ticket_id)

        ticket.status = status
        ticket.touch()

        response_text = (response or '').strip()
        if response_text:
            ticket.responses.append(TicketResponse(message=response_text))

        db.session.commit()

        send_ticket_status_email(ticket, response_text or None)

        logger.info(f"Ticket {ticket.ticket_number} status changed to {status}")
        return ticket

    @staticmethod
    def delete_ticket(ticket_id):
        ticket = SupportService.get_ticket(ticket_id)
        db.session.delete(ticket)
        db.session.commit()
        logger.info(f"Ticket {ticket_id} deleted")
