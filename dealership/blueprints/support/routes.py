# dealership/blueprints/support/routes.py
"""
Роуты для системы поддержки
"""

from flask import request, jsonify, g
from dealership.blueprints.support import support_bp
from dealership.blueprints.support.schemas import CreateTicketSchema, UpdateTicketSchema
from dealership.blueprints.support.services import SupportService
from dealership.extensions import limiter
from dealership.models.support import TicketStatus
from dealership.utils.decorators import validate_json, handle_errors, admin_required, paginate
from dealership.utils.exceptions import ValidationError
from dealership.utils.helpers import build_response
from dealership.utils.pagination import create_pagination_response


@support_bp.route('/', methods=['POST'])
@limiter.limit("10 per hour")
@handle_errors
@validate_json(CreateTicketSchema)
def create_ticket():
    """Создание обращения с публичного сайта"""
    ticket = SupportService.create_ticket(g.validated_data)
    return jsonify(build_response(ticket.to_dict(), "Ticket created successfully")), 201


@support_bp.route('/', methods=['GET'])
@handle_errors
@admin_required
@paginate()
def get_tickets():
    status = request.args.get('status')
    if status and status not in TicketStatus.ALL:
        raise ValidationError(f"Invalid status: {status}", 'status')

    filters = {'status': status, 'search': request.args.get('search')}
    filters.update(g.pagination)

    pagination = SupportService.get_tickets(filters)
    return jsonify(create_pagination_response(pagination))


@support_bp.route('/<int:ticket_id>', methods=['GET'])
@handle_errors
@admin_required
def get_ticket(ticket_id):
    ticket = SupportService.get_ticket(ticket_id)
    return jsonify(build_response(ticket.to_dict(include_responses=True)))


@support_bp.route('/<int:ticket_id>', methods=['PATCH'])
@handle_errors
@admin_required
@validate_json(UpdateTicketSchema)
def update_ticket(ticket_id):
    data = g.validated_data
    ticket = SupportService.update_ticket(ticket_id, data['status'], data.get('response'))
    return jsonify(build_response(ticket.to_dict(include_responses=True), "Ticket updated successfully"))


@support_bp.route('/<int:ticket_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_ticket(ticket_id):
    SupportService.delete_ticket(ticket_id)
    return jsonify({'success': True, 'message': "Ticket deleted successfully"})
