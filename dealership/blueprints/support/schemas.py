# dealership/blueprints/support/schemas.py
from marshmallow import Schema, fields, validate
from dealership.models.support import TicketStatus


class CreateTicketSchema(Schema):
    """Схема обращения с публичного сайта"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    phone_number = fields.Str(allow_none=True, validate=validate.Length(max=50))
    message = fields.Str(required=True, validate=validate.Length(min=1, max=5000))


class UpdateTicketSchema(Schema):
    """Смена статуса тикета с необязательным ответом клиенту"""
    status = fields.Str(required=True, validate=validate.OneOf(TicketStatus.ALL))
    response = fields.Str(allow_none=True, validate=validate.Length(max=5000))
