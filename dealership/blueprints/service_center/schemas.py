# dealership/blueprints/service_center/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError
from dealership.models.service import BookingStatus


class ServiceSchema(Schema):
    """Схема услуги сервисного центра"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    price = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    duration = fields.Str(allow_none=True, validate=validate.Length(max=50))
    image_url = fields.Url(allow_none=True)
    is_active = fields.Bool(load_default=True)


class CreateBookingSchema(Schema):
    """Схема записи на сервис с публичного сайта"""
    service_id = fields.Int(required=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    phone_number = fields.Str(required=True, validate=validate.Length(min=3, max=50))
    car_details = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    preferred_date = fields.DateTime(required=True)
    alternate_date = fields.DateTime(allow_none=True)
    message = fields.Str(allow_none=True, validate=validate.Length(max=5000))

    @validates_schema
    def validate_dates(self, data, **kwargs):
        alternate = data.get('alternate_date')
        if alternate and alternate == data.get('preferred_date'):
            raise ValidationError("Alternate date must differ from preferred date", 'alternate_date')


class BookingStatusSchema(Schema):
    status = fields.Str(required=True, validate=validate.OneOf(BookingStatus.ALL))
    response = fields.Str(allow_none=True, validate=validate.Length(max=5000))


class BookingResponseSchema(Schema):
    message = fields.Str(required=True, validate=validate.Length(min=1, max=5000))
