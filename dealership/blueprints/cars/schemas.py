# dealership/blueprints/cars/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE
from dealership.models.car import CarStatus, validate_car_year


class CarSchema(Schema):
    """Схема создания автомобиля"""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    price = fields.Decimal(required=True, validate=validate.Range(min=0))
    description = fields.Str(allow_none=True)
    short_description = fields.Str(allow_none=True, validate=validate.Length(max=150))
    brand_id = fields.Int(required=True)
    model = fields.Str(allow_none=True, validate=validate.Length(max=100))
    mileage = fields.Int(load_default=0, validate=validate.Range(min=0))
    status = fields.Str(load_default=CarStatus.NEW, validate=validate.OneOf(CarStatus.ALL))
    engine_power = fields.Int(allow_none=True, validate=validate.Range(min=0))
    seats = fields.Int(allow_none=True, validate=validate.Range(min=1, max=100))
    color = fields.Str(allow_none=True, validate=validate.Length(max=50))
    year_of_manufacture = fields.Int(allow_none=True)
    current_location = fields.Str(allow_none=True, validate=validate.Length(max=255))
    availability = fields.Bool(load_default=True)
    drive = fields.Str(allow_none=True, validate=validate.Length(max=50))
    engine_size = fields.Float(allow_none=True, validate=validate.Range(min=0))
    fuel_type = fields.Str(allow_none=True, validate=validate.Length(max=50))
    horse_power = fields.Int(allow_none=True, validate=validate.Range(min=0))
    transmission = fields.Str(allow_none=True, validate=validate.Length(max=50))
    torque = fields.Str(allow_none=True, validate=validate.Length(max=50))
    aspiration = fields.Str(allow_none=True, validate=validate.Length(max=50))
    acceleration = fields.Float(allow_none=True, validate=validate.Range(min=0))
    badge = fields.Str(allow_none=True, validate=validate.Length(max=50))

    features = fields.List(fields.Int(), load_default=list)
    images = fields.List(fields.Url(), load_default=list)

    @validates('year_of_manufacture')
    def validate_year(self, value, **kwargs):
        if value is not None and not validate_car_year(value):
            raise ValidationError("Invalid year of manufacture")


class UpdateCarSchema(CarSchema):
    """Схема обновления автомобиля (загружается с partial=True)"""
    deleted_images = fields.List(fields.Int(), load_default=list)


class BulkCarSchema(Schema):
    """Список автомобилей для массового создания"""
    cars = fields.List(fields.Dict(), required=True, validate=validate.Length(min=1, max=500))
