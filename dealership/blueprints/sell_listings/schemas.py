# dealership/blueprints/sell_listings/schemas.py
from marshmallow import (
    Schema, fields, validate, validates, pre_load, ValidationError, EXCLUDE
)
from dealership.models.car import validate_car_year
from dealership.models.listing import ListingStatus, ListingCondition


class EditableListingSchema(Schema):
    """
    Поля заявки, которые администратор может исправить при одобрении.

    Набор полей совпадает с EDITABLE_LISTING_FIELDS (плюс brand_id для выбора
    существующей марки) и является единственным источником типов для них.
    """

    class Meta:
        unknown = EXCLUDE

    # Продавец
    name = fields.Str(validate=validate.Length(min=1, max=255))
    email = fields.Email()
    phone_number = fields.Str(validate=validate.Length(min=3, max=50))

    # Основная информация
    car_name = fields.Str(validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True, validate=validate.Length(max=10000))
    color = fields.Str(allow_none=True, validate=validate.Length(max=50))
    location = fields.Str(allow_none=True, validate=validate.Length(max=255))
    mileage = fields.Int(validate=validate.Range(min=0))
    brand_name = fields.Str(validate=validate.Length(min=1, max=100))
    brand_id = fields.Int(allow_none=True)
    car_type = fields.Str(allow_none=True, validate=validate.Length(max=100))
    year_of_manufacture = fields.Int(allow_none=True)

    # Двигатель и динамика
    engine_power = fields.Int(allow_none=True, validate=validate.Range(min=0))
    engine_type = fields.Str(allow_none=True, validate=validate.Length(max=50))
    engine_size = fields.Float(allow_none=True, validate=validate.Range(min=0))
    fuel_type = fields.Str(allow_none=True, validate=validate.Length(max=50))
    transmission = fields.Str(allow_none=True, validate=validate.Length(max=50))
    drive_type = fields.Str(allow_none=True, validate=validate.Length(max=50))
    horse_power = fields.Int(allow_none=True, validate=validate.Range(min=0))
    torque = fields.Str(allow_none=True, validate=validate.Length(max=50))
    acceleration = fields.Float(allow_none=True, validate=validate.Range(min=0))
    top_speed = fields.Int(allow_none=True, validate=validate.Range(min=0))

    # Документы и характеристики
    vin_number = fields.Str(allow_none=True, validate=validate.Length(max=17))
    registration_number = fields.Str(allow_none=True, validate=validate.Length(max=50))
    last_service_date = fields.Date(allow_none=True)
    number_of_owners = fields.Int(allow_none=True, validate=validate.Range(min=0))
    seating_capacity = fields.Int(allow_none=True, validate=validate.Range(min=1, max=100))
    doors = fields.Int(allow_none=True, validate=validate.Range(min=0, max=10))
    weight = fields.Float(allow_none=True, validate=validate.Range(min=0))
    fuel_tank_capacity = fields.Float(allow_none=True, validate=validate.Range(min=0))

    # Оснащение
    has_ac = fields.Bool(allow_none=True)
    has_power_steering = fields.Bool(allow_none=True)
    has_navigation = fields.Bool(allow_none=True)
    has_sunroof = fields.Bool(allow_none=True)
    has_leather_seats = fields.Bool(allow_none=True)
    has_backup_camera = fields.Bool(allow_none=True)
    has_parking_sensors = fields.Bool(allow_none=True)
    has_bluetooth_audio = fields.Bool(allow_none=True)
    has_cruise_control = fields.Bool(allow_none=True)
    has_keyless_entry = fields.Bool(allow_none=True)

    # Безопасность
    has_abs = fields.Bool(allow_none=True)
    has_airbags = fields.Bool(allow_none=True)
    has_esp = fields.Bool(allow_none=True)
    has_traction_control = fields.Bool(allow_none=True)

    # Состояние и цена
    condition = fields.Str(validate=validate.OneOf(ListingCondition.ALL))
    selling_price = fields.Decimal(validate=validate.Range(min=0, min_inclusive=False))
    market_value = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    is_negotiable = fields.Bool(allow_none=True)
    reason_for_selling = fields.Str(allow_none=True, validate=validate.Length(max=2000))

    # Просмотр автомобиля
    available_for_viewing = fields.Bool(allow_none=True)
    best_time_to_contact = fields.Str(allow_none=True, validate=validate.Length(max=100))

    additional_info = fields.Raw(allow_none=True)

    @validates('year_of_manufacture')
    def validate_year(self, value, **kwargs):
        if value is not None and not validate_car_year(value):
            raise ValidationError("Invalid year of manufacture")


class CreateSellListingSchema(EditableListingSchema):
    """Схема заявки продавца с публичного сайта"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True)
    phone_number = fields.Str(required=True, validate=validate.Length(min=3, max=50))
    car_name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    brand_name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    mileage = fields.Int(required=True, validate=validate.Range(min=0))
    selling_price = fields.Decimal(required=True, validate=validate.Range(min=0, min_inclusive=False))
    condition = fields.Str(load_default=ListingCondition.GOOD, validate=validate.OneOf(ListingCondition.ALL))

    # Изображения: основное (устаревшее поле) и дополнительные
    image_url = fields.Url(allow_none=True)
    additional_images = fields.List(fields.Url(), load_default=list)
    document_urls = fields.List(fields.Url(), load_default=list)
    member_id = fields.Int(allow_none=True)


class ListingStatusUpdateSchema(Schema):
    """
    Схема смены статуса заявки.

    Исправленные поля можно передать в edited_listing или прямо на верхнем
    уровне тела запроса.
    """

    class Meta:
        unknown = EXCLUDE

    status = fields.Str(required=True, validate=validate.OneOf(ListingStatus.ALL))
    rejection_reason = fields.Str(allow_none=True, validate=validate.Length(max=2000))
    edited_listing = fields.Nested(EditableListingSchema, allow_none=True)

    @pre_load
    def collect_inline_fields(self, data, **kwargs):
        if not isinstance(data, dict) or data.get('edited_listing') is not None:
            return data

        editable = set(EditableListingSchema().fields)
        inline = {key: value for key, value in data.items() if key in editable}
        if not inline:
            return data

        collected = {key: value for key, value in data.items() if key not in editable}
        collected['edited_listing'] = inline
        return collected


class ListingImagesSchema(Schema):
    """Схема добавления изображений к заявке"""
    urls = fields.List(fields.Url(), required=True, validate=validate.Length(min=1, max=50))
