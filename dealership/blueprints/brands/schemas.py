# dealership/blueprints/brands/schemas.py
from marshmallow import Schema, fields, validate


class BrandSchema(Schema):
    """Схема создания марки"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    logo_url = fields.Url(allow_none=True)


class UpdateBrandSchema(Schema):
    """Схема обновления марки"""
    name = fields.Str(validate=validate.Length(min=1, max=100))
    logo_url = fields.Url(allow_none=True)
