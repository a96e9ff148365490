# dealership/blueprints/features/schemas.py
from marshmallow import Schema, fields, validate


class FeatureSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
