# dealership/blueprints/members/schemas.py
from marshmallow import Schema, fields


class MemberStatusSchema(Schema):
    is_active = fields.Bool(required=True)
