# dealership/blueprints/auth/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError
from dealership.models.user import UserRole
from dealership.utils.helpers import validate_email_address


class EmailFieldMixin:
    """Проверка и нормализация email через email-validator"""

    @validates('email')
    def validate_email(self, value, **kwargs):
        try:
            validate_email_address(value)
        except ValueError as e:
            raise ValidationError(str(e))


class LoginSchema(Schema):
    """Схема для входа сотрудника"""
    email = fields.Str(required=True, validate=validate.Length(min=3, max=255))
    password = fields.Str(required=True, validate=validate.Length(min=1, max=100))


class InvitationSchema(EmailFieldMixin, Schema):
    """Схема приглашения нового сотрудника"""
    email = fields.Str(required=True, validate=validate.Length(max=255))
    role = fields.Str(load_default=UserRole.USER, validate=validate.OneOf(UserRole.ALL))


class AcceptInvitationSchema(Schema):
    """Схема принятия приглашения"""
    token = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    password = fields.Str(required=True, validate=validate.Length(min=8, max=100))


class ForgotPasswordSchema(Schema):
    email = fields.Str(required=True, validate=validate.Length(min=3, max=255))


class ResetPasswordSchema(Schema):
    """Схема установки нового пароля по токену"""
    token = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    password = fields.Str(required=True, validate=validate.Length(min=8, max=100))


class SuperAdminSetupSchema(EmailFieldMixin, Schema):
    """Схема создания первого супер-администратора"""
    email = fields.Str(required=True, validate=validate.Length(max=255))
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    password = fields.Str(required=True, validate=validate.Length(min=8, max=100))
