# dealership/blueprints/auth/routes.py
from flask import request, jsonify, g, current_app
from flask_jwt_extended import jwt_required
from dealership.blueprints.auth import bp, setup_bp
from dealership.blueprints.auth.schemas import (
    LoginSchema, InvitationSchema, AcceptInvitationSchema,
    ForgotPasswordSchema, ResetPasswordSchema, SuperAdminSetupSchema
)
from dealership.blueprints.auth.services import AuthService, SetupService
from dealership.extensions import limiter
from dealership.utils.decorators import validate_json, handle_errors, auth_required, admin_required
from dealership.utils.exceptions import AuthenticationError, ValidationError
from dealership.utils.helpers import build_response, get_client_ip


@bp.route('/login', methods=['POST'])
@limiter.limit("10 per 15 minutes")
@handle_errors
@validate_json(LoginSchema)
def login():
    """Вход сотрудника"""
    data = g.validated_data

    user, tokens = AuthService.authenticate_user(data['email'], data['password'])

    return jsonify(build_response(
        data={'user': user.to_dict(), 'tokens': tokens},
        message="Login successful"
    ))


@bp.route('/logout', methods=['POST'])
@handle_errors
@jwt_required()
def logout():
    AuthService.logout_user()
    return jsonify(build_response(message="Logout successful"))


@bp.route('/me', methods=['GET'])
@handle_errors
@auth_required
def get_current_user():
    return jsonify(build_response(g.current_user.to_dict()))


@bp.route('/refresh', methods=['POST'])
@handle_errors
@jwt_required(refresh=True)
def refresh():
    """Обновление access токена"""
    access_token = AuthService.refresh_access_token()
    return jsonify(build_response(
        data={'access_token': access_token},
        message="Token refreshed successfully"
    ))


@bp.route('/invitation', methods=['POST'])
@handle_errors
@admin_required
@validate_json(InvitationSchema)
def create_invitation():
    """Приглашение нового сотрудника"""
    data = g.validated_data

    invitation = AuthService.create_invitation(g.current_user, data['email'], data['role'])

    return jsonify(build_response(
        data=invitation.to_dict(),
        message="Invitation sent successfully"
    )), 201


@bp.route('/invitation', methods=['GET'])
@handle_errors
def get_invitation():
    token = request.args.get('token')
    if not token:
        raise ValidationError("Token is required", 'token')

    invitation = AuthService.get_invitation(token)
    return jsonify(build_response(invitation.to_dict()))


@bp.route('/accept-invitation', methods=['POST'])
@handle_errors
@validate_json(AcceptInvitationSchema)
def accept_invitation():
    data = g.validated_data

    user, tokens = AuthService.accept_invitation(data['token'], data['name'], data['password'])

    return jsonify(build_response(
        data={'user': user.to_dict(), 'tokens': tokens},
        message="Invitation accepted successfully"
    ))


@bp.route('/forgot-password', methods=['POST'])
@limiter.limit("5 per hour")
@handle_errors
@validate_json(ForgotPasswordSchema)
def forgot_password():
    """Запрос ссылки для сброса пароля"""
    AuthService.request_password_reset(g.validated_data['email'])

    return jsonify(build_response(
        message="If an account with that email exists, we've sent a password reset link."
    ))


@bp.route('/reset-password', methods=['POST'])
@handle_errors
@validate_json(ResetPasswordSchema)
def reset_password():
    data = g.validated_data
    AuthService.reset_password(data['token'], data['password'])
    return jsonify(build_response(message="Password has been reset successfully."))


@setup_bp.route('/super-admin', methods=['GET'])
@handle_errors
def super_admin_status():
    return jsonify(build_response({'exists': SetupService.super_admin_exists()}))


@setup_bp.route('/super-admin', methods=['POST'])
@handle_errors
@validate_json(SuperAdminSetupSchema)
def create_super_admin():
    """Создание первого супер-администратора по токену настройки"""
    if request.headers.get('X-Setup-Token') != current_app.config['SETUP_TOKEN']:
        current_app.logger.warning(f"Unauthorized super admin setup attempt from {get_client_ip()}")
        raise AuthenticationError("Invalid setup token")

    data = g.validated_data
    user = SetupService.create_super_admin(data['email'], data['name'], data['password'])

    return jsonify(build_response(
        data=user.to_dict(),
        message="Super admin created successfully"
    )), 201
