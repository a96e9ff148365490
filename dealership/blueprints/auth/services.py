# dealership/blueprints/auth/services.py
import logging
from datetime import timedelta
from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity
from dealership.extensions import db
from dealership.models.base import utcnow
from dealership.models.user import (
    User, UserRole, UserStatus, Invitation, InvitationStatus,
    PasswordResetToken, RevokedToken, UserActivity
)
from dealership.utils.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, EmailAlreadyExistsError,
    InvalidCredentialsError, InvalidTokenError, UserNotFoundError
)
from dealership.utils.helpers import generate_secure_token, get_client_ip, get_user_agent
from dealership.utils.mail import send_invitation_email, send_password_reset_email, send_welcome_email

logger = logging.getLogger(__name__)


class AuthService:
    """Сервис аутентификации сотрудников"""

    @staticmethod
    def authenticate_user(email, password):
        """
        Аутентификация сотрудника

        Args:
            email: Email сотрудника
            password: Пароль

        Returns:
            Кортеж (пользователь, токены)

        Raises:
            InvalidCredentialsError: Неверные учетные данные
            AuthenticationError: Email не подтвержден
            AuthorizationError: Учетная запись заблокирована
        """
        user = User.find_by_email(email)

        if not user or not user.check_password(password):
            logger.info(f"Failed login attempt for {email}")
            raise InvalidCredentialsError()

        if user.status == UserStatus.PENDING:
            raise AuthenticationError("Please verify your email before logging in")

        if user.status == UserStatus.SUSPENDED:
            raise AuthorizationError("Your account has been suspended")

        tokens = user.generate_tokens()

        UserActivity.log(
            user.user_id, 'login',
            details=f"User {user.email} logged in",
            ip_address=get_client_ip(),
            user_agent=get_user_agent()
        )
        user.update_last_login()

        logger.info(f"User {user.user_id} logged in")
        return user, tokens

    @staticmethod
    def logout_user():
        """Выход сотрудника (добавление токена в черный список)"""
        jti = get_jwt()['jti']
        user_id = int(get_jwt_identity())

        RevokedToken.revoke_token(jti, user_id)
        logger.info(f"User {user_id} logged out")

    @staticmethod
    def refresh_access_token():
        """
        Новый access токен по refresh токену

        Raises:
            AuthenticationError: Пользователь не найден или неактивен
        """
        user = db.session.get(User, int(get_jwt_identity()))

        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return create_access_token(identity=str(user.user_id))

    @staticmethod
    def create_invitation(inviter, email, role):
        """
        Приглашение нового сотрудника

        Args:
            inviter: Приглашающий сотрудник
            email: Email приглашаемого
            role: Роль приглашаемого

        Returns:
            Созданное приглашение

        Raises:
            ConflictError: Пользователь уже есть или приглашение уже отправлено
            AuthorizationError: Приглашение супер-администратора не супер-администратором
        """
        email = email.strip().lower()

        if User.find_by_email(email):
            raise EmailAlreadyExistsError(email)

        if Invitation.find_pending(email):
            raise ConflictError("An invitation has already been sent to this email")

        if role == UserRole.SUPER_ADMIN and not inviter.is_super_admin:
            raise AuthorizationError("You do not have permission to invite SUPER_ADMIN users")

        invitation = Invitation(
            email=email,
            role=role,
            token=generate_secure_token(),
            expires_at=utcnow() + timedelta(days=current_app.config['INVITATION_EXPIRES_DAYS']),
            status=InvitationStatus.PENDING,
            inviter_id=inviter.user_id
        )
        db.session.add(invitation)
        UserActivity.log(inviter.user_id, 'invite_user', details=f"Invited {email} as {role}")
        db.session.commit()

        send_invitation_email(email, inviter.name or inviter.email, role, invitation.token)

        logger.info(f"User {inviter.user_id} invited {email} as {role}")
        return invitation

    @staticmethod
    def get_invitation(token):
        invitation = Invitation.find_by_token(token)
        if not invitation:
            raise NotFoundError("Invalid invitation token", "invitation")
        return invitation

    @staticmethod
    def accept_invitation(token, name, password):
        """
        Принятие приглашения: создание (или реактивация) сотрудника

        Returns:
            Кортеж (пользователь, токены)
        """
        invitation = AuthService.get_invitation(token)

        if invitation.is_expired:
            raise InvalidTokenError("Invitation has expired")

        if invitation.is_accepted:
            raise InvalidTokenError("Invitation has already been accepted")

        user = User.find_by_email(invitation.email)
        if user is None:
            user = User(email=invitation.email, invited_by_id=invitation.inviter_id)
            db.session.add(user)

        user.name = name
        user.set_password(password)
        user.role = invitation.role
        user.status = UserStatus.ACTIVE
        user.email_verified_at = utcnow()
        db.session.flush()

        invitation.status = InvitationStatus.ACCEPTED
        invitation.user_id = user.user_id
        invitation.touch()

        UserActivity.log(user.user_id, 'accept_invitation', details=f"Joined as {user.role}")
        db.session.commit()

        send_welcome_email(user.email, user.name)

        logger.info(f"Invitation accepted by {user.email} ({user.role})")
        return user, user.generate_tokens()

    @staticmethod
    def request_password_reset(email):
        """
        Запрос сброса пароля. Результат не раскрывает, существует ли пользователь.
        """
        user = User.find_by_email(email)

        if not user or user.status == UserStatus.SUSPENDED:
            logger.info(f"Password reset requested for unknown or inactive email {email}")
            return

        reset_token = PasswordResetToken.issue(
            user.email,
            generate_secure_token(),
            current_app.config['PASSWORD_RESET_EXPIRES_HOURS']
        )
        send_password_reset_email(user.email, user.name, reset_token.token)
        logger.info(f"Password reset token issued for user {user.user_id}")

    @staticmethod
    def reset_password(token, password):
        """
        Установка нового пароля по токену

        Raises:
            InvalidTokenError: Токен не найден или истек
            UserNotFoundError: Пользователь токена не найден
        """
        reset_token = PasswordResetToken.find_by_token(token)
        if not reset_token:
            raise InvalidTokenError()

        if reset_token.is_expired:
            db.session.delete(reset_token)
            db.session.commit()
            raise InvalidTokenError("Token has expired. Please request a new password reset.")

        user = User.find_by_email(reset_token.email)
        if not user:
            raise UserNotFoundError()

        user.set_password(password)
        if user.status == UserStatus.PENDING:
            user.status = UserStatus.ACTIVE
        user.touch()

        db.session.delete(reset_token)
        UserActivity.log(user.user_id, 'reset_password', details="Password reset via email link")
        db.session.commit()

        logger.info(f"Password reset for user {user.user_id}")
        return user


class SetupService:
    """Первичная настройка системы"""

    @staticmethod
    def super_admin_exists():
        return User.query.filter(User.role == UserRole.SUPER_ADMIN).first() is not None

    @staticmethod
    def create_super_admin(email, name, password):
        """
        Создание первого супер-администратора

        Raises:
            ConflictError: Супер-администратор уже существует
        """
        if SetupService.super_admin_exists():
            raise ConflictError("Super admin already exists")

        if User.find_by_email(email):
            raise EmailAlreadyExistsError(email)

        user = User(
            email=email.strip().lower(),
            name=name,
            role=UserRole.SUPER_ADMIN,
            status=UserStatus.ACTIVE,
            email_verified_at=utcnow()
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        logger.info(f"Super admin created: {user.user_id} ({user.email})")
        return user
