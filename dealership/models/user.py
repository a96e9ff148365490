# dealership/models/user.py
from datetime import timedelta
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from flask_jwt_extended import create_access_token, create_refresh_token
from dealership.models.base import BaseModel, check_in, utcnow, serialize_value
from dealership.extensions import db


class UserRole:
    """Роли сотрудников"""
    SUPER_ADMIN = 'SUPER_ADMIN'
    ADMIN = 'ADMIN'
    USER = 'USER'

    ALL = (SUPER_ADMIN, ADMIN, USER)
    STAFF_ADMINS = (SUPER_ADMIN, ADMIN)


class UserStatus:
    """Статусы учетной записи"""
    ACTIVE = 'ACTIVE'
    PENDING = 'PENDING'
    SUSPENDED = 'SUSPENDED'

    ALL = (ACTIVE, PENDING, SUSPENDED)


class InvitationStatus:
    """Статусы приглашения"""
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    EXPIRED = 'EXPIRED'

    ALL = (PENDING, ACCEPTED, EXPIRED)


class User(BaseModel):
    """Сотрудник бэк-офиса"""
    __tablename__ = 'users'

    user_id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255))
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER)
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE)
    image = Column(String(500))
    last_login = Column(DateTime)
    email_verified_at = Column(DateTime)
    invited_by_id = Column(Integer, ForeignKey('users.user_id', ondelete='SET NULL'))

    __table_args__ = (
        check_in('role', UserRole.ALL, 'check_user_role'),
        check_in('status', UserStatus.ALL, 'check_user_status'),
    )

    # Отношения
    invited_by = db.relationship('User', remote_side=[user_id])
    activities = db.relationship('UserActivity', back_populates='user', lazy='dynamic')

    def set_password(self, password):
        """Установка пароля с хешированием"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Проверка пароля"""
        return check_password_hash(self.password_hash, password)

    def generate_tokens(self):
        """Генерация JWT токенов"""
        identity = str(self.user_id)

        access_token = create_access_token(identity=identity)
        refresh_token = create_refresh_token(identity=identity)

        return {
            'access_token': access_token,
            'refresh_token': refresh_token
        }

    def update_last_login(self):
        """Обновление времени последнего входа"""
        self.last_login = utcnow()
        db.session.commit()

    @property
    def is_admin(self):
        return self.role in UserRole.STAFF_ADMINS

    @property
    def is_super_admin(self):
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_active(self):
        return self.status == UserStatus.ACTIVE

    @classmethod
    def find_by_email(cls, email):
        """Поиск пользователя по email"""
        return cls.query.filter(cls.email == email.strip().lower()).first()

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'status': self.status,
            'image': self.image,
            'last_login': serialize_value(self.last_login),
            'created_at': serialize_value(self.created_at)
        }

    def __repr__(self):
        return f'<User {self.email}>'


class Invitation(BaseModel):
    """Приглашение нового сотрудника"""
    __tablename__ = 'invitations'

    invitation_id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=UserRole.USER)
    token = Column(String(128), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=InvitationStatus.PENDING)
    inviter_id = Column(Integer, ForeignKey('users.user_id'), nullable=False)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='SET NULL'))

    __table_args__ = (
        check_in('status', InvitationStatus.ALL, 'check_invitation_status'),
    )

    inviter = db.relationship('User', foreign_keys=[inviter_id])
    user = db.relationship('User', foreign_keys=[user_id])

    @property
    def is_expired(self):
        return utcnow() > self.expires_at

    @property
    def is_accepted(self):
        return self.status == InvitationStatus.ACCEPTED

    @classmethod
    def find_by_token(cls, token):
        return cls.query.filter(cls.token == token).first()

    @classmethod
    def find_pending(cls, email):
        """Действующее приглашение для email"""
        return cls.query.filter(
            cls.email == email,
            cls.status == InvitationStatus.PENDING,
            cls.expires_at > utcnow()
        ).first()

    def to_dict(self):
        inviter = self.inviter
        return {
            'email': self.email,
            'role': self.role,
            'inviter_name': (inviter.name or inviter.email) if inviter else None,
            'expired': self.is_expired,
            'accepted': self.is_accepted,
            'updated_at': serialize_value(self.updated_at)
        }


class PasswordResetToken(BaseModel):
    """Одноразовый токен сброса пароля"""
    __tablename__ = 'password_reset_tokens'

    token_id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    @property
    def is_expired(self):
        return utcnow() > self.expires_at

    @classmethod
    def issue(cls, email, token, hours):
        """Создание токена со сроком действия в часах"""
        reset_token = cls(
            email=email,
            token=token,
            expires_at=utcnow() + timedelta(hours=hours)
        )
        return reset_token.save()

    @classmethod
    def find_by_token(cls, token):
        return cls.query.filter(cls.token == token).first()


class RevokedToken(BaseModel):
    """Отозванные JWT токены"""
    __tablename__ = 'revoked_tokens'

    id = Column(Integer, primary_key=True)
    jti = Column(String(120), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    revoked_at = Column(DateTime, default=utcnow)

    @classmethod
    def is_jti_blacklisted(cls, jti):
        """Проверка токена в черном списке"""
        return cls.query.filter(cls.jti == jti).first() is not None

    @classmethod
    def revoke_token(cls, jti, user_id):
        """Отзыв токена"""
        revoked_token = cls(jti=jti, user_id=user_id)
        revoked_token.save()
        return revoked_token


class UserActivity(BaseModel):
    """Журнал действий сотрудников"""
    __tablename__ = 'user_activities'

    activity_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, index=True)
    action = Column(String(100), nullable=False)
    details = Column(String(500))
    ip_address = Column(String(45))
    user_agent = Column(Text)

    user = db.relationship('User', back_populates='activities')

    @classmethod
    def log(cls, user_id, action, details=None, ip_address=None, user_agent=None):
        """Запись действия пользователя (без коммита)"""
        activity = cls(
            user_id=user_id,
            action=action,
            details=details[:500] if details else None,
            ip_address=ip_address,
            user_agent=user_agent
        )
        db.session.add(activity)
        return activity

    def to_dict(self):
        data = super().to_dict()
        data['user'] = {
            'name': self.user.name,
            'email': self.user.email
        } if self.user else None
        return data
