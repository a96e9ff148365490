# dealership/tasks/cleanup.py
"""
Задачи для очистки данных
"""

import logging
from datetime import timedelta
from flask import current_app
from dealership.extensions import db
from dealership.models.base import utcnow
from dealership.models.user import PasswordResetToken, Invitation, InvitationStatus, RevokedToken

logger = logging.getLogger(__name__)


def cleanup_expired_reset_tokens():
    """Удаление истекших токенов сброса пароля"""
    deleted_count = PasswordResetToken.query.filter(
        PasswordResetToken.expires_at <= utcnow()
    ).delete(synchronize_session=False)

    db.session.commit()

    logger.info(f"Deleted {deleted_count} expired password reset token(s)")
    return {'deleted_reset_tokens': deleted_count}


def expire_invitations():
    """Перевод просроченных приглашений в статус EXPIRED"""
    expired = Invitation.query.filter(
        Invitation.status == InvitationStatus.PENDING,
        Invitation.expires_at <= utcnow()
    ).all()

    for invitation in expired:
        invitation.status = InvitationStatus.EXPIRED
        invitation.touch()

    db.session.commit()

    logger.info(f"Marked {len(expired)} invitation(s) as expired")
    return {'expired_invitations': len(expired)}


def cleanup_revoked_tokens():
    """Удаление отозванных токенов старше срока жизни refresh токена"""
    cutoff_date = utcnow() - current_app.config['JWT_REFRESH_TOKEN_EXPIRES']

    deleted_count = RevokedToken.query.filter(
        RevokedToken.revoked_at <= cutoff_date
    ).delete(synchronize_session=False)

    db.session.commit()

    logger.info(f"Deleted {deleted_count} revoked token(s)")
    return {'deleted_revoked_tokens': deleted_count}


def register_cleanup_tasks(celery):
    """Регистрация задач очистки и расписания celery beat"""
    tasks = {
        'cleanup.expired_reset_tokens': cleanup_expired_reset_tokens,
        'cleanup.expire_invitations': expire_invitations,
        'cleanup.revoked_tokens': cleanup_revoked_tokens,
    }

    for name, func in tasks.items():
        celery.task(name=name)(func)

    celery.conf.beat_schedule = {
        'cleanup-expired-reset-tokens': {
            'task': 'cleanup.expired_reset_tokens',
            'schedule': timedelta(hours=1),
        },
        'expire-invitations': {
            'task': 'cleanup.expire_invitations',
            'schedule': timedelta(hours=1),
        },
        'cleanup-revoked-tokens': {
            'task': 'cleanup.revoked_tokens',
            'schedule': timedelta(days=1),
        },
    }
