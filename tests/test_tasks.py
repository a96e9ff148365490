"""
Тесты задач очистки
"""

from datetime import timedelta

from dealership.models import (
    Invitation, InvitationStatus, PasswordResetToken, RevokedToken, utcnow
)
from dealership.tasks import init_celery
from dealership.tasks.cleanup import (
    cleanup_expired_reset_tokens, expire_invitations, cleanup_revoked_tokens
)


class TestCleanupTasks:

    def test_expired_reset_tokens(self, app):
        PasswordResetToken.issue('a@example.com', 'old', -1)
        PasswordResetToken.issue('b@example.com', 'fresh', 24)

        assert cleanup_expired_reset_tokens() == {'deleted_reset_tokens': 1}
        assert [token.token for token in PasswordResetToken.query] == ['fresh']

    def test_expire_invitations(self, admin_user):
        for token, days in (('late', -1), ('live', 3)):
            Invitation.create(
                email=f'{token}@example.com', token=token, inviter_id=admin_user.user_id,
                expires_at=utcnow() + timedelta(days=days)
            )

        assert expire_invitations() == {'expired_invitations': 1}
        assert Invitation.find_by_token('late').status == InvitationStatus.EXPIRED
        assert Invitation.find_by_token('live').status == InvitationStatus.PENDING

    def test_revoked_tokens_older_than_refresh_lifetime(self, app, admin_user):
        lifetime = app.config['JWT_REFRESH_TOKEN_EXPIRES']
        RevokedToken.create(jti='old', user_id=admin_user.user_id, revoked_at=utcnow() - lifetime - timedelta(hours=1))
        RevokedToken.create(jti='new', user_id=admin_user.user_id)

        assert cleanup_revoked_tokens() == {'deleted_revoked_tokens': 1}
        assert RevokedToken.is_jti_blacklisted('new')
        assert not RevokedToken.is_jti_blacklisted('old')

    def test_tasks_registered_with_schedule(self, app):
        celery = init_celery(app)

        for name in ('cleanup.expired_reset_tokens', 'cleanup.expire_invitations', 'cleanup.revoked_tokens'):
            assert name in celery.tasks

        tasks = {entry['task'] for entry in celery.conf.beat_schedule.values()}
        assert tasks == {'cleanup.expired_reset_tokens', 'cleanup.expire_invitations', 'cleanup.revoked_tokens'}

    def test_eager_run(self, app):
        celery = init_celery(app)
        PasswordResetToken.issue('a@example.com', 'old', -1)

        result = celery.tasks['cleanup.expired_reset_tokens'].delay()

        assert result.get() == {'deleted_reset_tokens': 1}
