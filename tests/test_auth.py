"""
Тесты аутентификации сотрудников

Проверяется:
- вход, выход, обновление токена
- приглашения и их принятие
- сброс пароля
- создание первого супер-администратора
"""

from datetime import timedelta

from dealership.extensions import mail
from dealership.models import (
    User, UserRole, UserStatus, Invitation, InvitationStatus,
    PasswordResetToken, UserActivity, utcnow
)


def login(client, email='admin@example.com', password='secret-password'):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


def make_invitation(inviter, email='new@example.com', role=UserRole.USER, token='invite-token',
                    expires_in=timedelta(days=7), status=InvitationStatus.PENDING):
    return Invitation.create(
        email=email, role=role, token=token, status=status,
        expires_at=utcnow() + expires_in, inviter_id=inviter.user_id
    )


# ══════════════════════════════════════════════
# Вход и токены
# ══════════════════════════════════════════════

class TestLogin:

    def test_login_success(self, client, admin_user):
        response = login(client)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['user']['email'] == 'admin@example.com'
        assert data['tokens']['access_token']
        assert data['tokens']['refresh_token']

        user = User.get_by_id(admin_user.user_id)
        assert user.last_login is not None
        assert UserActivity.query.filter_by(user_id=user.user_id, action='login').count() == 1

    def test_login_is_case_insensitive_on_email(self, client, admin_user):
        assert login(client, email='Admin@Example.com').status_code == 200

    def test_wrong_password(self, client, admin_user):
        response = login(client, password='wrong')
        assert response.status_code == 401
        assert response.get_json()['error'] == 'InvalidCredentialsError'

    def test_unknown_user(self, client):
        assert login(client, email='ghost@example.com').status_code == 401

    def test_suspended_user(self, client, db, admin_user):
        admin_user.status = UserStatus.SUSPENDED
        db.session.commit()

        assert login(client).status_code == 403

    def test_pending_user(self, client, db, admin_user):
        admin_user.status = UserStatus.PENDING
        db.session.commit()

        assert login(client).status_code == 401

    def test_me(self, client, auth_headers):
        response = client.get('/api/auth/me', headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['role'] == UserRole.ADMIN

    def test_me_without_token(self, client):
        assert client.get('/api/auth/me').status_code == 401

    def test_logout_revokes_token(self, client, admin_user):
        tokens = login(client).get_json()['data']['tokens']
        headers = bearer(tokens['access_token'])

        assert client.post('/api/auth/logout', headers=headers).status_code == 200

        response = client.get('/api/auth/me', headers=headers)
        assert response.status_code == 401
        assert response.get_json()['message'] == 'Token has been revoked'

    def test_refresh(self, client, admin_user):
        tokens = login(client).get_json()['data']['tokens']

        response = client.post('/api/auth/refresh', headers=bearer(tokens['refresh_token']))

        assert response.status_code == 200
        access_token = response.get_json()['data']['access_token']
        assert client.get('/api/auth/me', headers=bearer(access_token)).status_code == 200

    def test_refresh_rejects_access_token(self, client, admin_user):
        tokens = login(client).get_json()['data']['tokens']
        response = client.post('/api/auth/refresh', headers=bearer(tokens['access_token']))
        assert response.status_code == 401
        assert response.get_json() == {'error': 'AuthenticationError', 'message': 'Invalid token'}


# ══════════════════════════════════════════════
# Приглашения
# ══════════════════════════════════════════════

class TestInvitations:

    def test_create_invitation_sends_mail(self, client, auth_headers):
        with mail.record_messages() as outbox:
            response = client.post(
                '/api/auth/invitation',
                json={'email': 'New.Person@example.com', 'role': 'USER'},
                headers=auth_headers
            )

        assert response.status_code == 201
        invitation = Invitation.query.one()
        assert invitation.email == 'new.person@example.com'
        assert invitation.status == InvitationStatus.PENDING
        assert len(outbox) == 1
        assert outbox[0].recipients == ['new.person@example.com']
        assert invitation.token in outbox[0].body

    def test_invitation_for_existing_user(self, client, auth_headers, staff_user):
        response = client.post(
            '/api/auth/invitation', json={'email': staff_user.email}, headers=auth_headers
        )
        assert response.status_code == 409

    def test_duplicate_pending_invitation(self, client, auth_headers, admin_user):
        make_invitation(admin_user)
        response = client.post(
            '/api/auth/invitation', json={'email': 'new@example.com'}, headers=auth_headers
        )
        assert response.status_code == 409

    def test_only_super_admin_invites_super_admin(self, client, auth_headers, super_admin_headers):
        payload = {'email': 'boss@example.com', 'role': 'SUPER_ADMIN'}

        assert client.post('/api/auth/invitation', json=payload, headers=auth_headers).status_code == 403
        assert client.post('/api/auth/invitation', json=payload, headers=super_admin_headers).status_code == 201

    def test_staff_cannot_invite(self, client, staff_headers):
        response = client.post(
            '/api/auth/invitation', json={'email': 'x@example.com'}, headers=staff_headers
        )
        assert response.status_code == 403

    def test_invalid_email(self, client, auth_headers):
        response = client.post('/api/auth/invitation', json={'email': 'not-an-email'}, headers=auth_headers)
        assert response.status_code == 400

    def test_get_invitation(self, client, admin_user):
        make_invitation(admin_user)

        response = client.get('/api/auth/invitation?token=invite-token')

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['email'] == 'new@example.com'
        assert data['expired'] is False
        assert data['accepted'] is False

    def test_get_unknown_invitation(self, client):
        assert client.get('/api/auth/invitation?token=nope').status_code == 404
        assert client.get('/api/auth/invitation').status_code == 400

    def test_accept_invitation(self, client, admin_user):
        make_invitation(admin_user, role=UserRole.ADMIN)

        with mail.record_messages() as outbox:
            response = client.post('/api/auth/accept-invitation', json={
                'token': 'invite-token', 'name': 'New Admin', 'password': 'long-password'
            })

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['user']['role'] == UserRole.ADMIN
        assert data['tokens']['access_token']
        assert len(outbox) == 1

        user = User.find_by_email('new@example.com')
        assert user.status == UserStatus.ACTIVE
        assert user.check_password('long-password')
        assert Invitation.query.one().status == InvitationStatus.ACCEPTED

    def test_accept_expired_invitation(self, client, admin_user):
        make_invitation(admin_user, expires_in=timedelta(days=-1))

        response = client.post('/api/auth/accept-invitation', json={
            'token': 'invite-token', 'name': 'Late', 'password': 'long-password'
        })

        assert response.status_code == 400
        assert User.find_by_email('new@example.com') is None

    def test_accept_twice(self, client, admin_user):
        make_invitation(admin_user)
        payload = {'token': 'invite-token', 'name': 'New', 'password': 'long-password'}

        assert client.post('/api/auth/accept-invitation', json=payload).status_code == 200
        assert client.post('/api/auth/accept-invitation', json=payload).status_code == 400


# ══════════════════════════════════════════════
# Сброс пароля
# ══════════════════════════════════════════════

class TestPasswordReset:

    def test_forgot_password_for_unknown_email(self, client):
        with mail.record_messages() as outbox:
            response = client.post('/api/auth/forgot-password', json={'email': 'ghost@example.com'})

        assert response.status_code == 200
        assert outbox == []
        assert PasswordResetToken.query.count() == 0

    def test_forgot_password_issues_token(self, client, admin_user):
        with mail.record_messages() as outbox:
            response = client.post('/api/auth/forgot-password', json={'email': 'admin@example.com'})

        assert response.status_code == 200
        reset_token = PasswordResetToken.query.one()
        assert reset_token.email == 'admin@example.com'
        assert timedelta(hours=23) < reset_token.expires_at - utcnow() <= timedelta(hours=24)
        assert len(outbox) == 1
        assert reset_token.token in outbox[0].body

    def test_reset_password(self, client, db, admin_user):
        admin_user.status = UserStatus.PENDING
        db.session.commit()
        PasswordResetToken.issue('admin@example.com', 'reset-token', 24)

        response = client.post('/api/auth/reset-password', json={
            'token': 'reset-token', 'password': 'brand-new-password'
        })

        assert response.status_code == 200
        user = User.get_by_id(admin_user.user_id)
        assert user.check_password('brand-new-password')
        assert user.status == UserStatus.ACTIVE
        assert PasswordResetToken.query.count() == 0

    def test_expired_token_is_deleted(self, client, admin_user):
        PasswordResetToken.issue('admin@example.com', 'old-token', -1)

        response = client.post('/api/auth/reset-password', json={
            'token': 'old-token', 'password': 'brand-new-password'
        })

        assert response.status_code == 400
        assert PasswordResetToken.query.count() == 0
        assert User.get_by_id(admin_user.user_id).check_password('secret-password')

    def test_short_password(self, client, admin_user):
        PasswordResetToken.issue('admin@example.com', 'reset-token', 24)
        response = client.post('/api/auth/reset-password', json={'token': 'reset-token', 'password': 'short'})
        assert response.status_code == 400


# ══════════════════════════════════════════════
# Первичная настройка
# ══════════════════════════════════════════════

class TestSuperAdminSetup:

    payload = {'email': 'Owner@example.com', 'name': 'Owner', 'password': 'owner-password'}

    def test_setup_requires_token(self, client):
        response = client.post('/api/setup/super-admin', json=self.payload)
        assert response.status_code == 401
        assert User.query.count() == 0

        response = client.post(
            '/api/setup/super-admin', json=self.payload, headers={'X-Setup-Token': 'wrong'}
        )
        assert response.status_code == 401

    def test_create_super_admin_once(self, app, client):
        headers = {'X-Setup-Token': app.config['SETUP_TOKEN']}

        assert client.get('/api/setup/super-admin').get_json()['data'] == {'exists': False}

        response = client.post('/api/setup/super-admin', json=self.payload, headers=headers)
        assert response.status_code == 201
        assert response.get_json()['data']['email'] == 'owner@example.com'
        assert response.get_json()['data']['role'] == UserRole.SUPER_ADMIN

        assert client.get('/api/setup/super-admin').get_json()['data'] == {'exists': True}

        second = dict(self.payload, email='other@example.com')
        assert client.post('/api/setup/super-admin', json=second, headers=headers).status_code == 409
