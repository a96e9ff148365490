"""
Тесты обращений в поддержку, каталога услуг и записей на сервис
"""

from datetime import datetime

from dealership.blueprints.support.services import SupportService
from dealership.extensions import mail
from dealership.models import (
    Ticket, TicketStatus, Service, ServiceBooking, BookingStatus
)


TICKET = {
    'name': 'Mary Client',
    'email': 'mary@example.com',
    'phone_number': '+254722000000',
    'message': 'When is the next test drive day?',
}


def make_service(name='Oil change', **overrides):
    values = {'name': name, 'price': 4500, 'duration': '1 hour'}
    values.update(overrides)
    return Service.create(**values)


def booking_payload(service, **overrides):
    payload = {
        'service_id': service.service_id,
        'name': 'Peter Driver',
        'email': 'peter@example.com',
        'phone_number': '+254733000000',
        'car_details': 'Mazda CX-5 2018',
        'preferred_date': '2026-11-02T10:00:00Z',
    }
    payload.update(overrides)
    return payload


# ══════════════════════════════════════════════
# Тикеты
# ══════════════════════════════════════════════

class TestTickets:

    def test_public_create_numbers_and_mails(self, client):
        with mail.record_messages() as outbox:
            first = client.post('/api/tickets', json=TICKET)
            second = client.post('/api/tickets', json=TICKET)

        assert first.status_code == 201
        assert first.get_json()['data']['ticket_number'] == 'TKT-1001'
        assert first.get_json()['data']['status'] == TicketStatus.OPEN
        assert second.get_json()['data']['ticket_number'] == 'TKT-1002'

        assert len(outbox) == 2
        assert outbox[0].recipients == ['mary@example.com']
        assert 'TKT-1001' in outbox[0].subject

    def test_ticket_number_skips_taken_numbers(self, app):
        Ticket.create(ticket_number='TKT-1002', status=TicketStatus.OPEN, **TICKET)
        assert SupportService.next_ticket_number() == 'TKT-1003'

    def test_create_validation(self, client):
        response = client.post('/api/tickets', json={'name': 'Mary', 'email': 'broken'})
        assert response.status_code == 400
        assert Ticket.query.count() == 0

    def test_list_is_admin_only(self, client, auth_headers):
        client.post('/api/tickets', json=TICKET)
        client.post('/api/tickets', json=dict(TICKET, name='Other', email='other@example.com'))

        assert client.get('/api/tickets').status_code == 401

        response = client.get('/api/tickets?search=other', headers=auth_headers)
        assert [ticket['name'] for ticket in response.get_json()['data']] == ['Other']

    def test_update_with_response(self, client, auth_headers):
        ticket_id = client.post('/api/tickets', json=TICKET).get_json()['data']['ticket_id']

        with mail.record_messages() as outbox:
            response = client.patch(f'/api/tickets/{ticket_id}', json={
                'status': 'RESOLVED', 'response': 'Every Saturday from 10am.'
            }, headers=auth_headers)

        assert response.status_code == 200
        assert len(outbox) == 1
        assert 'Every Saturday from 10am.' in outbox[0].body

        data = client.get(f'/api/tickets/{ticket_id}', headers=auth_headers).get_json()['data']
        assert data['status'] == TicketStatus.RESOLVED
        assert [r['message'] for r in data['responses']] == ['Every Saturday from 10am.']

    def test_update_invalid_status(self, client, auth_headers):
        ticket_id = client.post('/api/tickets', json=TICKET).get_json()['data']['ticket_id']
        response = client.patch(f'/api/tickets/{ticket_id}', json={'status': 'LOST'}, headers=auth_headers)
        assert response.status_code == 400

    def test_delete(self, client, auth_headers):
        ticket_id = client.post('/api/tickets', json=TICKET).get_json()['data']['ticket_id']

        assert client.delete(f'/api/tickets/{ticket_id}', headers=auth_headers).status_code == 200
        assert client.get(f'/api/tickets/{ticket_id}', headers=auth_headers).status_code == 404


# ══════════════════════════════════════════════
# Услуги
# ══════════════════════════════════════════════

class TestServices:

    def test_crud(self, client, auth_headers):
        response = client.post('/api/services', json={'name': 'Wheel alignment', 'price': 3000}, headers=auth_headers)
        assert response.status_code == 201
        service_id = response.get_json()['data']['service_id']

        response = client.patch(f'/api/services/{service_id}', json={'is_active': False}, headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['name'] == 'Wheel alignment'
        assert response.get_json()['data']['is_active'] is False

        assert client.get('/api/services?active=true').get_json()['data'] == []
        assert len(client.get('/api/services').get_json()['data']) == 1

        assert client.delete(f'/api/services/{service_id}', headers=auth_headers).status_code == 200
        assert Service.query.count() == 0

    def test_delete_with_bookings_is_refused(self, client, auth_headers):
        service = make_service()
        client.post('/api/service-bookings', json=booking_payload(service))

        assert client.delete(f'/api/services/{service.service_id}', headers=auth_headers).status_code == 409


# ══════════════════════════════════════════════
# Записи на сервис
# ══════════════════════════════════════════════

class TestBookings:

    def test_public_create(self, client):
        service = make_service()

        with mail.record_messages() as outbox:
            response = client.post('/api/service-bookings', json=booking_payload(service))

        assert response.status_code == 201
        assert response.get_json()['data']['status'] == BookingStatus.PENDING
        assert len(outbox) == 1
        assert outbox[0].recipients == ['peter@example.com']

        booking = ServiceBooking.query.one()
        assert booking.preferred_date == datetime(2026, 11, 2, 10, 0)

    def test_unknown_service(self, client):
        response = client.post('/api/service-bookings', json={
            'service_id': 404, 'name': 'Peter', 'email': 'peter@example.com',
            'phone_number': '+254733000000', 'car_details': 'Mazda',
            'preferred_date': '2026-11-02T10:00:00'
        })
        assert response.status_code == 404
        assert ServiceBooking.query.count() == 0

    def test_alternate_date_must_differ(self, client):
        service = make_service()
        payload = booking_payload(service, alternate_date='2026-11-02T10:00:00Z')
        assert client.post('/api/service-bookings', json=payload).status_code == 400

    def test_status_update_with_response(self, client, auth_headers):
        service = make_service()
        booking_id = client.post(
            '/api/service-bookings', json=booking_payload(service)
        ).get_json()['data']['booking_id']

        with mail.record_messages() as outbox:
            response = client.patch(f'/api/service-bookings/{booking_id}', json={
                'status': 'CONFIRMED', 'response': 'See you at 10.'
            }, headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['status'] == BookingStatus.CONFIRMED
        assert [r['message'] for r in data['responses']] == ['See you at 10.']
        assert len(outbox) == 2

    def test_add_response_and_filter(self, client, auth_headers):
        oil = make_service()
        tyres = make_service('Tyre change')
        booking_id = client.post(
            '/api/service-bookings', json=booking_payload(oil)
        ).get_json()['data']['booking_id']
        client.post('/api/service-bookings', json=booking_payload(tyres))

        response = client.post(
            f'/api/service-bookings/{booking_id}/responses',
            json={'message': 'Please bring the service book.'},
            headers=auth_headers
        )
        assert response.status_code == 201

        listing = client.get(f'/api/service-bookings?service_id={tyres.service_id}', headers=auth_headers)
        assert len(listing.get_json()['data']) == 1
        assert client.get('/api/service-bookings?status=LOST', headers=auth_headers).status_code == 400

    def test_delete(self, client, auth_headers):
        service = make_service()
        booking_id = client.post(
            '/api/service-bookings', json=booking_payload(service)
        ).get_json()['data']['booking_id']

        assert client.delete(f'/api/service-bookings/{booking_id}', headers=auth_headers).status_code == 200
        assert ServiceBooking.query.count() == 0
