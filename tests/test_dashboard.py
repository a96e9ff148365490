"""
Тесты дашборда
"""

from dealership.blueprints.dashboard.services import DashboardService
from dealership.models import (
    Car, Member, Ticket, TicketStatus, Service, ServiceBooking, BookingStatus,
    SellListingOriginal, ListingStatus, UserActivity, utcnow
)


def seed_activity(make_brand, make_listing):
    brand = make_brand('Toyota')
    for name in ('Vitz', 'Premio'):
        Car.create(name=name, price=800000, brand_id=brand.brand_id)
    make_listing(car_name='Axio')
    make_listing(car_name='Fielder', status=ListingStatus.REJECTED)
    Ticket.create(
        ticket_number='TKT-1001', name='Mary', email='mary@example.com',
        message='Hello', status=TicketStatus.OPEN
    )
    Member.create(name='Alice', email='alice@example.com')


class TestDashboardStats:

    def test_counts(self, client, auth_headers, make_brand, make_listing):
        seed_activity(make_brand, make_listing)

        response = client.get('/api/dashboard/stats', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['stats'] == {
            'cars_count': 2,
            'brands_count': 1,
            'members_count': 1,
            'pending_listings_count': 1,
        }

    def test_recent_activity_is_limited_and_sorted(self, app, make_brand, make_listing):
        seed_activity(make_brand, make_listing)

        activity = DashboardService.get_recent_activity()

        assert len(activity) == 5
        dates = [item['date'] for item in activity]
        assert dates == sorted(dates, reverse=True)
        assert {item['type'] for item in activity} <= {'Car Added', 'Listing', 'Ticket', 'Member Joined'}

    def test_member_items_are_marked_new(self, app):
        Member.create(name='Alice', email='alice@example.com')
        assert DashboardService.get_recent_activity() == [{
            'id': 1, 'type': 'Member Joined', 'name': 'Alice', 'status': 'NEW',
            'date': Member.query.one().created_at.isoformat()
        }]

    def test_requires_admin(self, client, staff_headers):
        assert client.get('/api/dashboard/stats', headers=staff_headers).status_code == 403


class TestReports:

    def test_user_activity(self, client, auth_headers, admin_user, db, make_listing):
        UserActivity.log(admin_user.user_id, 'login', details='Logged in')
        listing = make_listing()
        db.session.add(SellListingOriginal.snapshot(listing, 'Honda', None))
        db.session.commit()

        response = client.get('/api/user-activity?limit=10', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['user_activities'][0]['action'] == 'login'
        assert data['user_activities'][0]['user']['email'] == 'admin@example.com'
        assert data['sell_listings'][0]['car_name'] == 'Civic 1.8 EX'
        assert data['service_bookings'] == []

    def test_business_performance(self, client, auth_headers, make_listing):
        service = Service.create(name='Oil change', price=4500)
        for status in (BookingStatus.PENDING, BookingStatus.PENDING, BookingStatus.COMPLETED):
            ServiceBooking.create(
                service_id=service.service_id, name='Peter', email='peter@example.com',
                phone_number='+254733000000', car_details='Mazda',
                preferred_date=utcnow(), status=status
            )
        make_listing()
        make_listing(status=ListingStatus.REJECTED)

        response = client.get('/api/business-performance', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['services'] == [{'service_id': service.service_id, 'name': 'Oil change', 'price': 4500.0}]
        assert len(data['service_bookings']) == 3
        assert data['stats']['total_listings'] == 0
        assert data['stats']['pending_approval'] == 1
        assert data['stats']['bookings_by_status'] == {
            'PENDING': 2, 'CONFIRMED': 0, 'COMPLETED': 1, 'CANCELLED': 0, 'RESCHEDULED': 0
        }
