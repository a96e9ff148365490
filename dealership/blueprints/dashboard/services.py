# dealership/blueprints/dashboard/services.py
"""
Сервис статистики для дашборда
"""

import logging
from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import joinedload
from dealership.extensions import db, cache
from dealership.models.base import serialize_value
from dealership.models.car import Brand, Car
from dealership.models.listing import SellListing, SellListingOriginal, ListingStatus
from dealership.models.member import Member
from dealership.models.service import Service, ServiceBooking, BookingStatus
from dealership.models.support import Ticket
from dealership.models.user import UserActivity

logger = logging.getLogger(__name__)

DASHBOARD_STATS_CACHE_KEY = 'dashboard_stats'
RECENT_ITEMS_PER_SOURCE = 3
RECENT_ACTIVITY_LIMIT = 5


class DashboardService:
    """Сервис агрегированной статистики"""

    @staticmethod
    def get_stats():
        """
        Счетчики и последние события для главной страницы.
        Результат кэшируется на DASHBOARD_CACHE_TIMEOUT секунд.
        """
        stats = cache.get(DASHBOARD_STATS_CACHE_KEY)
        if stats is not None:
            return stats

        stats = {
            'stats': {
                'cars_count': Car.query.count(),
                'brands_count': Brand.query.count(),
                'members_count': Member.query.count(),
                'pending_listings_count': SellListing.query.filter(
                    SellListing.status == ListingStatus.PENDING
                ).count(),
            },
            'recent_activity': DashboardService.get_recent_activity()
        }

        cache.set(
            DASHBOARD_STATS_CACHE_KEY, stats,
            timeout=current_app.config.get('DASHBOARD_CACHE_TIMEOUT', 60)
        )
        return stats

    @staticmethod
    def get_recent_activity(limit=RECENT_ACTIVITY_LIMIT):
        """Последние события из автомобилей, заявок, тикетов и участников"""

        def latest(model):
            return model.query.order_by(model.created_at.desc()).limit(RECENT_ITEMS_PER_SOURCE).all()

        activity = []
        activity.extend({
            'id': car.car_id, 'type': 'Car Added', 'name': car.name,
            'status': car.status, 'date': car.created_at
        } for car in latest(Car))
        activity.extend({
            'id': listing.listing_id, 'type': 'Listing', 'name': listing.car_name,
            'status': listing.status, 'date': listing.created_at
        } for listing in latest(SellListing))
        activity.extend({
            'id': ticket.ticket_id, 'type': 'Ticket', 'name': ticket.ticket_number,
            'status': ticket.status, 'date': ticket.created_at
        } for ticket in latest(Ticket))
        activity.extend({
            'id': member.member_id, 'type': 'Member Joined', 'name': member.name,
            'status': 'NEW', 'date': member.created_at
        } for member in latest(Member))

        activity.sort(key=lambda item: item['date'], reverse=True)

        return [
            dict(item, date=serialize_value(item['date']))
            for item in activity[:limit]
        ]

    @staticmethod
    def get_user_activity(limit=50):
        """Журнал действий сотрудников, архив одобренных заявок и записи на сервис"""
        activities = UserActivity.query.options(
            joinedload(UserActivity.user)
        ).order_by(UserActivity.created_at.desc()).limit(limit).all()

        originals = SellListingOriginal.query.order_by(
            SellListingOriginal.updated_at.desc()
        ).limit(limit).all()

        bookings = ServiceBooking.query.options(
            joinedload(ServiceBooking.service)
        ).order_by(ServiceBooking.updated_at.desc()).limit(limit).all()

        return {
            'user_activities': [activity.to_dict() for activity in activities],
            'sell_listings': [original.to_summary() for original in originals],
            'service_bookings': [booking.to_dict() for booking in bookings]
        }

    @staticmethod
    def get_business_performance():
        """Архив заявок, записи на сервис, услуги и итоговые показатели"""
        originals = SellListingOriginal.query.order_by(SellListingOriginal.updated_at.desc()).all()
        bookings = ServiceBooking.query.options(
            joinedload(ServiceBooking.service)
        ).order_by(ServiceBooking.created_at.desc()).all()
        services = Service.query.order_by(Service.name).all()

        status_counts = dict(
            db.session.query(ServiceBooking.status, func.count(ServiceBooking.booking_id))
            .group_by(ServiceBooking.status)
            .all()
        )
        bookings_by_status = {status: status_counts.get(status, 0) for status in BookingStatus.ALL}

        return {
            'sell_listings': [original.to_summary() for original in originals],
            'service_bookings': [booking.to_dict() for booking in bookings],
            'services': [service.to_brief() for service in services],
            'stats': {
                'total_listings': len(originals),
                'total_sold': sum(1 for item in originals if item.status == ListingStatus.SOLD),
                'pending_approval': SellListing.query.filter(
                    SellListing.status == ListingStatus.PENDING
                ).count(),
                'bookings_by_status': bookings_by_status
            }
        }
