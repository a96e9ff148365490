# dealership/blueprints/service_center/routes.py
from flask import request, jsonify, g
from dealership.blueprints.service_center import services_bp, bookings_bp
from dealership.blueprints.service_center.schemas import (
    ServiceSchema, CreateBookingSchema, BookingStatusSchema, BookingResponseSchema
)
from dealership.blueprints.service_center.services import ServiceCatalogService, BookingService
from dealership.extensions import limiter
from dealership.models.service import BookingStatus
from dealership.utils.decorators import validate_json, handle_errors, admin_required, paginate
from dealership.utils.exceptions import ValidationError
from dealership.utils.helpers import build_response, parse_bool_arg
from dealership.utils.pagination import create_pagination_response


# Каталог услуг

@services_bp.route('/', methods=['GET'])
@handle_errors
def get_services():
    services = ServiceCatalogService.get_services(active_only=bool(parse_bool_arg('active')))
    return jsonify(build_response([service.to_dict() for service in services]))


@services_bp.route('/<int:service_id>', methods=['GET'])
@handle_errors
def get_service(service_id):
    return jsonify(build_response(ServiceCatalogService.get_service(service_id).to_dict()))


@services_bp.route('/', methods=['POST'])
@handle_errors
@admin_required
@validate_json(ServiceSchema)
def create_service():
    service = ServiceCatalogService.create_service(g.validated_data)
    return jsonify(build_response(service.to_dict(), "Service created successfully")), 201


@services_bp.route('/<int:service_id>', methods=['PUT', 'PATCH'])
@handle_errors
@admin_required
@validate_json(ServiceSchema, partial=True)
def update_service(service_id):
    service = ServiceCatalogService.update_service(service_id, g.validated_data)
    return jsonify(build_response(service.to_dict(), "Service updated successfully"))


@services_bp.route('/<int:service_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_service(service_id):
    ServiceCatalogService.delete_service(service_id)
    return jsonify({'success': True, 'message': "Service deleted successfully"})


# Записи на сервис

@bookings_bp.route('/', methods=['POST'])
@limiter.limit("10 per hour")
@handle_errors
@validate_json(CreateBookingSchema)
def create_booking():
    """Запись на сервис с публичного сайта"""
    booking = BookingService.create_booking(g.validated_data)
    return jsonify(build_response(booking.to_dict(), "Booking created successfully")), 201


@bookings_bp.route('/', methods=['GET'])
@handle_errors
@admin_required
@paginate()
def get_bookings():
    status = request.args.get('status')
    if status and status not in BookingStatus.ALL:
        raise ValidationError(f"Invalid status: {status}", 'status')

    filters = {
        'status': status,
        'service_id': request.args.get('service_id', type=int),
    }
    filters.update(g.pagination)

    pagination = BookingService.get_bookings(filters)
    return jsonify(create_pagination_response(pagination))


@bookings_bp.route('/<int:booking_id>', methods=['GET'])
@handle_errors
@admin_required
def get_booking(booking_id):
    booking = BookingService.get_booking(booking_id)
    return jsonify(build_response(booking.to_dict(include_responses=True)))


@bookings_bp.route('/<int:booking_id>', methods=['PATCH'])
@handle_errors
@admin_required
@validate_json(BookingStatusSchema)
def update_booking_status(booking_id):
    data = g.validated_data
    booking = BookingService.update_status(booking_id, data['status'], data.get('response'))
    return jsonify(build_response(booking.to_dict(include_responses=True), "Booking updated successfully"))


@bookings_bp.route('/<int:booking_id>/responses', methods=['POST'])
@handle_errors
@admin_required
@validate_json(BookingResponseSchema)
def add_booking_response(booking_id):
    response = BookingService.add_response(booking_id, g.validated_data['message'])
    return jsonify(build_response(response.to_dict(), "Response added successfully")), 201


@bookings_bp.route('/<int:booking_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_booking(booking_id):
    BookingService.delete_booking(booking_id)
    return jsonify({'success': True, 'message': "Booking deleted successfully"})
