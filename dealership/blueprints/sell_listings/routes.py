# dealership/blueprints/sell_listings/routes.py
from flask import request, jsonify, g
from dealership.blueprints.sell_listings import bp
from dealership.blueprints.sell_listings.schemas import (
    CreateSellListingSchema, ListingStatusUpdateSchema, ListingImagesSchema
)
from dealership.blueprints.sell_listings.services import SellListingService
from dealership.extensions import limiter
from dealership.models.listing import ListingStatus
from dealership.utils.decorators import validate_json, handle_errors, admin_required, paginate
from dealership.utils.exceptions import ValidationError
from dealership.utils.helpers import build_response
from dealership.utils.pagination import create_pagination_response


@bp.route('/', methods=['GET'])
@handle_errors
@admin_required
@paginate()
def get_listings():
    """Список заявок с фильтрами status и search"""
    status = request.args.get('status')
    if status and status not in ListingStatus.ALL:
        raise ValidationError(f"Invalid status: {status}", 'status')

    filters = {
        'status': status,
        'search': request.args.get('search'),
    }
    filters.update(g.pagination)

    pagination = SellListingService.list_listings(filters)
    return jsonify(create_pagination_response(pagination))


@bp.route('/', methods=['POST'])
@limiter.limit("10 per minute")
@handle_errors
@validate_json(CreateSellListingSchema)
def create_listing():
    """Заявка на продажу автомобиля с публичного сайта"""
    listing = SellListingService.create_listing(g.validated_data)
    return jsonify(build_response(
        listing.to_dict(include_details=True),
        "Listing submitted successfully"
    )), 201


@bp.route('/<int:listing_id>', methods=['GET'])
@handle_errors
@admin_required
def get_listing(listing_id):
    listing, images = SellListingService.get_listing(listing_id)
    return jsonify(build_response(listing.to_dict(include_details=True, images=images)))


@bp.route('/<int:listing_id>', methods=['PATCH'])
@handle_errors
@admin_required
@validate_json(ListingStatusUpdateSchema)
def update_listing_status(listing_id):
    """Одобрение, отклонение или смена статуса заявки"""
    data = g.validated_data

    listing = SellListingService.update_listing_status(
        listing_id,
        data['status'],
        rejection_reason=data.get('rejection_reason'),
        edited_listing=data.get('edited_listing')
    )

    _, images = SellListingService.get_listing(listing.listing_id)
    return jsonify(build_response(
        listing.to_dict(include_details=True, images=images),
        f"Listing status updated to {listing.status}"
    ))


@bp.route('/<int:listing_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_listing(listing_id):
    SellListingService.delete_listing(listing_id)
    return jsonify({'success': True, 'message': "Listing deleted successfully"})


@bp.route('/<int:listing_id>/images', methods=['GET'])
@handle_errors
@admin_required
def get_listing_images(listing_id):
    images = SellListingService.get_listing_images(listing_id)
    return jsonify(build_response([image.to_dict() for image in images]))


@bp.route('/<int:listing_id>/images', methods=['POST'])
@handle_errors
@admin_required
@validate_json(ListingImagesSchema)
def add_listing_images(listing_id):
    images = SellListingService.add_listing_images(listing_id, g.validated_data['urls'])
    return jsonify(build_response(
        [image.to_dict() for image in images],
        "Images added successfully"
    )), 201
