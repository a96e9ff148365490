# dealership/blueprints/cars/routes.py
from flask import request, jsonify, g
from dealership.blueprints.cars import bp
from dealership.blueprints.cars.schemas import CarSchema, UpdateCarSchema, BulkCarSchema
from dealership.blueprints.cars.services import CarService
from dealership.models.car import CarStatus
from dealership.utils.decorators import validate_json, handle_errors, admin_required, paginate
from dealership.utils.exceptions import ValidationError
from dealership.utils.helpers import build_response, parse_bool_arg
from dealership.utils.pagination import create_pagination_response


@bp.route('/', methods=['GET'])
@handle_errors
@paginate()
def search_cars():
    """Поиск автомобилей по марке, статусу и тексту"""
    status = request.args.get('status')
    if status and status not in CarStatus.ALL:
        raise ValidationError(f"Invalid status: {status}", 'status')

    filters = {
        'brand_id': request.args.get('brand_id', type=int),
        'status': status,
        'availability': parse_bool_arg('availability'),
        'search': request.args.get('search'),
    }
    filters.update(g.pagination)

    pagination = CarService.search_cars(filters)
    return jsonify(create_pagination_response(pagination))


@bp.route('/<int:car_id>', methods=['GET'])
@handle_errors
def get_car(car_id):
    car = CarService.get_car(car_id)
    return jsonify(build_response(car.to_dict(include_details=True)))


@bp.route('/', methods=['POST'])
@handle_errors
@admin_required
@validate_json(CarSchema)
def create_car():
    car = CarService.create_car(g.validated_data)
    return jsonify(build_response(car.to_dict(include_details=True), "Car created successfully")), 201


@bp.route('/<int:car_id>', methods=['PUT', 'PATCH'])
@handle_errors
@admin_required
@validate_json(UpdateCarSchema, partial=True)
def update_car(car_id):
    car = CarService.update_car(car_id, g.validated_data)
    return jsonify(build_response(car.to_dict(include_details=True), "Car updated successfully"))


@bp.route('/<int:car_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_car(car_id):
    CarService.delete_car(car_id)
    return jsonify({'success': True, 'message': "Car deleted successfully"})


@bp.route('/bulk', methods=['POST'])
@handle_errors
@admin_required
@validate_json(BulkCarSchema)
def bulk_create_cars():
    """Массовое создание автомобилей с результатом по каждой строке"""
    result = CarService.bulk_create_cars(g.validated_data['cars'])

    status_code = 201 if result['created'] else 400
    return jsonify(build_response(
        result,
        f"Created {result['created']} car(s), {result['failed']} failed"
    )), status_code
