# dealership/blueprints/brands/routes.py
from flask import jsonify, g
from dealership.blueprints.brands import bp
from dealership.blueprints.brands.schemas import BrandSchema, UpdateBrandSchema
from dealership.blueprints.brands.services import BrandService
from dealership.utils.decorators import validate_json, handle_errors, admin_required
from dealership.utils.helpers import build_response


@bp.route('/', methods=['GET'])
@handle_errors
def get_brands():
    """Список марок с количеством автомобилей"""
    brands = BrandService.get_brands()
    return jsonify(build_response([brand.to_dict() for brand in brands]))


@bp.route('/<int:brand_id>', methods=['GET'])
@handle_errors
def get_brand(brand_id):
    """Марка со списком ее автомобилей"""
    brand = BrandService.get_brand(brand_id)
    return jsonify(build_response(brand.to_dict(include_cars=True)))


@bp.route('/', methods=['POST'])
@handle_errors
@admin_required
@validate_json(BrandSchema)
def create_brand():
    brand = BrandService.create_brand(g.validated_data)
    return jsonify(build_response(brand.to_dict(), "Brand created successfully")), 201


@bp.route('/<int:brand_id>', methods=['PUT', 'PATCH'])
@handle_errors
@admin_required
@validate_json(UpdateBrandSchema)
def update_brand(brand_id):
    brand = BrandService.update_brand(brand_id, g.validated_data)
    return jsonify(build_response(brand.to_dict(), "Brand updated successfully"))


@bp.route('/<int:brand_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_brand(brand_id):
    BrandService.delete_brand(brand_id)
    return jsonify({'success': True, 'message': "Brand deleted successfully"})
