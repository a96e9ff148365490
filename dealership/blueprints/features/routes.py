# dealership/blueprints/features/routes.py
from flask import jsonify, g
from dealership.blueprints.features import bp
from dealership.blueprints.features.schemas import FeatureSchema
from dealership.blueprints.features.services import FeatureService
from dealership.utils.decorators import validate_json, handle_errors, admin_required
from dealership.utils.helpers import build_response


@bp.route('/', methods=['GET'])
@handle_errors
def get_features():
    """Список особенностей с количеством автомобилей"""
    features = FeatureService.get_features()
    return jsonify(build_response([feature.to_dict() for feature in features]))


@bp.route('/<int:feature_id>', methods=['GET'])
@handle_errors
def get_feature(feature_id):
    return jsonify(build_response(FeatureService.get_feature(feature_id).to_dict()))


@bp.route('/', methods=['POST'])
@handle_errors
@admin_required
@validate_json(FeatureSchema)
def create_feature():
    feature = FeatureService.create_feature(g.validated_data['name'])
    return jsonify(build_response(feature.to_dict(), "Feature created successfully")), 201


@bp.route('/<int:feature_id>', methods=['PUT', 'PATCH'])
@handle_errors
@admin_required
@validate_json(FeatureSchema)
def update_feature(feature_id):
    feature = FeatureService.update_feature(feature_id, g.validated_data['name'])
    return jsonify(build_response(feature.to_dict(), "Feature updated successfully"))


@bp.route('/<int:feature_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_feature(feature_id):
    FeatureService.delete_feature(feature_id)
    return jsonify({'success': True, 'message': "Feature deleted successfully"})
