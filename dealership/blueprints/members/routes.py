# dealership/blueprints/members/routes.py
from flask import request, jsonify, g
from dealership.blueprints.members import bp
from dealership.blueprints.members.schemas import MemberStatusSchema
from dealership.blueprints.members.services import MemberService
from dealership.utils.decorators import validate_json, handle_errors, admin_required, paginate
from dealership.utils.helpers import build_response, parse_bool_arg
from dealership.utils.pagination import create_pagination_response


@bp.route('/', methods=['GET'])
@handle_errors
@admin_required
@paginate()
def get_members():
    filters = {
        'is_active': parse_bool_arg('is_active'),
        'search': request.args.get('search'),
    }
    filters.update(g.pagination)

    pagination = MemberService.search_members(filters)
    return jsonify(create_pagination_response(pagination))


@bp.route('/<int:member_id>', methods=['GET'])
@handle_errors
@admin_required
def get_member(member_id):
    return jsonify(build_response(MemberService.get_member(member_id).to_dict()))


@bp.route('/<int:member_id>', methods=['PATCH'])
@handle_errors
@admin_required
@validate_json(MemberStatusSchema)
def update_member_status(member_id):
    """Активация или блокировка участника"""
    member = MemberService.set_active(member_id, g.validated_data['is_active'])
    return jsonify(build_response(member.to_dict(), "Member status updated successfully"))


@bp.route('/<int:member_id>', methods=['DELETE'])
@handle_errors
@admin_required
def delete_member(member_id):
    MemberService.delete_member(member_id)
    return jsonify({'success': True, 'message': "Member deleted successfully"})
