# dealership/blueprints/dashboard/routes.py
from flask import request, jsonify
from dealership.blueprints.dashboard import bp
from dealership.blueprints.dashboard.services import DashboardService
from dealership.utils.decorators import handle_errors, admin_required
from dealership.utils.helpers import build_response


@bp.route('/dashboard/stats', methods=['GET'])
@handle_errors
@admin_required
def get_dashboard_stats():
    """Счетчики и последние события"""
    return jsonify(build_response(DashboardService.get_stats()))


@bp.route('/user-activity', methods=['GET'])
@handle_errors
@admin_required
def get_user_activity():
    limit = min(max(request.args.get('limit', 50, type=int), 1), 500)
    return jsonify(build_response(DashboardService.get_user_activity(limit)))


@bp.route('/business-performance', methods=['GET'])
@handle_errors
@admin_required
def get_business_performance():
    return jsonify(build_response(DashboardService.get_business_performance()))
